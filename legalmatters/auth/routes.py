import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from legalmatters.database import get_db
from legalmatters.exceptions import ValidationError
from legalmatters.models import User, UserRole
from legalmatters.schemas import MessageResponse
from legalmatters.auth.schemas import SignupRequest, LoginRequest, UserResponse
from legalmatters.auth.utils import (
    clear_session_cookie,
    create_session_token,
    get_password_hash,
    set_session_cookie,
    verify_password,
)
from legalmatters.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _start_session(response: Response, user: User) -> None:
    token = create_session_token(user.id, user.email, user.role.value)
    set_session_cookie(response, token)


@router.post("/signup", response_model=MessageResponse)
def signup(request: SignupRequest, response: Response, db: Session = Depends(get_db)):
    email = request.email.lower()

    # Check if user already exists
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        logger.warning("Signup blocked: email already registered")
        raise ValidationError("Email already in use", field="email")

    # Every self-registered account is a lawyer
    db_user = User(
        email=email,
        password_hash=get_password_hash(request.password),
        firm_name=request.firm_name,
        role=UserRole.LAWYER,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup for the same address
        db.rollback()
        raise ValidationError("Email already in use", field="email")
    db.refresh(db_user)

    _start_session(response, db_user)
    logger.info(f"User {db_user.id} signed up")

    return {"message": "User created successfully"}


@router.post("/login", response_model=MessageResponse)
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == request.email.lower()).first()

    if not user or not verify_password(request.password, user.password_hash):
        logger.warning("Login failed: invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    _start_session(response, user)
    logger.info(f"User {user.id} logged in")

    return {"message": "Login successful"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, current_user: User = Depends(get_current_user)):
    clear_session_cookie(response)
    logger.info(f"User {current_user.id} logged out")
    return {"message": "Logged out successfully"}
