from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from legalmatters.database import get_db
from legalmatters.models import User, UserRole
from legalmatters.authorization import Principal
from legalmatters.auth.utils import (
    SESSION_COOKIE_NAME,
    create_session_token,
    needs_refresh,
    set_session_cookie,
    verify_session_token,
)


def authenticate(request: Request, db: Session) -> Optional[User]:
    """Resolve the session cookie to a User, or None."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    session = verify_session_token(token)
    if session is None:
        return None
    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None:
        return None
    request.state.session = session
    return user


def get_current_user(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    user = authenticate(request, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    if needs_refresh(request.state.session):
        set_session_cookie(response, create_session_token(user.id, user.email, user.role.value))

    return user


def get_current_principal(current_user: User = Depends(get_current_user)) -> Principal:
    return Principal.from_user(current_user)


def require_role(allowed_roles: list[UserRole]):
    def role_checker(principal: Principal = Depends(get_current_principal)):
        if principal.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return principal
    return role_checker


def require_admin():
    return require_role([UserRole.ADMIN])
