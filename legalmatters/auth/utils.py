from datetime import datetime, timedelta, timezone
from typing import Optional

from decouple import config
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

SECRET_KEY = config("SECRET_KEY")
ALGORITHM = "HS256"
SESSION_DAYS = config("SESSION_DAYS", default=7, cast=int)
SESSION_COOKIE_NAME = config("SESSION_COOKIE_NAME", default="legalmatters_session")
SESSION_COOKIE_SECURE = config("SESSION_COOKIE_SECURE", default=False, cast=bool)

# pbkdf2_sha256 avoids the bcrypt backend quirks in slim images
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class SessionData(BaseModel):
    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_session_token(user_id: int, email: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    now = _utcnow()
    expire = now + (expires_delta or timedelta(days=SESSION_DAYS))
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_session_token(token: str) -> Optional[SessionData]:
    """Decode a session token; None when it is expired, tampered or malformed."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return SessionData(
            user_id=int(payload["sub"]),
            email=payload.get("email", ""),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None


def needs_refresh(session: SessionData) -> bool:
    """Sliding expiration: reissue once less than half the lifetime remains."""
    return session.expires_at - _utcnow() < timedelta(days=SESSION_DAYS) / 2


def set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
