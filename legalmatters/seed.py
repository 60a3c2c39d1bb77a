"""
Admin bootstrap.

Runs once before the API starts serving. It is guarded by an existence check,
so repeated startups leave an existing admin account untouched.
"""

import logging

from decouple import config
from sqlalchemy.orm import Session

from legalmatters.auth.utils import get_password_hash
from legalmatters.models import User, UserRole

logger = logging.getLogger(__name__)

ADMIN_FIRM_NAME = "Legal Matters Admin"


def ensure_admin_user(db: Session) -> User:
    admin_email = config("ADMIN_EMAIL", default="admin@legalmatters.com").lower()

    admin = db.query(User).filter(User.email == admin_email).first()
    if admin:
        return admin

    admin_password = config("ADMIN_PASSWORD", default=None)
    if not admin_password:
        raise RuntimeError("ADMIN_PASSWORD environment variable was not set!")

    admin = User(
        email=admin_email,
        password_hash=get_password_hash(admin_password),
        firm_name=ADMIN_FIRM_NAME,
        role=UserRole.ADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    logger.info(f"Created admin user {admin_email}")
    return admin
