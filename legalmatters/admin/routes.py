from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List

from legalmatters.database import get_db
from legalmatters.models import User, Customer, UserRole
from legalmatters.authorization import Principal
from legalmatters.auth.dependencies import require_admin
from legalmatters.schemas import ApiModel

router = APIRouter(prefix="/api/admin", tags=["Admin Tools"])


class AdminUserResponse(ApiModel):
    id: int
    email: str
    firm_name: str
    role: UserRole
    created_at: datetime
    customer_count: int


@router.get("/users", response_model=List[AdminUserResponse])
def get_all_users(
    current_user: Principal = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    customer_counts = dict(
        db.query(Customer.lawyer_id, func.count(Customer.id))
        .group_by(Customer.lawyer_id)
        .all()
    )
    users = db.query(User).order_by(User.id).all()
    return [
        AdminUserResponse(
            id=user.id,
            email=user.email,
            firm_name=user.firm_name,
            role=user.role,
            created_at=user.created_at,
            customer_count=customer_counts.get(user.id, 0),
        )
        for user in users
    ]
