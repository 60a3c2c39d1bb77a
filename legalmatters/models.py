from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Index
from legalmatters.database import Base
import enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    # Persist "Open"/"OnHold" rather than the member names
    return [member.value for member in enum_cls]

# =====================================================
# ENUMS
# =====================================================

class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    LAWYER = "Lawyer"

class MatterStatus(str, enum.Enum):
    OPEN = "Open"
    CLOSED = "Closed"
    ON_HOLD = "OnHold"

# =====================================================
# TABLES
# =====================================================
# Cross-table access goes through explicit queries on the foreign key ids,
# so no relationship() properties are declared here.

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    firm_name = Column(String(100), nullable=False)
    role = Column(Enum(UserRole, name="user_role", values_callable=_enum_values), nullable=False, default=UserRole.LAWYER)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)  # 10 raw digits
    lawyer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Matter(Base):
    __tablename__ = "matters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    open_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    close_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(MatterStatus, name="matter_status", values_callable=_enum_values), nullable=False, default=MatterStatus.OPEN)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    version = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_matters_customer_status", "customer_id", "status"),
    )

    __mapper_args__ = {"version_id_col": version}
