import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from legalmatters.authorization import Principal, ensure_customer_access
from legalmatters.exceptions import ConflictError, NotFoundError, ValidationError
from legalmatters.models import Customer, Matter, MatterStatus
from legalmatters.services.phone import PhoneNumberError, normalize_phone

logger = logging.getLogger(__name__)


def _normalize_or_reject(phone: str) -> str:
    try:
        return normalize_phone(phone)
    except PhoneNumberError as exc:
        raise ValidationError(str(exc), field="phone") from exc


class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: int) -> Customer:
        """Load a customer or raise NotFoundError. No access check."""
        customer = self.db.query(Customer).filter(Customer.id == customer_id).first()
        if not customer:
            raise NotFoundError("Customer")
        return customer

    def get_customer_for_principal(self, principal: Principal, customer_id: int, action: str = "view") -> Customer:
        """Load a customer and apply the Admin-or-Owner policy to it."""
        customer = self.get_customer(customer_id)
        ensure_customer_access(principal, customer.id, customer.lawyer_id, action)
        return customer

    def open_matter_counts(self, customer_ids: List[int]) -> Dict[int, int]:
        if not customer_ids:
            return {}
        rows = (
            self.db.query(Matter.customer_id, func.count(Matter.id))
            .filter(
                Matter.customer_id.in_(customer_ids),
                Matter.status == MatterStatus.OPEN,
            )
            .group_by(Matter.customer_id)
            .all()
        )
        return {customer_id: count for customer_id, count in rows}

    def open_matter_count(self, customer_id: int) -> int:
        return self.open_matter_counts([customer_id]).get(customer_id, 0)

    def list_customers(self, principal: Principal) -> List[Customer]:
        query = self.db.query(Customer)

        # Admins see every customer, lawyers only their own
        if not principal.is_admin:
            query = query.filter(Customer.lawyer_id == principal.id)

        return query.order_by(Customer.name, Customer.id).all()

    def create_customer(self, principal: Principal, name: str, phone: str) -> Customer:
        # The creator always becomes the owning lawyer, admins included
        customer = Customer(
            name=name,
            phone=_normalize_or_reject(phone),
            lawyer_id=principal.id,
        )
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)

        logger.info(f"Customer {customer.id} created by user {principal.id}")
        return customer

    def update_customer(
        self,
        principal: Principal,
        customer_id: int,
        name: str,
        phone: str,
        expected_version: Optional[int] = None,
    ) -> Customer:
        customer = self.get_customer_for_principal(principal, customer_id, action="update")

        if expected_version is not None and expected_version != customer.version:
            logger.warning(f"Stale update of customer {customer_id}: version {expected_version} != {customer.version}")
            raise ConflictError("Customer was modified by another request")

        customer.name = name
        customer.phone = _normalize_or_reject(phone)

        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            if not self._exists(customer_id):
                raise NotFoundError("Customer")
            logger.warning(f"Concurrent update of customer {customer_id}")
            raise ConflictError("Customer was modified by another request")

        self.db.refresh(customer)
        logger.info(f"Customer {customer_id} updated by user {principal.id}")
        return customer

    def delete_customer(self, principal: Principal, customer_id: int) -> None:
        customer = self.get_customer_for_principal(principal, customer_id, action="delete")

        deleted_matters = (
            self.db.query(Matter)
            .filter(Matter.customer_id == customer.id)
            .delete(synchronize_session=False)
        )
        self.db.delete(customer)
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            if not self._exists(customer_id):
                raise NotFoundError("Customer")
            raise ConflictError("Customer was modified by another request")

        logger.info(f"Customer {customer_id} and {deleted_matters} matter(s) deleted by user {principal.id}")

    def _exists(self, customer_id: int) -> bool:
        return self.db.query(Customer.id).filter(Customer.id == customer_id).first() is not None
