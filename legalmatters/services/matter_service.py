import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from legalmatters.authorization import Principal
from legalmatters.exceptions import ConflictError, NotFoundError
from legalmatters.models import Customer, Matter, MatterStatus, utcnow
from legalmatters.services.customer_service import CustomerService

logger = logging.getLogger(__name__)


def apply_status(matter: Matter, status: MatterStatus) -> None:
    """Set the status and keep close_date in step with it.

    Entering Closed stamps close_date once; any other status clears it.
    """
    matter.status = status
    if status == MatterStatus.CLOSED:
        if matter.close_date is None:
            matter.close_date = utcnow()
    else:
        matter.close_date = None


class MatterService:
    def __init__(self, db: Session):
        self.db = db
        self.customers = CustomerService(db)

    def _matter_for_customer(self, customer_id: int, matter_id: int) -> Matter:
        # A matter filed under a different customer is reported as missing
        matter = self.db.query(Matter).filter(
            Matter.id == matter_id,
            Matter.customer_id == customer_id,
        ).first()
        if not matter:
            raise NotFoundError("Matter")
        return matter

    def list_matters(
        self,
        principal: Principal,
        customer_id: int,
        status: Optional[MatterStatus] = None,
    ) -> List[Matter]:
        self.customers.get_customer_for_principal(principal, customer_id, action="view matters of")

        query = self.db.query(Matter).filter(Matter.customer_id == customer_id)
        if status:
            query = query.filter(Matter.status == status)

        return query.order_by(desc(Matter.open_date), desc(Matter.id)).all()

    def create_matter(
        self,
        principal: Principal,
        customer_id: int,
        title: str,
        description: Optional[str] = None,
        open_date: Optional[datetime] = None,
        status: Optional[MatterStatus] = None,
    ) -> Matter:
        customer = self.customers.get_customer_for_principal(principal, customer_id, action="add matters to")

        matter = Matter(
            title=title,
            description=description,
            open_date=open_date or utcnow(),
            customer_id=customer.id,
        )
        apply_status(matter, status or MatterStatus.OPEN)

        self.db.add(matter)
        self.db.commit()
        self.db.refresh(matter)

        logger.info(f"Matter {matter.id} created for customer {customer_id} by user {principal.id}")
        return matter

    def get_matter(self, principal: Principal, customer_id: int, matter_id: int) -> Tuple[Matter, Customer]:
        customer = self.customers.get_customer_for_principal(principal, customer_id, action="view matters of")
        return self._matter_for_customer(customer_id, matter_id), customer

    def update_matter(
        self,
        principal: Principal,
        customer_id: int,
        matter_id: int,
        title: str,
        status: MatterStatus,
        description: Optional[str] = None,
        open_date: Optional[datetime] = None,
        expected_version: Optional[int] = None,
    ) -> Matter:
        self.customers.get_customer_for_principal(principal, customer_id, action="update matters of")
        matter = self._matter_for_customer(customer_id, matter_id)

        if expected_version is not None and expected_version != matter.version:
            logger.warning(f"Stale update of matter {matter_id}: version {expected_version} != {matter.version}")
            raise ConflictError("Matter was modified by another request")

        matter.title = title
        matter.description = description
        if open_date is not None:
            matter.open_date = open_date
        apply_status(matter, status)

        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            if not self._exists(matter_id):
                raise NotFoundError("Matter")
            logger.warning(f"Concurrent update of matter {matter_id}")
            raise ConflictError("Matter was modified by another request")

        self.db.refresh(matter)
        logger.info(f"Matter {matter_id} updated by user {principal.id} (status {matter.status.value})")
        return matter

    def _exists(self, matter_id: int) -> bool:
        return self.db.query(Matter.id).filter(Matter.id == matter_id).first() is not None
