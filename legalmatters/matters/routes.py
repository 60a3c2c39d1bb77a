from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from legalmatters.database import get_db
from legalmatters.models import MatterStatus
from legalmatters.authorization import Principal
from legalmatters.auth.dependencies import get_current_principal
from legalmatters.matters.schemas import MatterCreate, MatterUpdate, MatterResponse, MatterDetailResponse
from legalmatters.schemas import ResourceId
from legalmatters.services.matter_service import MatterService

router = APIRouter(prefix="/api/customers/{customer_id}/matters", tags=["Matters"])


@router.get("", response_model=List[MatterResponse])
def list_matters(
    customer_id: ResourceId,
    status: Optional[MatterStatus] = None,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """List a customer's matters, newest first."""
    return MatterService(db).list_matters(principal, customer_id, status=status)


@router.post("", response_model=MatterResponse, status_code=status.HTTP_201_CREATED)
def create_matter(
    customer_id: ResourceId,
    matter_data: MatterCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return MatterService(db).create_matter(
        principal,
        customer_id,
        title=matter_data.title,
        description=matter_data.description,
        open_date=matter_data.open_date,
        status=matter_data.status,
    )


@router.get("/{matter_id}", response_model=MatterDetailResponse)
def get_matter(
    customer_id: ResourceId,
    matter_id: ResourceId,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    matter, customer = MatterService(db).get_matter(principal, customer_id, matter_id)
    return MatterDetailResponse(
        **MatterResponse.model_validate(matter).model_dump(),
        customer_name=customer.name,
    )


@router.put("/{matter_id}", response_model=MatterResponse)
def update_matter(
    customer_id: ResourceId,
    matter_id: ResourceId,
    matter_update: MatterUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Update a matter. Closing stamps closeDate; reopening clears it."""
    return MatterService(db).update_matter(
        principal,
        customer_id,
        matter_id,
        title=matter_update.title,
        status=matter_update.status,
        description=matter_update.description,
        open_date=matter_update.open_date,
        expected_version=matter_update.version,
    )
