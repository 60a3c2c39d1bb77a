from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from legalmatters.database import get_db
from legalmatters.models import Customer
from legalmatters.authorization import Principal
from legalmatters.auth.dependencies import get_current_principal
from legalmatters.customers.schemas import CustomerCreate, CustomerUpdate, CustomerResponse
from legalmatters.schemas import MessageResponse, ResourceId
from legalmatters.services.customer_service import CustomerService
from legalmatters.services.phone import format_phone

router = APIRouter(prefix="/api/customers", tags=["Customers"])


def to_response(customer: Customer, open_matters_count: int = 0) -> CustomerResponse:
    return CustomerResponse(
        id=customer.id,
        name=customer.name,
        phone=format_phone(customer.phone),
        lawyer_id=customer.lawyer_id,
        open_matters_count=open_matters_count,
        version=customer.version,
    )


@router.get("", response_model=List[CustomerResponse])
def list_customers(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """List customers visible to the current user, with open matter counts."""
    service = CustomerService(db)
    customers = service.list_customers(principal)
    counts = service.open_matter_counts([c.id for c in customers])
    return [to_response(c, counts.get(c.id, 0)) for c in customers]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Create a customer owned by the current user."""
    customer = CustomerService(db).create_customer(principal, customer_data.name, customer_data.phone)
    return to_response(customer)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: ResourceId,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    service = CustomerService(db)
    customer = service.get_customer_for_principal(principal, customer_id, action="view")
    return to_response(customer, service.open_matter_count(customer.id))


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: ResourceId,
    customer_update: CustomerUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Update name and phone. The owning lawyer never changes."""
    service = CustomerService(db)
    customer = service.update_customer(
        principal,
        customer_id,
        name=customer_update.name,
        phone=customer_update.phone,
        expected_version=customer_update.version,
    )
    return to_response(customer, service.open_matter_count(customer.id))


@router.delete("/{customer_id}", response_model=MessageResponse)
def delete_customer(
    customer_id: ResourceId,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Delete a customer together with all of its matters."""
    CustomerService(db).delete_customer(principal, customer_id)
    return {"message": "Customer deleted successfully"}
