from typing import Optional

from pydantic import Field

from legalmatters.schemas import ApiModel, RequiredName


class CustomerBase(ApiModel):
    name: RequiredName
    phone: str = Field(..., min_length=1, max_length=20)


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    # Version the client last read; a mismatch is reported as a conflict
    version: Optional[int] = None


class CustomerResponse(ApiModel):
    id: int
    name: str
    phone: str  # (XXX) XXX-XXXX
    lawyer_id: int
    open_matters_count: int = 0
    version: int
