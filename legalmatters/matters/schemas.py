from datetime import datetime
from typing import Optional

from pydantic import Field

from legalmatters.models import MatterStatus
from legalmatters.schemas import ApiModel, RequiredName


class MatterCreate(ApiModel):
    title: RequiredName
    description: Optional[str] = Field(None, max_length=500)
    open_date: Optional[datetime] = None
    status: Optional[MatterStatus] = None


class MatterUpdate(ApiModel):
    title: RequiredName
    description: Optional[str] = Field(None, max_length=500)
    status: MatterStatus
    open_date: Optional[datetime] = None
    version: Optional[int] = None


class MatterResponse(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    open_date: datetime
    close_date: Optional[datetime] = None
    status: MatterStatus
    customer_id: int
    version: int


class MatterDetailResponse(MatterResponse):
    customer_name: str
