from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, StringConstraints
from pydantic.alias_generators import to_camel

# Largest value an INTEGER primary key column holds
MAX_ID = 2**31 - 1

# Required text: surrounding whitespace is stripped before the length check
RequiredName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]

ResourceId = Annotated[int, Path(ge=1, le=MAX_ID)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(ApiModel):
    message: str
