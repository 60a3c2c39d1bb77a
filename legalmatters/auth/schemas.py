from pydantic import EmailStr, Field
from legalmatters.models import UserRole
from legalmatters.schemas import ApiModel, RequiredName

class SignupRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    firm_name: RequiredName

class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserResponse(ApiModel):
    id: int
    email: str
    firm_name: str
    role: UserRole
