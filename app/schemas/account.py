"""Account Pydantic schemas (registration, login, profile)."""


from datetime import datetime

from pydantic import EmailStr, Field

from app.domain.enums import Role
from app.schemas.common import CamelModel

class RegisterRequest(CamelModel):
    email: EmailStr
    mobile_number: str = Field(min_length=7, max_length=20, pattern=r"^\+?[0-9][0-9 -]{5,18}[0-9]$")
    password: str = Field(min_length=8, max_length=128)
    company_name: str = Field(min_length=1, max_length=255)
    company_address: str | None = None
    legal_structure: str | None = Field(default=None, max_length=100)
    pan_number: str | None = Field(default=None, max_length=20)
    gstin: str | None = Field(default=None, max_length=20)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

class AccountOut(CamelModel):
    id: int
    unique_id: str
    email: str
    mobile_number: str
    company_name: str
    company_address: str | None = None
    legal_structure: str | None = None
    pan_number: str | None = None
    gstin: str | None = None
    role: Role
    official_title: str | None = None
    created_at: datetime

class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    account: AccountOut
