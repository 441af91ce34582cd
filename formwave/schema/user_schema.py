from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Account password")
    full_name: str = Field(..., min_length=1)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RequestContext(BaseModel):
    """Identity of the caller, resolved from the bearer token"""
    caller_id: str
    email: str
    full_name: Optional[str] = None
    exp: Optional[int] = None
