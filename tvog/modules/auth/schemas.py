from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: str
    email: Optional[str] = None
    is_anonymous: bool = False
    mfa_required: bool = False
    deletion_cancelled: bool = False
    message: Optional[str] = None


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class TwoFactorVerifyRequest(BaseModel):
    access_token: str
    refresh_token: str
    code: str = Field(..., pattern=r"^\d{6}$")


class OAuthUrlResponse(BaseModel):
    provider: str
    url: str


class PasswordStrengthRequest(BaseModel):
    password: str = ""


class PasswordRequirementResult(BaseModel):
    label: str
    met: bool


class PasswordStrengthResponse(BaseModel):
    strength: float
    label: str
    requirements: List[PasswordRequirementResult]
