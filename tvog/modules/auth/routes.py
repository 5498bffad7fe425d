from fastapi import APIRouter, Depends
from tvog.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    ResendVerificationRequest, TwoFactorVerifyRequest, OAuthUrlResponse,
    PasswordStrengthRequest, PasswordStrengthResponse
)
from tvog.modules.auth.service import AuthService
from tvog.modules.auth.password_strength import evaluate_password
from tvog.core.dependencies import get_auth_service, get_current_token, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/guest", response_model=TokenResponse)
async def login_as_guest(service: AuthService = Depends(get_auth_service)):
    """Sign in anonymously"""
    return service.login_anonymously()


@router.get("/oauth/{provider}", response_model=OAuthUrlResponse)
async def oauth_url(
    provider: str,
    service: AuthService = Depends(get_auth_service)
):
    """Authorization URL for an OAuth provider"""
    return service.oauth_url(provider)


@router.post("/resend-verification")
async def resend_verification(
    request: ResendVerificationRequest,
    service: AuthService = Depends(get_auth_service)
):
    service.resend_verification(request.email)
    return {"message": "Verification email sent. Please check your inbox and spam folder."}


@router.post("/mfa/verify", response_model=TokenResponse)
async def verify_two_factor(
    request: TwoFactorVerifyRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Verify a TOTP code for a session that still needs its second factor"""
    return service.verify_two_factor(request)


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def password_strength(request: PasswordStrengthRequest):
    return evaluate_password(request.password)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user"""
    return {k: v for k, v in current_user.items() if k != "access_token"}
