import hashlib
import logging
import time
from supabase import Client
from tvog.config.settings import settings
from tvog.database.supabase_client import SupabaseClient
from tvog.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    OAuthUrlResponse, TwoFactorVerifyRequest
)
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

SUPPORTED_OAUTH_PROVIDERS = ("google",)


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _prune_expired(now: float) -> None:
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]


def _user_to_dict(user: Any, access_token: str) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "is_anonymous": bool(getattr(user, "is_anonymous", False)),
        "email_confirmed_at": getattr(user, "email_confirmed_at", None),
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "access_token": access_token,
    }


def _is_mfa_error(message: str) -> bool:
    return "mfa" in message.lower() or "factor" in message.lower()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.display_name:
                user_metadata["display_name"] = register_data.display_name.strip()

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata,
                    "email_redirect_to": settings.redirect_url,
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            logger.info("Registered user %s", auth_response.user.id)
            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="Account created! You can now sign in with your credentials."
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate with email and password.

        Signals a pending second factor instead of failing, rejects unverified
        e-mail addresses, and cancels a scheduled account deletion.
        """
        client = SupabaseClient.new_client()
        try:
            auth_response = client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if _is_mfa_error(error_message):
                raise HTTPException(status_code=401, detail="two_factor_required")
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

        user, session = auth_response.user, auth_response.session
        if not user or not session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        if not getattr(user, "email_confirmed_at", None) and not getattr(user, "is_anonymous", False):
            raise HTTPException(status_code=403, detail="Email not verified")

        token = TokenResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
            user_id=user.id,
            email=user.email or login_data.email,
        )

        if self._second_factor_pending(client):
            token.mfa_required = True
            token.message = "Enter the 6-digit code from your authenticator app"
            return token

        token.deletion_cancelled = self._cancel_scheduled_deletion(user.id, session.access_token)
        if token.deletion_cancelled:
            token.message = "Your scheduled account deletion has been cancelled. Welcome back!"
        else:
            token.message = "Signed in successfully."
        return token

    def _second_factor_pending(self, client: Client) -> bool:
        try:
            aal = client.auth.mfa.get_authenticator_assurance_level()
        except Exception as e:
            logger.warning("Could not read assurance level: %s", e)
            return False
        return aal.next_level == "aal2" and aal.current_level != "aal2"

    def _cancel_scheduled_deletion(self, user_id: str, access_token: str) -> bool:
        user_client = SupabaseClient.for_user(access_token)
        result = user_client.table("profiles")\
            .select("deletion_scheduled_at")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data or not result.data.get("deletion_scheduled_at"):
            return False
        user_client.table("profiles")\
            .update({"deletion_scheduled_at": None})\
            .eq("id", user_id)\
            .execute()
        logger.info("Cancelled scheduled deletion for user %s", user_id)
        return True

    def login_anonymously(self) -> TokenResponse:
        """Start a guest session"""
        client = SupabaseClient.new_client()
        try:
            auth_response = client.auth.sign_in_anonymously()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Guest sign-in failed: {str(e)}")
        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=500, detail="Guest sign-in failed")
        session = auth_response.session
        return TokenResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
            user_id=auth_response.user.id,
            is_anonymous=True,
            message="Signed in as guest. Your data won't be saved permanently.",
        )

    def oauth_url(self, provider: str) -> OAuthUrlResponse:
        if provider not in SUPPORTED_OAUTH_PROVIDERS:
            raise HTTPException(status_code=400, detail=f"Unsupported provider: {provider}")
        try:
            response = self.supabase.auth.sign_in_with_oauth({
                "provider": provider,
                "options": {"redirect_to": settings.redirect_url},
            })
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return OAuthUrlResponse(provider=provider, url=response.url)

    def resend_verification(self, email: str) -> None:
        try:
            self.supabase.auth.resend({
                "type": "signup",
                "email": email,
                "options": {"email_redirect_to": settings.redirect_url},
            })
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def verify_two_factor(self, request: TwoFactorVerifyRequest) -> TokenResponse:
        """Challenge and verify the account's first TOTP factor, upgrading the session to aal2."""
        client = SupabaseClient.new_client()
        try:
            client.auth.set_session(request.access_token, request.refresh_token)
            factors = client.auth.mfa.list_factors()
            totp_factor = factors.totp[0] if factors.totp else None
            if not totp_factor:
                raise HTTPException(status_code=400, detail="No 2FA configured for this account")

            challenge = client.auth.mfa.challenge({"factor_id": totp_factor.id})
            verify = client.auth.mfa.verify({
                "factor_id": totp_factor.id,
                "challenge_id": challenge.id,
                "code": request.code,
            })
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=401, detail=str(e))

        return TokenResponse(
            access_token=verify.access_token,
            refresh_token=verify.refresh_token,
            expires_in=verify.expires_in,
            user_id=verify.user.id,
            email=verify.user.email,
            message="Successfully verified 2FA",
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user_data = _user_to_dict(user_response.user, token)
            if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
                _prune_expired(now)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Revoke the session behind the token"""
        try:
            SupabaseClient.get_service_client().auth.admin.sign_out(token)
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
            return True
        except Exception as e:
            logger.warning("Sign-out failed: %s", e)
            return False
