"""
Core dependencies for route protection and user-scoped database access
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from tvog.database.supabase_client import SupabaseClient, get_supabase
from tvog.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the bearer token to the authenticated user"""
    return auth_service.get_current_user(token)


def require_registered_user(
    user_data: Dict[str, Any] = Depends(get_current_user)
) -> Dict[str, Any]:
    """Reject guest (anonymous) sessions"""
    if user_data.get("is_anonymous"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Profile changes are not available in guest mode"
        )
    return user_data


def get_user_supabase(
    user_data: Dict[str, Any] = Depends(get_current_user)
) -> Client:
    """Supabase client acting as the current user; row-level security decides what it can touch."""
    return SupabaseClient.for_user(user_data["access_token"])


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
