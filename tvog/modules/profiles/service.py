from datetime import datetime, timedelta, timezone
from postgrest.exceptions import APIError
from supabase import Client
from tvog.config.settings import settings
from tvog.database.supabase_client import SupabaseClient
from tvog.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, PasswordChange, DeletionStatusResponse
)
from fastapi import HTTPException
from typing import Optional
import logging

logger = logging.getLogger(__name__)

NO_ROWS_CODE = "PGRST116"


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get the caller's profile"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                raise HTTPException(status_code=404, detail="Profile not found")
            logger.error("Error loading profile %s: %s", user_id, e)
            raise HTTPException(status_code=500, detail=str(e))

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data)

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Upsert display name"""
        try:
            result = self.supabase.table("profiles")\
                .upsert({
                    "id": user_id,
                    "display_name": profile_data.display_name,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def change_password(self, user_id: str, password_data: PasswordChange) -> bool:
        """Set a new password through the Auth admin API (requires service role key)"""
        if not SupabaseClient.has_service_client():
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot change password."
            )
        try:
            admin_client = SupabaseClient.get_service_client()
            response = admin_client.auth.admin.update_user_by_id(
                user_id,
                {"password": password_data.new_password}
            )
            if not response.user:
                raise HTTPException(status_code=404, detail="User not found")
            logger.info("Password changed for user %s", user_id)
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to change password: {str(e)}")

    def schedule_deletion(self, user_id: str) -> DeletionStatusResponse:
        """Mark the account for deletion after the grace period"""
        scheduled_at = datetime.now(timezone.utc)
        self._set_deletion(user_id, scheduled_at.isoformat())
        purge_after = scheduled_at + timedelta(days=settings.account_deletion_grace_days)
        logger.info("Account deletion scheduled for user %s", user_id)
        return DeletionStatusResponse(
            deletion_scheduled_at=scheduled_at,
            purge_after=purge_after,
            message=(
                f"Your account will be permanently deleted after {settings.account_deletion_grace_days} days. "
                "Sign in again before then to cancel."
            ),
        )

    def cancel_deletion(self, user_id: str) -> DeletionStatusResponse:
        self._set_deletion(user_id, None)
        logger.info("Account deletion cancelled for user %s", user_id)
        return DeletionStatusResponse(message="Account deletion cancelled")

    def get_deletion_status(self, user_id: str) -> DeletionStatusResponse:
        profile = self.get_profile(user_id)
        scheduled_at = _parse_timestamp(profile.deletion_scheduled_at)
        if scheduled_at is None:
            return DeletionStatusResponse(message="No deletion scheduled")
        return DeletionStatusResponse(
            deletion_scheduled_at=scheduled_at,
            purge_after=scheduled_at + timedelta(days=settings.account_deletion_grace_days),
            message="Account deletion scheduled",
        )

    def _set_deletion(self, user_id: str, value: Optional[str]) -> None:
        try:
            result = self.supabase.table("profiles")\
                .update({"deletion_scheduled_at": value})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")


def purge_expired_accounts(supabase: Client) -> None:
    """Delete accounts whose grace period has elapsed (service role client)"""
    supabase.rpc("delete_expired_accounts").execute()
