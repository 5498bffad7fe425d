from fastapi import APIRouter, Depends
from tvog.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, PasswordChange, DeletionStatusResponse
)
from tvog.modules.profiles.service import ProfileService
from tvog.core.dependencies import get_current_user, get_user_supabase, require_registered_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_data["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(require_registered_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update display name (not available to guests)"""
    return service.update_profile(user_data["id"], profile_data)


@router.post("/me/password")
async def change_password(
    password_data: PasswordChange,
    user_data: Dict = Depends(require_registered_user),
    service: ProfileService = Depends(get_profile_service)
):
    service.change_password(user_data["id"], password_data)
    return {"message": "Password changed successfully"}


@router.get("/me/deletion", response_model=DeletionStatusResponse)
async def get_deletion_status(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_deletion_status(user_data["id"])


@router.post("/me/deletion", response_model=DeletionStatusResponse)
async def schedule_deletion(
    user_data: Dict = Depends(require_registered_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Schedule account deletion; signing in again within the grace period cancels it"""
    return service.schedule_deletion(user_data["id"])


@router.delete("/me/deletion", response_model=DeletionStatusResponse)
async def cancel_deletion(
    user_data: Dict = Depends(require_registered_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.cancel_deletion(user_data["id"])
