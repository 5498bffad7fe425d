from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import datetime

from tvog.config.settings import settings


class ProfileUpdate(BaseModel):
    display_name: str

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Display name cannot be empty")
        if len(value) > settings.max_display_name_length:
            raise ValueError(f"Display name must be less than {settings.max_display_name_length} characters")
        return value


class PasswordChange(BaseModel):
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def validate_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class ProfileResponse(BaseModel):
    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    deletion_scheduled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeletionStatusResponse(BaseModel):
    deletion_scheduled_at: Optional[datetime] = None
    purge_after: Optional[datetime] = None
    message: str
