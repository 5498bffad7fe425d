from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


DEFAULT_SYSTEM_PROMPT = (
    "You are Tvog AI, a helpful assistant. Answer clearly and concisely. "
    "Use markdown for formatting and fenced code blocks with a language tag for code."
)


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations (password change, account purge)
    storage_bucket: str = "chat-files"

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_gateway_api_key: Optional[str] = None
    chat_model: str = "google/gemini-2.5-flash"
    vision_model: str = "google/gemini-2.5-flash"
    image_model: str = "google/gemini-2.5-flash-image-preview"
    chat_system_prompt: str = DEFAULT_SYSTEM_PROMPT
    gateway_timeout: float = 120.0

    # Replicate
    replicate_api_key: Optional[str] = None
    replicate_base_url: str = "https://api.replicate.com/v1"
    video_model: str = "minimax/video-01"

    # Limits
    max_message_length: int = 4000
    max_file_size: int = 10 * 1024 * 1024
    max_video_prompt_length: int = 500
    max_display_name_length: int = 50
    signed_url_ttl: int = 3600

    # Account deletion
    account_deletion_grace_days: int = 7
    enable_account_purge: bool = False
    account_purge_interval_seconds: int = 3600

    # App
    app_name: str = "tvog-ai"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    site_url: str = "http://localhost:5173"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def redirect_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
