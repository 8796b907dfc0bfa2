# clerkdesk/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "ClerkDesk"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Hosted backend (REST tables, RPC, auth)
    HOSTED_URL: str = "http://localhost:54321"
    HOSTED_ANON_KEY: str = ""
    # None keeps the HTTP client's own default
    HOSTED_TIMEOUT_SECONDS: Optional[float] = None
    HOSTED_SESSION_VERIFY: bool = True

    @field_validator("HOSTED_URL", mode="before")
    @classmethod
    def strip_hosted_url(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    # Client-side persisted state (cookies)
    HOSTED_SESSION_COOKIE: str = "sb-session"
    LOCAL_SESSION_KEY: str = "clerk_session"
    ADMIN_SESSION_KEY: str = "admin_session"
    COOKIE_SECURE: bool = False

    # Navigation targets used by the guards
    LOGIN_PATH: str = "/login"
    HOME_PATH: str = "/"
    STATUS_PATH: str = "/status"
    ADMIN_LOGIN_PATH: str = "/admin/login"
    ADMIN_HOME_PATH: str = "/admin/dashboard"

    # Dashboard
    UPCOMING_HEARING_WINDOW_DAYS: int = 14

    # Signup: register through hosted auth first instead of the direct insert only
    SIGNUP_USE_HOSTED_AUTH: bool = False

    # CORS
    CORS_ORIGINS: str = '["http://localhost:5173", "http://localhost:3000"]'

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            if isinstance(self.CORS_ORIGINS, str):
                return json.loads(self.CORS_ORIGINS)
            return self.CORS_ORIGINS
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()
