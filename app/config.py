"""Configuration settings for VoiceApp."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Store backend: "memory" (process lifetime only) or "sql"
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory").lower()

    # Database (only used by the sql backend)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./voiceapp.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

    # Upload
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "25"))

    # CORS (comma separated, "*" for any origin)
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def __init__(self) -> None:
        self.secret_generated = not self.JWT_SECRET_KEY
        if self.secret_generated:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self.secret_generated:
            warnings.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if self.STORE_BACKEND not in ("memory", "sql"):
            warnings.append(f"Unknown STORE_BACKEND '{self.STORE_BACKEND}' - falling back to memory")
        if self.STORE_BACKEND == "memory":
            warnings.append("Using in-memory store - users and voices are lost on restart")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
