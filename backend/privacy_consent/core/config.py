"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/privacy_consent/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "privacy-consent"
    app_env: str = Field(default="development", description="Application environment")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Allowed CORS origins for the demo app (comma-separated)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"privacy_consent.components": "DEBUG"})'
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/privacy-consent.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=30,
        ge=1,
        description="Number of days to keep log files"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Log raw consent header values instead of masking them"
    )

    # Protocol
    consent_header_name: str = Field(
        default="Privacy-Consent",
        min_length=1,
        description="Inbound header carrying the user's consent decisions"
    )
    ack_header_name: str = Field(
        default="Privacy-Consent-Ack",
        min_length=1,
        description="Outbound header carrying the acknowledgement and asks"
    )
    vocabulary_file: Optional[str] = Field(
        default=None,
        description="JSON file with 'categories' and 'purposes' lists replacing the built-in vocabulary"
    )
    reason_soft_limit: int = Field(
        default=280,
        ge=1,
        description="Length guideline for ask reasons; longer reasons are logged, never truncated"
    )
    always_acknowledge: bool = Field(
        default=True,
        description="Send the ACK header even when the request carried no preference"
    )

    @field_validator("consent_header_name", "ack_header_name")
    @classmethod
    def strip_header_name(cls, v: str) -> str:
        """Header names must not carry surrounding whitespace"""
        v = v.strip()
        if not v:
            raise ValueError("header name must not be blank")
        return v

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        env_prefix="PRIVACY_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
