"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/curtaincall/core/config.py
# Project root is: backend/curtaincall/core/../../../
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
    app_name: str = "CurtainCall"
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"curtaincall.services": "DEBUG"})'
    )
    log_format: str = Field(
        default="text",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/curtaincall.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(default=14, ge=1, description="Number of days to keep log files")
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, OTP codes) - NOT RECOMMENDED"
    )

    # Data store
    database_url: str = Field(
        default="sqlite://",
        description="SQLAlchemy URL; the default is a process-local in-memory database"
    )
    seed_demo_data: bool = Field(default=True, description="Populate the store with demo data on startup")
    seed_random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the demo data generator (random when unset)"
    )
    simulated_latency_ms: int = Field(
        default=0,
        ge=0,
        le=10000,
        description="Artificial delay added to API and page requests"
    )

    # Booking
    ticket_price: float = Field(default=50.0, gt=0, description="Price of a single seat")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    max_seats_per_booking: int = Field(default=5, ge=1, le=20)

    # Demo account (authentication is stubbed)
    demo_user_id: str = Field(default="user1", description="User treated as signed in")
    demo_login_email: str = Field(default="test@example.com")
    demo_login_password: str = Field(default="password")
    demo_otp: str = Field(default="123456", min_length=6, max_length=6)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        env_prefix="CURTAINCALL_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
