"""Configuration settings for the CV Portal."""

import os
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from functools import lru_cache
import logging

load_dotenv()

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# SUPABASE CONFIGURATION
# ----------------------------------------------------------------------

class SupabaseConfig(BaseSettings):
    """Hosted backend (Supabase REST + auth) configuration."""
    model_config = SettingsConfigDict(env_prefix="SUPABASE_", extra="ignore")

    url: str = ""
    anon_key: Optional[str] = None
    timeout_seconds: float = 10.0

    submissions_table: str = "cvs"
    positions_table: str = "positions"
    admin_table: str = "admin_users"


# ----------------------------------------------------------------------
# AWS CONFIGURATION
# ----------------------------------------------------------------------

class AWSConfig(BaseModel):
    """
    AWS configuration for CV attachment storage.
    Credentials are optional; boto3 falls back to its own provider chain.
    """

    aws_access_key: str | None = Field(default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"))
    aws_secret_key: str | None = Field(default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"))
    aws_session_token: str | None = Field(default_factory=lambda: os.getenv("AWS_SESSION_TOKEN"))

    region: str = Field(default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"))

    attachments_bucket: str = Field(
        default_factory=lambda: os.getenv("AWS_ATTACHMENTS_BUCKET", "local-attachments")
    )


# ----------------------------------------------------------------------
# PORTAL CONFIGURATION
# ----------------------------------------------------------------------

class PortalConfig(BaseSettings):
    """Intake and dashboard behaviour."""
    model_config = SettingsConfigDict(env_prefix="PORTAL_", extra="ignore")

    env: str = "local"
    local_root: str = "./local_store"

    experience_bucket_width: int = 2
    trend_days: int = 7
    order_field: str = "requirements_match"

    max_attachment_bytes: int = 10 * 1024 * 1024
    allowed_attachment_extensions: List[str] = [".pdf", ".doc", ".docx"]

    # Local store emulation of the hosted unique constraints
    unique_fields: Dict[str, List[str]] = {"cvs": ["applicant_name"]}

    @property
    def local_mode(self) -> bool:
        return self.env == "local"


# ----------------------------------------------------------------------
# LOGGING CONFIGURATION
# ----------------------------------------------------------------------

class LoggingConfig(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(message)s"


# ----------------------------------------------------------------------
# APP SETTINGS
# ----------------------------------------------------------------------

class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    environment: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    debug: bool = Field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)
    portal: PortalConfig = Field(default_factory=PortalConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ----------------------------------------------------------------------
# Lazy accessors (cached singletons)
# ----------------------------------------------------------------------

@lru_cache()
def get_config() -> Settings:
    """Return global app configuration."""
    return Settings()


@lru_cache()
def get_supabase_config() -> SupabaseConfig:
    """Return hosted backend configuration."""
    return get_config().supabase


@lru_cache()
def get_aws_config() -> AWSConfig:
    """Return AWS configuration."""
    return get_config().aws


@lru_cache()
def get_portal_config() -> PortalConfig:
    """Return intake/dashboard configuration."""
    return get_config().portal


@lru_cache()
def get_logging_config() -> LoggingConfig:
    """Return logging configuration."""
    return get_config().logging


def configure_logging() -> None:
    """Apply the configured level and format to the root logger."""
    cfg = get_logging_config()
    logging.basicConfig(level=cfg.level.upper(), format=cfg.format)
