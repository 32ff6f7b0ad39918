"""
Configuration management for SafetyNet attestation verification.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SAFETYNET_VERIFY_URL = "https://www.googleapis.com/androidcheck/v1/attestations/verify"


class AttestationConfig(BaseSettings):
    """
    Configuration for the attestation verification service.

    Loads from SAFETYNET_* environment variables with sensible defaults for
    development.
    """

    model_config = SettingsConfigDict(
        env_prefix="SAFETYNET_",
        env_file=None,  # Don't use .env files in production
        case_sensitive=False,
    )

    # Android Device Verification API key, from the Google Developers Console
    api_key: Optional[str] = Field(default=None)
    verify_url: str = Field(default=SAFETYNET_VERIFY_URL)

    # API timeout in seconds
    api_timeout: int = Field(default=30, gt=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def is_production_ready(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)

    def validate_config(self) -> list[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of configuration issues (empty if valid)
        """
        issues = []

        if not self.api_key:
            issues.append("SAFETYNET_API_KEY is required for online verification")

        if not self.verify_url.startswith("https://"):
            issues.append("SAFETYNET_VERIFY_URL must use https")

        return issues

    def log_config_summary(self):
        """Log configuration summary for debugging."""
        logger.info(f"Attestation config - Verify URL: {self.verify_url}, "
                    f"API key: {'configured' if self.api_key else 'not configured'}, "
                    f"Timeout: {self.api_timeout}s")


@lru_cache
def get_config() -> AttestationConfig:
    """Get the process-wide configuration, loaded once from the environment."""
    return AttestationConfig()
