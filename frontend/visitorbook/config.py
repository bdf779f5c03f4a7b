"""
VisitorBook Frontend: Client Configuration
============================================

What:  Settings for the API client and the terminal entry point.
How:   Pydantic Settings, environment variables prefixed with VISITORBOOK_
       (VISITORBOOK_API_URL, VISITORBOOK_REQUEST_TIMEOUT, VISITORBOOK_LOG_LEVEL)
       or a .env file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Base URL of the VisitorBook backend (no trailing /api)
    api_url: str = Field(default="http://localhost:3001")

    # Upper bound for each HTTP call (connect, read, write, pool), seconds
    request_timeout: float = Field(default=10.0, gt=0, le=300)

    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_prefix": "VISITORBOOK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }
