"""
Configuration management for the Pet Catalog extraction service.
Handles environment variables and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = _env_flag("DEBUG", "false")

    # Catalog store (remote relational backend)
    CATALOG_BACKEND: str = os.getenv("CATALOG_BACKEND", "rest")  # rest or memory
    CATALOG_API_URL: Optional[str] = os.getenv("CATALOG_API_URL")
    CATALOG_API_KEY: Optional[str] = os.getenv("CATALOG_API_KEY")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # Parser policy
    AVAILABLE_SLOT_MARKER: str = os.getenv("AVAILABLE_SLOT_MARKER", "swatchAvailable")
    PERMISSIVE_SECONDARY_AVAILABILITY: bool = _env_flag("PERMISSIVE_SECONDARY_AVAILABILITY", "true")
    OPTION_MATCH_CASE_SENSITIVE: bool = _env_flag("OPTION_MATCH_CASE_SENSITIVE", "true")
    INGREDIENT_BLOCK_MIN_LENGTH: int = int(os.getenv("INGREDIENT_BLOCK_MIN_LENGTH", "50"))
    INGREDIENT_LABELLED_MIN_LENGTH: int = int(os.getenv("INGREDIENT_LABELLED_MIN_LENGTH", "100"))

    @classmethod
    def is_catalog_configured(cls) -> bool:
        """
        Check if the remote catalog store is fully configured.

        Requires ALL of:
        - CATALOG_API_URL
        - CATALOG_API_KEY
        """
        return all([
            cls.CATALOG_API_URL,
            cls.CATALOG_API_KEY,
        ])

    @classmethod
    def get_missing_catalog_vars(cls) -> list:
        """Return list of missing catalog store environment variables."""
        missing = []
        if not cls.CATALOG_API_URL:
            missing.append("CATALOG_API_URL")
        if not cls.CATALOG_API_KEY:
            missing.append("CATALOG_API_KEY")
        return missing


config = Config()
