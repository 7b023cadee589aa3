"""
Application configuration and environment variables.
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # App settings
    APP_NAME: str = "Semantic Diff & Merge"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

    # Diff engine
    MAX_EDIT_DISTANCE: int = int(os.getenv("MAX_EDIT_DISTANCE", "2000"))
    DEFAULT_PRESET: str = os.getenv("DEFAULT_PRESET", "balanced-review")

    # CORS
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")


settings = Settings()
