"""
Configuration module for the library catalog.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: database URL, default locale,
placeholder cover location and a few UI defaults.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_COVER_FILE = PACKAGE_DIR / "static" / "images" / "no-cover.jpg"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        DEFAULT_LOCALE (str): Language tag used when the caller does not choose one ('ru' or 'en').
        DEFAULT_COVER_PATH (str): Placeholder cover stored for new books uploaded without one.
        PAGE_SIZE (int): Books per catalogue page.
        TOP_BOOKS_LIMIT (int): Size of the "popular books" strip.
        LOG_LEVEL (str): Root logging level for the entry points.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./library.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "ru")
    DEFAULT_COVER_PATH: str = os.getenv("DEFAULT_COVER_PATH", str(DEFAULT_COVER_FILE))
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "10"))
    TOP_BOOKS_LIMIT: int = int(os.getenv("TOP_BOOKS_LIMIT", "5"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
