"""
Inventory Auth API - Configuration
Loads settings from environment variables
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Info
    APP_NAME: str = "Inventory Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # API
    API_PREFIX: str = "/api/v1"

    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Front-end redirect targets
    LOGIN_URL: str = "/pages/login.html"
    DASHBOARD_URL: str = "/index.html"

    # Tables
    USERS_TABLE: str = "users"
    PAGE_VIEWS_TABLE: str = "user_page_views"

    # Notifications
    TRACKED_COLLECTIONS: List[str] = ["products", "inbound", "outbound"]
    CREATED_AT_FIELD: str = "created_at"
    BADGE_CAP: int = 99

    # PostgREST max-rows (Supabase default); list queries page at this size
    QUERY_PAGE_SIZE: int = 1000

    # Profile form
    MIN_PASSWORD_LENGTH: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
