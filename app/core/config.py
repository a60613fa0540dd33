"""
Application configuration settings
"""
import os
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # App Configuration
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HOST: str = "0.0.0.0"
    PORT: int = int(os.getenv("PORT", "8000"))

    # Firebase Configuration (optional when running on the memory store)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_PRIVATE_KEY_ID: Optional[str] = None
    FIREBASE_PRIVATE_KEY: Optional[str] = None
    FIREBASE_CLIENT_EMAIL: Optional[str] = None
    FIREBASE_CLIENT_ID: Optional[str] = None
    FIREBASE_AUTH_URI: str = "https://accounts.google.com/o/oauth2/auth"
    FIREBASE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"

    # Storage backend: "firestore" or "memory"
    READING_STORE: str = "firestore"

    # Rate limiting
    RATE_LIMIT_CALLS: int = 100
    RATE_LIMIT_PERIOD: int = 60  # seconds

    # Comma-separated list of allowed CORS origins
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Analytics presentation limits
    RECENT_ARTICLES_LIMIT: int = 10
    TOP_CATEGORIES_LIMIT: int = 3
    ENGAGEMENT_WINDOW_DAYS: int = 7
    HIGHLIGHTS_LIST_LIMIT: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = 'ignore'

    @property
    def cors_origins(self) -> List[str]:
        """Allowed origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def uses_firestore(self) -> bool:
        return self.READING_STORE.lower() == "firestore"


# Global settings instance
settings = Settings()
