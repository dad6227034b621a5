"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str = "sqlite:///./quiz.db"

    # Application
    APP_NAME: str = "Quiz Assessment Platform"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Grading
    MULTI_SELECT_DELIMITER: str = "|"
    ALLOW_NEGATIVE_SCORE: bool = True

    # Attempts
    ENFORCE_TIME_LIMIT: bool = True  # reject answers after the deadline

    # Listing
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
