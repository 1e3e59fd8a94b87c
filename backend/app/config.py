"""
Application configuration.
Centralized settings for the maintenance tracker, read from the environment or a .env file.
"""

from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tracker settings"""

    # ==================== Database ====================

    DATABASE_URL: str = "sqlite:///./tracker.db"
    DATABASE_ECHO: bool = False

    # ==================== Authentication ====================

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    # ==================== Query Defaults ====================

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    DUE_VIEW_PAGE_SIZE: int = 20

    # ==================== Due-Date Policy ====================

    DUE_WINDOW_DAYS: int = 30

    # ==================== Server ====================

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    @property
    def due_window_ms(self) -> int:
        """Lookahead window in epoch milliseconds (30 days -> 2,592,000,000)"""
        return self.DUE_WINDOW_DAYS * 24 * 60 * 60 * 1000

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Initialize settings
settings = Settings()
