"""
Application configuration
Values are read from environment variables or a local .env file
"""
from typing import List, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "HotelDesk"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./hoteldesk.db"

    # Session (JWT carried in an httpOnly cookie)
    SECRET_KEY: str = "hoteldesk-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    SESSION_COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # CORS; the console sends credentials so the origin list must be explicit
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Invoices
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    INVOICE_DIR: str = "./invoices"
    INVOICE_DUE_DAYS: int = 7

    # SMTP for invoice e-mails
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_SENDER: Optional[str] = None
    SMTP_USE_TLS: bool = True

    # Owner seasons, MM-DD; a window may wrap the year end
    SUMMER_SEASON_START: str = "05-01"
    SUMMER_SEASON_END: str = "09-30"
    WINTER_SEASON_START: str = "12-01"
    WINTER_SEASON_END: str = "02-28"
    # ISO weekday numbers (Mon=1 .. Sun=7)
    WEEKEND_DAYS: List[int] = [6, 7]
    DEFAULT_SEASON_LIMIT: int = 22

    # Seeded when the employee table is empty
    DEFAULT_ADMIN_EMAIL: str = "admin@hoteldesk.local"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
