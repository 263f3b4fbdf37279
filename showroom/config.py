"""
Configuration management for the FastAPI application.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Showroom API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Backend API for the product catalog, gallery and enquiry admin panel"

    # CORS Configuration
    # Session cookies require credentials, so origins must be listed explicitly
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5000",
        "http://127.0.0.1:5173",
    ]

    # Persistence backend: "memory", "sql" or "mongo"
    STORAGE_BACKEND: str = "memory"

    # SQL backend (SQLite via aiosqlite or PostgreSQL via asyncpg)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/showroom.db"

    # MongoDB backend and GridFS image sink
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "showroom"
    GRIDFS_BUCKET: str = "images"

    # Image sink: "disk", "gridfs" or "cloudinary"
    IMAGE_SINK: str = "disk"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_MB: int = 10

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "showroom"

    # Admin Password
    # Should be bcrypt hashed password (see verify_password.py --generate)
    ADMIN_PASSWORD_HASH: str = ""

    # Session Configuration
    # SECRET_KEY should be a long random string (e.g., generated with: openssl rand -hex 32)
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production-use-openssl-rand-hex-32"
    SESSION_COOKIE_NAME: str = "showroom_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24
    RATE_LIMIT_ENABLED: bool = True

    # Enquiry notification email via the Mailgun HTTP API
    # (skipped when MAILGUN_API_KEY, MAILGUN_DOMAIN or NOTIFICATION_EMAIL is empty)
    MAILGUN_API_KEY: str = ""
    MAILGUN_DOMAIN: str = ""
    MAILGUN_API_BASE: str = "https://api.mailgun.net/v3"
    EMAIL_FROM: str = "noreply@localhost"
    NOTIFICATION_EMAIL: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
