from pydantic_settings import BaseSettings
from typing import List, Union, Optional
from pydantic import field_validator


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./database.sqlite"

    # Application
    SECRET_KEY: str
    DEBUG: bool = False
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173"]
    API_PREFIX: str = "/api"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Split by comma or keep as single item
            return [origin.strip() for origin in v.split(",")]
        return v

    # Authentication
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Seed admin (created on first boot when ADMIN_PASSWORD is set)
    ADMIN_EMAIL: str = "admin@fableration.com"
    ADMIN_PASSWORD: Optional[str] = None

    # Storage
    MEDIA_ROOT: str = "./uploads"  # Served under /uploads

    # File Upload Security
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB per image
    ALLOWED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
