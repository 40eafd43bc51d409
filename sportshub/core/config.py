from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Database Configuration
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/sportshub"

    # Redis Configuration
    REDIS_URL: str = "redis://redis:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 300

    # Security Configuration
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ALGORITHM: str = "HS256"

    # Geocoding Configuration (MapQuest)
    GEOCODER_URL: str = "https://www.mapquestapi.com/geocoding/v1/address"
    GEOCODER_API_KEY: Optional[str] = None
    GEOCODER_TIMEOUT: float = 10.0

    # Uploads
    FILE_UPLOAD_PATH: str = "./public/uploads"
    MAX_FILE_UPLOAD: int = 1_000_000  # bytes

    # Environment
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create a single instance to be imported throughout the app
settings = Settings()
