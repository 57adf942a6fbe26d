"""
Configuration settings for the Todo Service.
"""
import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_JWT_SECRET = "defaultSecretKeyForDevelopmentPurposesOnlyReplaceInProduction"


class Settings:
    """Application settings"""

    def __init__(self):
        # Service information
        self.service_name: str = os.getenv("SERVICE_NAME", "todo_service")
        self.service_version: str = os.getenv("SERVICE_VERSION", "1.0.0")
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

        # Database configuration
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./todo.db")

        # API configuration
        self.api_prefix: str = os.getenv("API_PREFIX", "/api")
        self.cors_allowed_origins: List[str] = os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")

        # Security
        self.jwt_secret: str = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expiration_minutes: int = int(os.getenv("JWT_EXPIRATION_MINUTES", "1440"))
        self.bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


@lru_cache()
def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
