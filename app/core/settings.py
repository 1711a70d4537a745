"""
Core settings and environment variables for RoadFix.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "RoadFix API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # In-process mock DB for local development and tests
    USE_MOCK_DB: bool = False

    # Token signing - no default, must come from the environment
    JWT_SECRET_KEY: Optional[SecretStr] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24

    # Teams created at startup when missing, e.g. "T1,T2,T3"
    SEED_TEAMS: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def seed_teams(self) -> List[str]:
        return [t.strip() for t in self.SEED_TEAMS.split(",") if t.strip()]


# Global settings instance
settings = Settings()
