# cargoplan/config.py

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field
from functools import lru_cache
from urllib.parse import quote_plus

class Settings(BaseSettings):
    # App Config
    APP_NAME: str = "CargoPlan Logistics"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    FRONTEND_HOST: str = "http://localhost:3000"

    # Database Config
    POSTGRES_HOST: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "secret"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "cargoplan"
    # Full URL wins over the POSTGRES_* parts (sqlite for local runs and tests)
    SQLALCHEMY_DATABASE_URL: Optional[str] = None

    # Security
    SECRET_KEY: str
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 1440

    # Seeding
    SEED_ADMIN_PASSWORD: str = "admin123"
    SEED_AGENT_PASSWORD: str = "agent123"

    @computed_field
    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URL:
            return self.SQLALCHEMY_DATABASE_URL
        password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql://{self.POSTGRES_USER}:{password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=True
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
