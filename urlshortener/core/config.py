from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"

    # Record store. redis:// and rediss:// URLs select the Redis backend,
    # anything else is handed to SQLAlchemy.
    DATABASE_URL: str = "sqlite:///./urlshortener.db"
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    STORE_NAMESPACE: str = "urlshortener"
    STORE_DATABASE: str = "urlshortener"

    SERVER_ADDRESS: str = "0.0.0.0:3000"
    BASE_URL: str = "http://localhost:3000"

    MAX_ID_RETRIES: int = 5
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def bind_host(self) -> str:
        return self.SERVER_ADDRESS.rsplit(":", 1)[0]

    @property
    def bind_port(self) -> int:
        return int(self.SERVER_ADDRESS.rsplit(":", 1)[1])


def get_settings() -> Settings:
    return Settings()
