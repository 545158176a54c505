"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────
    POSTGRES_USER: str = "docvault"
    POSTGRES_PASSWORD: str = "docvault"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = Field(default=5432, ge=1, le=65535)
    POSTGRES_DB: str = "docvault"
    DATABASE_URL_OVERRIDE: str = ""
    DATABASE_ECHO: bool = False
    DOCUMENTS_TABLE: str = Field(default="documents", min_length=1)

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for the SQL document store (asyncpg unless overridden)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Logging ───────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ── Application ───────────────────────────
    APP_ENV: str = "development"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
