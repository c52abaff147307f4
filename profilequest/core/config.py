import logging
from typing import Any, Optional
from urllib.parse import quote

from pydantic import AliasChoices, Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "ProfileQuest API"
    ENVIRONMENT: str = "development"  # development, production, test
    SECRET_KEY: str = "super-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    ALLOWED_ORIGINS: str = "*"

    # Database
    DATABASE_URL: str
    POSTGRES_URL: Optional[str] = None
    PGHOST: Optional[str] = None
    PGPORT: str = "5432"
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    PGDATABASE: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def check_database_url(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("DATABASE_URL"):
            return data

        if data.get("POSTGRES_URL"):
            logger.debug("Using POSTGRES_URL fallback for DATABASE_URL")
            data["DATABASE_URL"] = data["POSTGRES_URL"]
            return data

        required = ("PGHOST", "PGUSER", "PGPASSWORD", "PGDATABASE")
        if all(data.get(key) for key in required):
            password = quote(data["PGPASSWORD"], safe="")
            port = data.get("PGPORT") or "5432"
            data["DATABASE_URL"] = (
                f"postgresql://{data['PGUSER']}:{password}"
                f"@{data['PGHOST']}:{port}/{data['PGDATABASE']}"
            )
        return data

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    # AI (any OpenAI-compatible endpoint; Groq by default)
    LLM_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY"),
    )
    LLM_BASE_URL: Optional[str] = "https://api.groq.com/openai/v1"
    LLM_QUEST_MODEL: str = "llama-3.3-70b-versatile"
    LLM_PERSONA_MODEL: str = "openai/gpt-oss-20b"
    LLM_FALLBACK_MODEL: str = "llama-3.1-8b-instant"
    LLM_TEMPERATURE: float = 0.7

    # Images
    GOOGLE_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    DICEBEAR_URL: str = "https://api.dicebear.com/7.x/thumbs/png"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Monitoring (Sentry)
    SENTRY_DSN: Optional[str] = None


settings = Settings()

if not settings.LLM_API_KEY:
    logger.warning("LLM_API_KEY is missing. Quest and persona generation will run in simulated mode.")
