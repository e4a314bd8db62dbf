from pydantic import ValidationError as SettingsError
from pydantic_settings import BaseSettings
import logging
import sys

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    MONGO_URI: str
    MONGO_DB_NAME: str = "aha"

    # Token signing
    JWT_SECRET: str
    TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    # Upstream LLM (OpenRouter-compatible chat completions endpoint)
    OPENAI_API_KEY: str
    LLM_API_URL: str
    LLM_DEFAULT_MODEL: str = "gpt-4o-mini"
    LLM_MAX_TOKENS: int = 2000
    LLM_TIMEOUT: float = 60.0
    LLM_REFERER: str = "http://localhost:5173"
    LLM_APP_TITLE: str = "AHA AI"

    # Quota
    FREE_REQUEST_LIMIT: int = 3

    # Server
    PORT: int = 9000

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra env variables


REQUIRED_SETTINGS = ("MONGO_URI", "JWT_SECRET", "OPENAI_API_KEY", "LLM_API_URL")


def load_settings(**overrides) -> Settings:
    """
    Load settings or terminate the process.

    Missing database, signing or upstream configuration is fatal: the error
    is logged and the process exits with status 1.
    """
    try:
        settings = Settings(**overrides)
    except SettingsError as e:
        missing = [str(err["loc"][0]) for err in e.errors() if err.get("type") == "missing"]
        if missing:
            logger.error(f"Missing required configuration: {', '.join(missing)}")
        else:
            logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    empty = [name for name in REQUIRED_SETTINGS if not getattr(settings, name).strip()]
    if empty:
        logger.error(f"Missing required configuration: {', '.join(empty)}")
        sys.exit(1)

    return settings
