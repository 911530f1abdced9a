"""
expensebot/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, chat server, bot identity)
- Validates configuration on startup
- Immutable snapshot, swapped as a whole on reload
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Instances are frozen; reload builds a new one.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"

    # Storage
    STORE_BACKEND: Literal["mongo", "memory"] = Field(
        default="mongo",
        description="Record store backend"
    )
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="expensebot",
        description="MongoDB database name"
    )
    MONGODB_COLLECTION: str = Field(
        default="kvstore",
        description="Collection holding the namespaced records"
    )

    # Chat server
    CHAT_SERVER_URL: str = Field(
        default="http://localhost:8065",
        description="Chat server base URL used for REST calls"
    )
    CHAT_BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Access token of the bot account"
    )
    BOT_USER_ID: str = Field(
        default="",
        description="User id of the bot account; its own messages are ignored"
    )
    EXPENSE_CHANNEL_ID: str = Field(
        default="",
        description="Shared channel where expense claims are announced"
    )
    SITE_URL: str = Field(
        default="",
        description="Public chat site URL used for file links"
    )
    CALLBACK_BASE_URL: str = Field(
        default="/plugins/com.mattermost.plugin-expense-bot",
        description="Prefix of the approval callback URLs embedded in buttons"
    )
    CHAT_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Chat server request timeout in seconds"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix for the event webhook"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    AUTH_USER_HEADER: str = Field(
        default="Mattermost-User-ID",
        description="Header carrying the authenticated user id on callbacks"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        frozen = True


# Current settings snapshot
_settings: Settings = Settings()


def get_settings() -> Settings:
    """Returns the current settings snapshot."""
    return _settings


def reload_settings() -> Settings:
    """
    Re-reads the environment and swaps in a new snapshot.
    Handlers holding the previous snapshot keep a consistent view.
    """
    global _settings
    _settings = Settings()
    return _settings


def validate_settings(settings: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    settings = settings or get_settings()
    errors = []

    if settings.STORE_BACKEND == "mongo" and not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.CHAT_SERVER_URL:
        errors.append("CHAT_SERVER_URL is required")

    if not settings.BOT_USER_ID:
        errors.append("BOT_USER_ID is required")

    # Production-specific validations
    if settings.is_production:
        if settings.STORE_BACKEND == "memory":
            errors.append("STORE_BACKEND=memory is not allowed in production")
        if not settings.CHAT_BOT_TOKEN:
            errors.append("CHAT_BOT_TOKEN is required in production")
        if not settings.EXPENSE_CHANNEL_ID:
            errors.append("EXPENSE_CHANNEL_ID is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
