"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Local-only storage, no credentials anywhere
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class StorageConfig(BaseModel):
    """Where persisted documents live."""

    backend: Literal["file", "memory"] = Field(
        default="file", description="Key-value storage backend"
    )
    data_dir: str = Field(default="./data", description="Directory holding one file per key")
    key_prefix: str = Field(
        default="carecompanion", description="Namespace prepended to every storage key"
    )

    @field_validator("key_prefix")
    def validate_key_prefix(cls, v):
        if not v or not v.strip():
            raise ValueError("storage key prefix must not be empty")
        if any(sep in v for sep in ("/", "\\")):
            raise ValueError("storage key prefix must not contain path separators")
        return v.strip()


class ReminderConfig(BaseModel):
    """Medication reminder and home dashboard settings."""

    refresh_interval_seconds: float = Field(
        default=60.0, gt=0.0, description="Interval between due-medication re-evaluations"
    )
    upcoming_window_days: int = Field(
        default=7, gt=0, description="How far ahead the dashboard looks for events"
    )
    dashboard_event_limit: int = Field(
        default=3, gt=0, description="Maximum number of events shown on the dashboard"
    )


class CommunityConfig(BaseModel):
    """Defaults applied to community content created on this device."""

    current_user_id: str = Field(default="user-1", min_length=1, description="Local user id")
    default_author: str = Field(default="You", min_length=1, description="Author for new posts")
    default_organizer: str = Field(
        default="Community Center", min_length=1, description="Organizer for new events"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    storage: StorageConfig = Field(default_factory=StorageConfig)
    reminders: ReminderConfig = Field(default_factory=ReminderConfig)
    community: CommunityConfig = Field(default_factory=CommunityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _backend_to_literal(val: str) -> Literal["file", "memory"]:
        return "memory" if val.strip().lower() == "memory" else "file"

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    storage_config = StorageConfig(
        backend=_backend_to_literal(os.getenv("CARE_STORAGE_BACKEND", "file")),
        data_dir=os.getenv("CARE_DATA_DIR", "./data"),
        key_prefix=os.getenv("CARE_KEY_PREFIX", "carecompanion"),
    )

    reminder_config = ReminderConfig(
        refresh_interval_seconds=float(os.getenv("REMINDER_REFRESH_SECONDS", "60.0")),
        upcoming_window_days=int(os.getenv("UPCOMING_WINDOW_DAYS", "7")),
        dashboard_event_limit=int(os.getenv("DASHBOARD_EVENT_LIMIT", "3")),
    )

    community_config = CommunityConfig(
        current_user_id=os.getenv("CURRENT_USER_ID", "user-1"),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        storage=storage_config,
        reminders=reminder_config,
        community=community_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")

        if config.storage.backend == "file":
            print(f"✅ Persisting documents under {config.storage.data_dir}")
        else:
            print("⚠️  In-memory storage: data will not survive a restart")

    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n💾 STORAGE")
    print(f"Backend: {config.storage.backend}")
    print(f"Data Directory: {config.storage.data_dir}")
    print(f"Key Prefix: {config.storage.key_prefix}")

    print("\n💊 REMINDERS")
    print(f"Refresh Interval: {config.reminders.refresh_interval_seconds}s")
    print(f"Upcoming Window: {config.reminders.upcoming_window_days}d")
    print(f"Dashboard Events: {config.reminders.dashboard_event_limit}")


if __name__ == "__main__":
    # Test configuration loading
    validate_config()
    print_config_summary()
