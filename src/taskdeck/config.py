"""Configuration for TaskDeck.

Settings Management:
    The module provides both global singleton and context-based settings:

    1. Global singleton (simple cases):
        set_settings(my_settings)
        settings = get_settings()

    2. Context-based (isolated contexts, tests):
        with SettingsContext(my_settings):
            # Code here sees my_settings via get_settings()
            settings = get_settings()  # Returns my_settings

Settings Loading Priority (highest to lowest):
    1. Environment variables (TASKDECK_* prefix)
    2. Project config (./.taskdeck/settings.json)
    3. User config (~/.taskdeck/settings.json)
    4. .env file
    5. Default values
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Generator, Tuple, Type

from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from taskdeck.settings_mixins import (
    AppSettingsMixin,
    LoggingSettingsMixin,
    StoreSettingsMixin,
)

__all__ = [
    "Settings",
    "SettingsContext",
    "SettingsValidationError",
    "get_settings",
    "set_settings",
    "set_context_settings",
    "get_context_settings",
    "validate_settings",
    "reload_settings",
]


def _get_json_config_source(
    settings_cls: Type[BaseSettings],
    json_file: Path,
) -> PydanticBaseSettingsSource | None:
    """Create a JSON config source if the file exists."""
    if not json_file.exists():
        return None
    return JsonConfigSettingsSource(settings_cls, json_file=json_file)


class Settings(AppSettingsMixin, StoreSettingsMixin, LoggingSettingsMixin, BaseSettings):
    """TaskDeck settings.

    Settings are loaded from (in order of precedence):
    1. Constructor arguments
    2. Environment variables (TASKDECK_ prefix)
    3. Project config (./.{app_name}/settings.json)
    4. User config (~/.{app_name}/settings.json)
    5. .env file
    6. Default values

    Mixins provide organized settings:
    - AppSettingsMixin: Application identity and disk layout
    - StoreSettingsMixin: Storage backend, session TTL, simulated latency
    - LoggingSettingsMixin: Log level and format
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources for layered JSON configuration.

        Note: JSON sources are only included if the files exist.
        """
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
        ]

        app_name = cls.model_fields["app_name"].default

        project_json = _get_json_config_source(
            settings_cls,
            Path.cwd() / f".{app_name}" / "settings.json",
        )
        if project_json:
            sources.append(project_json)

        user_json = _get_json_config_source(
            settings_cls,
            Path.home() / f".{app_name}" / "settings.json",
        )
        if user_json:
            sources.append(user_json)

        sources.append(dotenv_settings)

        return tuple(sources)


# Context variable for settings (takes precedence over global singleton)
_settings_context: ContextVar[Settings | None] = ContextVar(
    "settings_context", default=None
)

# Global settings instance holder (fallback when no context)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get the current settings instance.

    Settings resolution order:
    1. Context variable (set via SettingsContext or set_context_settings)
    2. Global singleton (set via set_settings)
    3. Fresh Settings instance (created on first access)
    """
    context_settings = _settings_context.get()
    if context_settings is not None:
        return context_settings

    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Note: For isolated contexts (e.g., testing), prefer using
    SettingsContext instead.
    """
    global _settings_instance
    _settings_instance = settings


def set_context_settings(settings: Settings | None) -> Token:
    """Set settings for the current context.

    Args:
        settings: Settings to use in current context, or None to clear

    Returns:
        Token that can be used to reset the context variable.
    """
    return _settings_context.set(settings)


def get_context_settings() -> Settings | None:
    """Get settings from current context (if any)."""
    return _settings_context.get()


@contextmanager
def SettingsContext(settings: Settings) -> Generator[Settings, None, None]:
    """Context manager for isolated settings.

    Example:
        with SettingsContext(test_settings) as s:
            # All get_settings() calls here return test_settings
            app = TaskDeckApp()

    Args:
        settings: Settings to use within the context

    Yields:
        The settings instance
    """
    token = _settings_context.set(settings)
    try:
        yield settings
    finally:
        _settings_context.reset(token)


def reload_settings() -> Settings:
    """Reload settings (clears global singleton and context cache).

    Returns:
        Fresh Settings instance
    """
    global _settings_instance
    _settings_instance = None
    _settings_context.set(None)
    return get_settings()


class SettingsValidationError(Exception):
    """Raised when settings validation fails."""

    pass


def validate_settings(settings: Settings) -> None:
    """Validate settings for runtime use.

    Args:
        settings: Settings to validate

    Raises:
        SettingsValidationError: If validation fails
    """
    errors = []

    if settings.session_ttl_hours <= 0:
        errors.append(
            f"session_ttl_hours must be positive, got {settings.session_ttl_hours}"
        )

    if settings.simulated_latency < 0:
        errors.append(
            f"simulated_latency must not be negative, got {settings.simulated_latency}"
        )

    if errors:
        raise SettingsValidationError("\n".join(errors))
