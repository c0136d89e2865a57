"""Settings mixins for application identity, storage and logging.

AppSettingsMixin: Application identity and disk layout (app_name, data_dir).
StoreSettingsMixin: Storage backend and authentication behaviour.
LoggingSettingsMixin: Log level and output format.

These live outside config.py so each concern can be read on its own and
composed into Settings via multiple inheritance.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator


class AppSettingsMixin:
    """Settings for application identity and disk layout.

    Mixin class that provides:
    - Application name and data directory
    - Path expansion for data_dir
    - Derived path properties (storage directory)

    Should be composed with pydantic-settings BaseSettings via multiple inheritance.
    """

    app_name: str = Field(
        default="taskdeck",
        title="App Name",
        description="Application name, also used for config directories",
    )

    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".taskdeck",
        title="Data Directory",
        description="Directory holding persisted users, sessions and tasks",
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Expand ~ in paths."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @property
    def storage_dir(self) -> Path:
        """Directory for file-backed key-value storage."""
        return self.data_dir / "storage"


class StoreSettingsMixin:
    """Settings for the storage backend and the credential store."""

    storage_backend: Literal["file", "memory"] = Field(
        default="file",
        title="Storage Backend",
        description="Where collections are persisted (file for durable, memory for ephemeral)",
    )

    session_ttl_hours: int = Field(
        default=24,
        title="Session TTL",
        description="Hours a login session stays valid",
    )

    simulated_latency: float = Field(
        default=1.0,
        title="Simulated Latency",
        description="Seconds to wait in login/register to mimic a network round trip",
    )

    seed_demo_user: bool = Field(
        default=True,
        title="Seed Demo User",
        description="Create the demo account when no users exist",
    )


class LoggingSettingsMixin:
    """Settings for logging output.

    Note: This is a mixin, not a BaseSettings subclass, to avoid
    MRO issues when composed with other settings classes.
    """

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        title="Log Level",
        description="Logging verbosity level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="Log output format (console for dev, json for production)",
    )
