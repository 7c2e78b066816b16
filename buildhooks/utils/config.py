"""Configuration for buildhooks.

Pydantic-based settings, overridable through the environment.

Environment Variables:
- BUILDHOOKS_PROJECT_MARKER: Directory that marks a project root (default: .buildhooks)
- BUILDHOOKS_HOOKS_SUBPATH: Hooks tree relative to the project root (default: .buildhooks/hooks)
- BUILDHOOKS_LOG_LEVEL: Logging level (default: INFO)
- BUILDHOOKS_JSON_LOGS: Emit JSON logs (default: false)
- BUILDHOOKS_DEV_MODE: Colorful console logs (default: true)
"""

from pathlib import PurePath

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildhooks.exceptions import ConfigurationError


class Settings(BaseSettings):
    """buildhooks settings.

    Example:
        >>> settings = Settings()
        >>> settings.hooks_subpath
        '.buildhooks/hooks'
        >>>
        >>> os.environ["BUILDHOOKS_HOOKS_SUBPATH"] = "tools/hooks"
        >>> Settings().hooks_subpath
        'tools/hooks'
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDHOOKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project layout
    project_marker: str = Field(
        default=".buildhooks",
        min_length=1,
        description="Directory whose presence marks a project root",
    )

    hooks_subpath: str = Field(
        default=".buildhooks/hooks",
        min_length=1,
        description="Hook scripts tree, relative to the project root",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    dev_mode: bool = Field(default=True, description="Colorful console log output")

    @field_validator("hooks_subpath", "project_marker")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Project paths must stay inside the project root."""
        if PurePath(v).is_absolute():
            raise ValueError(f"must be a relative path, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level name."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got {v}")
        return v.upper()


_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get or create the settings singleton.

    Args:
        force_reload: Force reload from environment

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the environment holds invalid values
    """
    global _settings

    if _settings is None or force_reload:
        try:
            _settings = Settings()
        except ValidationError as e:
            first = e.errors()[0]
            raise ConfigurationError(
                f"Invalid buildhooks settings: {first['msg']}",
                setting=".".join(str(part) for part in first["loc"]),
                original_error=e,
            ) from e

    return _settings
