"""Configuration handling for scribe."""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

# Keys older flat config files placed at the top level
LEGACY_RECORDER_KEYS = ("device", "duration", "volume")


def get_default_config_path() -> Path:
    """Get the default config file path following XDG spec."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base_dir = Path(xdg_config)
    else:
        base_dir = Path.home() / ".config"

    return base_dir / "scribe" / "config.toml"


class RecorderConfig(BaseModel):
    """Recorder (ffmpeg) configuration."""

    binary: str = Field(default="ffmpeg", description="Recorder executable.")
    input_format: str = Field(
        default="alsa", description="ffmpeg input format for the capture device."
    )
    device: str = Field(
        default="front:CARD=BRIO", description="Audio input device identifier."
    )
    duration: int = Field(
        default=3600, gt=0, description="Maximum recording length in seconds."
    )
    volume: float = Field(
        default=2.0, gt=0, description="Volume multiplier applied while recording."
    )
    recording_dir: Path = Field(
        default=Path("."), description="Directory the recording is written to."
    )
    keep_recording: bool = Field(
        default=True, description="Leave the recording on disk after a successful run."
    )
    stop_timeout: float = Field(
        default=0.0,
        ge=0,
        description="Seconds to wait for the recorder to exit (0 = wait forever).",
    )

    @field_validator("binary", "device")
    @classmethod
    def check_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty")
        return v

    @field_validator("recording_dir")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        return v.expanduser()


class TranscriberConfig(BaseModel):
    """Transcriber (whisper CLI) configuration."""

    binary: str = Field(default="whisper", description="Transcriber executable.")
    model: str = Field(default="turbo", description="Whisper model name.")
    device: str = Field(default="cuda", description="Inference device (cpu, cuda).")
    language: Optional[str] = Field(
        default="en", description="Language code (empty for auto-detect)."
    )
    extra_args: List[str] = Field(
        default_factory=list, description="Additional arguments passed verbatim."
    )

    @field_validator("model")
    @classmethod
    def check_model_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Whisper model identifier cannot be empty")
        return v


class ClipboardConfig(BaseModel):
    """Clipboard command configuration."""

    command: str = Field(
        default="cb copy", description="Command that reads text on stdin."
    )

    @field_validator("command")
    @classmethod
    def check_command_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Clipboard command cannot be empty")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    log_file: Optional[Path] = Field(
        default=None, description="Optional log file; no file is written when unset."
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in allowed_levels:
            raise ValueError(f"Invalid log level. Choose from {allowed_levels}")
        return upper_v

    @field_validator("log_file", mode="before")
    @classmethod
    def empty_log_file_is_unset(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @property
    def computed_log_file(self) -> Optional[Path]:
        if self.log_file:
            return self.log_file.expanduser()
        return None


class AppConfig(BaseModel):
    """Root configuration."""

    recorder: RecorderConfig = Field(default_factory=RecorderConfig)
    transcriber: TranscriberConfig = Field(default_factory=TranscriberConfig)
    clipboard: ClipboardConfig = Field(default_factory=ClipboardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _migrate_legacy_keys(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """Move top-level device/duration/volume keys into the recorder table."""
    legacy = {k: config_data.pop(k) for k in LEGACY_RECORDER_KEYS if k in config_data}
    if legacy:
        recorder = dict(config_data.get("recorder", {}))
        for key, value in legacy.items():
            recorder.setdefault(key, value)
        config_data["recorder"] = recorder
    return config_data


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load and validate configuration.

    If path is not provided, looks for config in the standard location.
    If no config file is found, returns default configuration.

    Args:
        path: Optional path to config file.

    Returns:
        Validated AppConfig instance.

    Raises:
        ConfigurationError: If the config file can't be read, parsed or validated.
    """
    if path is None:
        path = get_default_config_path()
    path = Path(path).expanduser()

    if not path.exists():
        return AppConfig()  # Use defaults

    try:
        with open(path, "rb") as f:
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Error decoding TOML file: {path}\n{e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error reading file: {path}\n{e}") from e

    try:
        return AppConfig(**_migrate_legacy_keys(config_data))
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def apply_overrides(config: AppConfig, **overrides: Any) -> AppConfig:
    """Return a copy of config with recorder settings overridden.

    Overrides whose value is None are ignored, so unset CLI flags fall back to
    the file or default value.

    Raises:
        ConfigurationError: If an override fails validation.
    """
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config

    try:
        recorder = RecorderConfig(**{**config.recorder.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command-line override: {e}") from e
    return config.model_copy(update={"recorder": recorder})
