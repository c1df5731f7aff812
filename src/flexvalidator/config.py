"""Configuration management for flexvalidator using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_FILE_NAME = ".flexvalidator.json"


class DuplicateRulePolicy(str, Enum):
    """What happens when a guid is resolved twice in one run."""
    KEEP_ALL = "keep_all"
    REJECT = "reject"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    def to_logging_level(self) -> int:
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.TRACE: logging.DEBUG,
        }[self]


class EngineConfig(BaseModel):
    """Engine behaviour section."""
    duplicate_rules: DuplicateRulePolicy = Field(
        alias="duplicateRules", default=DuplicateRulePolicy.KEEP_ALL
    )
    allow_section_overwrite: bool = Field(alias="allowSectionOverwrite", default=False)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE
    show_passed: bool = Field(alias="showPassed", default=False)

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class FlexValidatorConfig(BaseModel):
    """Complete flexvalidator configuration model."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> FlexValidatorConfig:
    """Read `config_path`, or the nearest .flexvalidator.json, falling back to defaults.

    Raises:
        ValueError: If the file is not JSON or does not match FlexValidatorConfig
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        return create_default_config()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        return FlexValidatorConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest .flexvalidator.json in `start_dir` (default: cwd) or one of its parents."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def create_default_config() -> FlexValidatorConfig:
    """Create default configuration."""
    return FlexValidatorConfig()
