"""Log record models: what callers hand in and what goes over the wire."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .config import Environment, LoggerConfig
from .errors import ConfigError


class LogLevel(Enum):
    """Log levels. Values are the labels sent over the wire."""

    INFO = "Info"
    WARN = "Warn"
    ERROR = "Error"
    DEBUG = "Debug"

    @property
    def label(self) -> str:
        return self.value.lower()

    @classmethod
    def from_label(cls, label: str) -> "LogLevel":
        for member in cls:
            if member.label == label:
                return member
        valid = ", ".join(member.label for member in cls)
        raise ConfigError(f"invalid log level {label!r} (expected one of: {valid})")

    def __str__(self) -> str:
        return self.label


class EnrichedLogRecord(BaseModel):
    """A log event combined with environment and app version, ready to send."""

    model_config = ConfigDict(frozen=True)

    env: Environment
    message: str
    context: str
    level: LogLevel
    app_version: str

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with exactly the five wire keys."""
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        return self.model_dump_json()


@dataclass(frozen=True)
class LogRecord:
    """A log event as supplied by the caller."""

    message: str
    context: str = ""

    def to_enriched(self, config: LoggerConfig, level: LogLevel) -> EnrichedLogRecord:
        return EnrichedLogRecord(
            env=config.environment,
            message=self.message,
            context=self.context,
            level=level,
            app_version=config.app_version,
        )
