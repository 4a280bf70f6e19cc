"""
Configuration for betterlog.

A LoggerConfig is built once at startup, either from the process
environment (optionally seeded from a .env file) or from explicit values,
and is then shared read-only by the Logger.

Environment variables:
    ENVIRONMENT: Deployment environment label (required): local, qa, preprod, prod
    LOGS_SOURCE_TOKEN: Better Stack source token (required)
    LOGS_ENDPOINT: Collector URL (optional)
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Default Better Stack log ingestion endpoint
DEFAULT_ENDPOINT = "https://in.logs.betterstack.com"


class Environment(Enum):
    """Deployment environment. Values are the labels sent over the wire."""

    LOCAL = "Local"
    QA = "QA"
    PREPROD = "PreProd"
    PROD = "Prod"

    @property
    def label(self) -> str:
        """Configuration label, e.g. "preprod"."""
        return self.value.lower()

    @classmethod
    def from_label(cls, label: str) -> "Environment":
        """
        Parse a configuration label.

        Matching is exact: "qa" parses, "QA" and "staging" do not.
        """
        for member in cls:
            if member.label == label:
                return member
        valid = ", ".join(member.label for member in cls)
        raise ConfigError(f"invalid environment {label!r} (expected one of: {valid})")

    def __str__(self) -> str:
        return self.label


def _default_app_version() -> str:
    from . import __version__

    return __version__


@dataclass(frozen=True)
class LoggerConfig:
    """Ambient settings every log event is enriched with."""

    app_version: str
    environment: Environment
    logs_source_token: str
    verbose: bool = True  # Echo non-debug events to the console
    endpoint: str = DEFAULT_ENDPOINT

    def __repr__(self) -> str:
        # Keep the token out of tracebacks and debug output
        return (
            f"LoggerConfig(app_version={self.app_version!r}, "
            f"environment={self.environment.label!r}, verbose={self.verbose}, "
            f"endpoint={self.endpoint!r})"
        )

    @property
    def is_local(self) -> bool:
        return self.environment is Environment.LOCAL

    @classmethod
    def from_values(
        cls,
        environment: Environment | str,
        logs_source_token: str,
        app_version: str | None = None,
        verbose: bool = True,
        endpoint: str = DEFAULT_ENDPOINT,
    ) -> "LoggerConfig":
        """
        Build a config from explicit values.

        Args:
            environment: Environment member or its configuration label
            logs_source_token: Better Stack source token
            app_version: Version attached to every event (defaults to the betterlog version)
            verbose: Echo non-debug events to the console
            endpoint: Collector URL
        """
        if isinstance(environment, str):
            environment = Environment.from_label(environment)
        return cls(
            app_version=app_version or _default_app_version(),
            environment=environment,
            logs_source_token=logs_source_token,
            verbose=verbose,
            endpoint=endpoint,
        )

    @classmethod
    def from_env(
        cls,
        app_version: str | None = None,
        verbose: bool = True,
        dotenv: bool = True,
        environment: Environment | str | None = None,
        logs_source_token: str | None = None,
        endpoint: str | None = None,
    ) -> "LoggerConfig":
        """
        Build a config from environment variables.

        A .env file in the working directory (or a parent) is loaded first
        when ``dotenv`` is true; variables already set in the process win.
        Values passed explicitly take precedence over their variable, so a
        caller can override one setting and read the rest from the environment.

        Args:
            app_version: Version attached to every event (defaults to the betterlog version)
            verbose: Echo non-debug events to the console
            dotenv: Load a .env file before reading variables
            environment: Overrides ENVIRONMENT
            logs_source_token: Overrides LOGS_SOURCE_TOKEN
            endpoint: Overrides LOGS_ENDPOINT

        Raises:
            ConfigError: ENVIRONMENT or LOGS_SOURCE_TOKEN is missing, or
                ENVIRONMENT is not a known label
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        if environment is None:
            environment = os.environ.get("ENVIRONMENT")
            if environment is None:
                raise ConfigError("missing variable: ENVIRONMENT")

        if logs_source_token is None:
            logs_source_token = os.environ.get("LOGS_SOURCE_TOKEN")
            if logs_source_token is None:
                raise ConfigError("missing variable: LOGS_SOURCE_TOKEN")

        endpoint = endpoint or os.environ.get("LOGS_ENDPOINT") or DEFAULT_ENDPOINT

        config = cls.from_values(
            environment=environment,
            logs_source_token=logs_source_token,
            app_version=app_version,
            verbose=verbose,
            endpoint=endpoint,
        )
        logger.debug(f"Loaded logger config from environment: {config!r}")
        return config
