"""Pytest configuration and shared fixtures for betterlog tests."""

from __future__ import annotations

import pytest

from betterlog.config import Environment, LoggerConfig
from betterlog.records import LogRecord
from betterlog.retry import RetryConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Keep configuration variables from the developer's shell out of the test."""
    for name in ("ENVIRONMENT", "LOGS_SOURCE_TOKEN", "LOGS_ENDPOINT"):
        # setenv first so values loaded from a .env file are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def qa_config() -> LoggerConfig:
    """Non-local configuration: deliveries go over the (mocked) network."""
    return LoggerConfig(
        app_version="1.0.0",
        environment=Environment.QA,
        logs_source_token="token",
        verbose=False,
    )


@pytest.fixture
def local_config() -> LoggerConfig:
    """Local configuration: deliveries are skipped."""
    return LoggerConfig(
        app_version="1.0.0",
        environment=Environment.LOCAL,
        logs_source_token="token",
        verbose=False,
    )


@pytest.fixture
def sample_record() -> LogRecord:
    """Return a sample log record for testing."""
    return LogRecord(message="test", context="ctx")


@pytest.fixture
def no_retry_config() -> RetryConfig:
    """Single attempt, no waiting."""
    return RetryConfig(max_retries=0, base_delay=0.001, max_delay=0.001, jitter=False)


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Three retries with millisecond delays."""
    return RetryConfig(max_retries=3, base_delay=0.001, max_delay=0.001, jitter=False)
