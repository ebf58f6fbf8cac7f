"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
import structlog

from decmath.config import MathConfig


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() made by a test (the CLI configures logging)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def tight_config() -> MathConfig:
    """Config with a low iteration ceiling, for exercising ConvergenceError."""
    return MathConfig(max_iterations=40, log_min_iterations=40)
