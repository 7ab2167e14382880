"""Pytest configuration for the fxlive test suite."""

from __future__ import annotations

import pytest

from fxlive.core.logging import configure_logging


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--fxlive-run-integration",
        action="store_true",
        default=False,
        help="Run fxlive integration tests that call the live FX provider.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for fxlive tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks fxlive tests requiring network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--fxlive-run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration tests require --fxlive-run-integration",
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep test output readable; individual tests reconfigure as needed."""

    configure_logging("WARNING")
    yield
    configure_logging("WARNING")
