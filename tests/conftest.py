"""Global pytest configuration and fixtures."""
import logging

import pytest
import structlog

from privlog.core.context import Capabilities, clear_capabilities
from privlog.core.context import capabilities as capabilities_module
from privlog.core.logging.labels import GENERIC
from privlog.core.logging.logger import PrivacyLogger
from privlog.core.logging.store import LogStore


@pytest.fixture(autouse=True)
def isolated_capabilities(monkeypatch):
    """Pin process-wide capabilities so a debugger session does not leak in."""
    monkeypatch.setattr(capabilities_module, "_detected", Capabilities())
    yield
    clear_capabilities()


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore structlog defaults and the root logger after each test."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def redacted() -> Capabilities:
    return Capabilities(unredacted_session_active=False, preview_session_active=False)


@pytest.fixture
def unredacted() -> Capabilities:
    return Capabilities(unredacted_session_active=True, preview_session_active=False)


@pytest.fixture
def preview() -> Capabilities:
    return Capabilities(unredacted_session_active=False, preview_session_active=True)


@pytest.fixture
def store() -> LogStore:
    """Fresh capture store."""
    return LogStore(max_entries=100)


@pytest.fixture
def make_logger(store):
    """Factory for loggers bound to the test store and fixed capabilities."""
    def _make_logger(capabilities: Capabilities | None = None, label=GENERIC, **kwargs):
        capabilities = capabilities or Capabilities()
        kwargs.setdefault("store", store)
        return PrivacyLogger(
            label,
            subsystem="com.example.tests",
            capabilities_provider=lambda: capabilities,
            **kwargs,
        )
    return _make_logger
