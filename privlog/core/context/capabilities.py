"""Capability flags for logging: disclosure and preview sessions."""
import os
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator

import structlog

from privlog.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)

_DEBUGGER_MODULES = ("pydevd", "debugpy")
# Modules whose trace functions belong to a debugger
_DEBUGGER_TRACERS = ("bdb", "pdb", "pydevd", "_pydevd_bundle", "_pydevd_frame_eval", "debugpy")
_PROC_STATUS = Path("/proc/self/status")


@dataclass(frozen=True)
class Capabilities:
    """
    Process capabilities consulted by the logging facade.

    unredacted_session_active is true when a trusted interactive session
    (an attached debugger, typically) is allowed to see every value in
    clear. preview_session_active is true when running in a sandbox where
    output goes straight to the console instead of the log sinks.
    """
    unredacted_session_active: bool = False
    preview_session_active: bool = False

    @property
    def disclosure_allowed(self) -> bool:
        return self.unredacted_session_active

    def to_dict(self) -> dict[str, bool]:
        return {
            "unredacted_session_active": self.unredacted_session_active,
            "preview_session_active": self.preview_session_active,
        }


def _tracer_module(tracer: object) -> str:
    """Top-level module that defines a trace function or tracer object."""
    owner = getattr(tracer, "__self__", None)
    module = type(owner).__module__ if owner is not None else getattr(tracer, "__module__", None)
    if not isinstance(module, str):
        module = type(tracer).__module__
    return module.split(".")[0]


def _tracer_pid(status_path: Path = _PROC_STATUS) -> int:
    """PID of the process ptrace-attached to this one, 0 when none or unknown."""
    try:
        status = status_path.read_text()
    except OSError:
        return 0
    for line in status.splitlines():
        if line.startswith("TracerPid:"):
            value = line.partition(":")[2].strip()
            return int(value) if value.isdigit() else 0
    return 0


def is_debugger_attached() -> bool:
    """
    Whether an interactive debugger is attached to this process.

    A trace function counts only when a debugger module defines it.
    A ptrace-attached process (TracerPid in /proc/self/status) counts too.
    """
    tracer = sys.gettrace()
    if tracer is not None and _tracer_module(tracer) in _DEBUGGER_TRACERS:
        return True
    if any(name in sys.modules for name in _DEBUGGER_MODULES):
        return True
    return _tracer_pid() != 0


def is_running_in_preview(settings: Settings | None = None) -> bool:
    """Whether the preview environment variable is set to "1"."""
    settings = settings or get_settings()
    return os.environ.get(settings.PREVIEW_ENV_VAR) == "1"


def detect_capabilities(settings: Settings | None = None) -> Capabilities:
    """
    Detect capabilities from the runtime, honouring settings overrides.

    Args:
        settings: Settings to read overrides from. Defaults to the global settings.

    Returns:
        The detected Capabilities
    """
    settings = settings or get_settings()

    unredacted = settings.UNREDACTED_SESSION
    if unredacted is None:
        unredacted = is_debugger_attached()

    preview = settings.PREVIEW_SESSION
    if preview is None:
        preview = is_running_in_preview(settings)

    return Capabilities(
        unredacted_session_active=unredacted,
        preview_session_active=preview,
    )


# Scoped override, isolated per thread/async context
_capabilities_override: ContextVar[Capabilities | None] = ContextVar(
    "capabilities_override", default=None
)
_detected: Capabilities | None = None
_detected_lock = threading.Lock()


def get_capabilities() -> Capabilities:
    """
    Get the capabilities in effect for the current context.

    Returns:
        The scoped override if one is set, otherwise the process-wide
        detection (computed once and cached)
    """
    override = _capabilities_override.get()
    if override is not None:
        return override

    global _detected
    if _detected is None:
        with _detected_lock:
            if _detected is None:
                _detected = detect_capabilities()
    return _detected


def refresh_capabilities() -> Capabilities:
    """Drop the cached detection and detect again."""
    global _detected
    with _detected_lock:
        _detected = detect_capabilities()
        return _detected


def set_capabilities(capabilities: Capabilities) -> None:
    """
    Set a capabilities override for the current context.

    Args:
        capabilities: The Capabilities to use
    """
    _capabilities_override.set(capabilities)
    logger.debug("Capabilities override set", **capabilities.to_dict())


def clear_capabilities() -> None:
    """Clear the capabilities override."""
    _capabilities_override.set(None)


class CapabilitiesContextManager:
    """
    Context manager for temporarily overriding capabilities.

    Useful in tests, or to open a trusted section where values should be
    logged in clear.
    """

    def __init__(self, capabilities: Capabilities):
        self.capabilities = capabilities
        self.previous: Capabilities | None = None

    def __enter__(self):
        """Store previous override and set new one."""
        self.previous = _capabilities_override.get()
        set_capabilities(self.capabilities)
        return self.capabilities

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore previous override."""
        if self.previous is not None:
            _capabilities_override.set(self.previous)
        else:
            clear_capabilities()


@contextmanager
def disclosure_scope(allowed: bool = True) -> Iterator[Capabilities]:
    """Temporarily allow (or forbid) disclosure of redacted values."""
    scoped = replace(get_capabilities(), unredacted_session_active=allowed)
    with CapabilitiesContextManager(scoped) as capabilities:
        yield capabilities
