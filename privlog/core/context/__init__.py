"""Core context management for logging capabilities."""
from .capabilities import (
    Capabilities,
    CapabilitiesContextManager,
    clear_capabilities,
    detect_capabilities,
    disclosure_scope,
    get_capabilities,
    is_debugger_attached,
    is_running_in_preview,
    refresh_capabilities,
    set_capabilities,
)

__all__ = [
    "Capabilities",
    "CapabilitiesContextManager",
    "detect_capabilities",
    "get_capabilities",
    "set_capabilities",
    "clear_capabilities",
    "refresh_capabilities",
    "disclosure_scope",
    "is_debugger_attached",
    "is_running_in_preview",
]
