"""Core logging module for privlog.

This module provides privacy-aware log messages, a label-based logger
facade writing to a structlog platform sink and an in-memory capture
store, and a Rich console viewer for captured entries.
"""

from . import labels
from .config import LogConfig, LogFormat, LogLevel, MessageProcessor, configure_logging, get_logger
from .exceptions import ConfigurationError, ErrorCode, PrivlogError, UnknownLabelError
from .labels import PREDEFINED_LABELS, Label
from .logger import PrivacyLogger
from .message import (
    REDACTION_MARKER,
    Literal,
    Message,
    MessageBuilder,
    Segment,
    Value,
    build,
    effective_fragment,
    hash_text,
    hashed,
    private,
    public,
)
from .privacy import PrivacyLevel
from .registry import LoggerRegistry
from .store import LogStore, MetadataValue, StoredEntry, coerce_metadata

__all__ = [
    "configure_logging",
    "get_logger",
    "LogConfig",
    "LogLevel",
    "LogFormat",
    "MessageProcessor",
    "PrivlogError",
    "ErrorCode",
    "UnknownLabelError",
    "ConfigurationError",
    "labels",
    "Label",
    "PREDEFINED_LABELS",
    "PrivacyLogger",
    "LoggerRegistry",
    "PrivacyLevel",
    "REDACTION_MARKER",
    "Literal",
    "Value",
    "Segment",
    "Message",
    "MessageBuilder",
    "build",
    "effective_fragment",
    "hash_text",
    "public",
    "private",
    "hashed",
    "LogStore",
    "StoredEntry",
    "MetadataValue",
    "coerce_metadata",
]
