"""Logging configuration for structured logging with structlog.

This module configures the platform log sink:
- Environment-based log levels
- JSON formatting for production
- Rich console formatting for development
- Privacy-aware rendering of Message events and Value fields
- Optional rotating file output
"""

import logging
import os
import sys
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from privlog.core.context import get_capabilities

from .exceptions import ConfigurationError
from .message import Message, Value, effective_fragment


class LogLevel(str, Enum):
    """Severity levels. CRITICAL is the fault level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        """Matching stdlib logging level."""
        return logging.getLevelName(self.value)

    @property
    def method_name(self) -> str:
        return self.value.lower()

    @classmethod
    def coerce(cls, value: "LogLevel | str") -> "LogLevel":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    CONSOLE = "console"


class LogConfig(BaseSettings):
    """Configuration for the logging system.

    This class reads configuration from environment variables with the prefix LOG_.
    For example:
    - LOG_LEVEL=DEBUG
    - LOG_FORMAT=console
    - LOG_ADD_TIMESTAMP=false

    Attributes
    ----------
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json or console)
        add_timestamp: Whether to add timestamp to logs
        add_caller_info: Whether to add file/line information
        add_thread_info: Whether to add thread/process information
        enable_message_processing: Whether Message events and Value fields
            are rendered with privacy redaction before reaching the sink
        log_file_path: Optional path of a rotating JSON log file
        strict: Raise instead of falling back when a handler cannot be created

    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: LogLevel = Field(
        default=LogLevel.INFO, description="Minimum log level to output"
    )
    format: LogFormat = Field(
        default=LogFormat.JSON, description="Output format for logs"
    )
    add_timestamp: bool = Field(
        default=True, description="Add timestamp to log entries"
    )
    add_caller_info: bool = Field(
        default=False, description="Add source file and line number"
    )
    add_thread_info: bool = Field(
        default=False, description="Add thread/process information"
    )
    enable_message_processing: bool = Field(
        default=True, description="Render privacy-tagged values before output"
    )
    log_file_path: str | None = Field(
        default=None, description="Path for a rotating log file"
    )
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate the log file at this size"
    )
    log_file_backup_count: int = Field(
        default=5, description="Rotated log files to keep"
    )
    cache_loggers: bool = Field(
        default=True, description="Cache structlog loggers on first use"
    )
    strict: bool = Field(
        default=False, description="Fail instead of falling back on handler errors"
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> str:
        """Validate and convert log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("format", mode="before")
    @classmethod
    def validate_format_for_env(cls, v: Any) -> str:
        """Set format based on environment if not explicitly set."""
        if v is None or v == "":
            env = os.getenv("ENVIRONMENT", "production").lower()
            return "console" if env in ("development", "dev", "local") else "json"
        return v


class MessageProcessor:
    """Structlog processor that renders privacy-aware values.

    - A ``Message`` passed as the event is replaced by its final text, and
      the number of redacted fields is recorded as ``redacted_fields``.
    - A ``Message`` passed as a field is replaced by its final text.
    - A ``Value`` passed as a field is rendered with the disclosure policy
      of the current context.

    Raw segment text never reaches the renderer.
    """

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        disclosure_allowed = get_capabilities().disclosure_allowed

        for key, value in list(event_dict.items()):
            if isinstance(value, Message):
                event_dict[key] = value.final_text
                if key == "event":
                    redacted = sum(1 for s in value.segments if s.privacy.is_not_public)
                    if redacted:
                        event_dict["redacted_fields"] = redacted
            elif isinstance(value, Value):
                event_dict[key] = effective_fragment(
                    value.text, value.privacy, disclosure_allowed
                )

        return event_dict


def _add_capabilities(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Flag events emitted from a preview session."""
    try:
        if get_capabilities().preview_session_active:
            event_dict["preview"] = True
    except Exception:
        # Don't fail logging if capability detection fails
        pass
    return event_dict


def _create_pre_chain(config: LogConfig) -> list:
    """Create the shared processor chain, without the final renderer.

    Args:
    ----
        config: Logging configuration

    Returns:
    -------
        List of processors for structlog

    """
    processors: list = []

    # Privacy rendering runs FIRST so raw values never reach other processors
    if config.enable_message_processing:
        processors.append(MessageProcessor())

    if config.add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors.extend(
        [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _add_capabilities,
        ]
    )

    if config.add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    if config.add_thread_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.THREAD_NAME,
                    structlog.processors.CallsiteParameter.PROCESS,
                ]
            )
        )

    return processors


def _create_renderer(format_type: LogFormat, is_file_handler: bool = False) -> Any:
    """Create appropriate renderer based on format type.

    Args:
    ----
        format_type: The desired output format
        is_file_handler: Whether this is for file output (always use JSON for files)

    Returns:
    -------
        Structlog processor for rendering

    """
    if is_file_handler or format_type == LogFormat.JSON:
        return structlog.processors.JSONRenderer(ensure_ascii=False)

    from .console import RichConsoleRenderer

    return RichConsoleRenderer(show_path=True, show_timestamp=True)


def configure_logging(config: LogConfig | None = None) -> None:
    """Configure the logging system with structlog.

    This function sets up:
    - Standard library logging integration
    - Structlog configuration
    - Privacy-aware message processing
    - Output formatting (and an optional rotating file)

    If no config is provided, it will read from environment variables.

    Args:
    ----
        config: Logging configuration. If None, reads from environment.

    Raises:
    ------
        ConfigurationError: If the log file cannot be created and config.strict is set

    """
    if config is None:
        config = LogConfig()

    pre_chain = _create_pre_chain(config)

    # Remove all existing handlers first
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(config.level.value)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(config.level.value)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _create_renderer(config.format),
            ],
            foreign_pre_chain=pre_chain,
        )
    )
    root_logger.addHandler(console_handler)

    file_error: str | None = None
    if config.log_file_path:
        try:
            log_path = Path(config.log_file_path).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                filename=str(log_path),
                maxBytes=config.log_file_max_bytes,
                backupCount=config.log_file_backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(config.level.value)
            file_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(
                    processors=[
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _create_renderer(config.format, is_file_handler=True),
                    ],
                    foreign_pre_chain=pre_chain,
                )
            )
            root_logger.addHandler(file_handler)
        except OSError as e:
            if config.strict:
                raise ConfigurationError(
                    f"Could not create log file at {config.log_file_path}",
                    details={"path": config.log_file_path, "error": str(e)},
                ) from e
            file_error = str(e)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=config.cache_loggers,
    )

    if file_error:
        logger.warning(
            "Could not create log file, falling back to console-only logging",
            path=config.log_file_path,
            error=file_error,
        )
    logger.debug(
        "Logging configured",
        level=config.level.value,
        format=config.format.value,
        message_processing=config.enable_message_processing,
    )


def get_logger(name: str | None = None, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
    ----
        name: Logger name. If None, uses calling module name.
        **kwargs: Additional context to bind to the logger

    Returns:
    -------
        Configured structlog logger instance

    """
    logger = structlog.get_logger(name)

    if kwargs:
        logger = logger.bind(**kwargs)

    return logger


# Module-level logger for this module
logger = get_logger(__name__)
