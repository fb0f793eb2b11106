"""Privacy-aware logger facade.

A ``PrivacyLogger`` builds each message with the disclosure policy of the
current context, prefixes it with the call location and routes it:

- in a preview session, straight to the console;
- otherwise to the platform sink (structlog) and to the capture store.

Logging never raises into the application. Sink failures are reported
through this module's logger and the call returns normally.
"""

import inspect
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from privlog.core.context import Capabilities, get_capabilities

from .config import LogLevel, get_logger
from .labels import Label
from .message import Message
from .store import LogStore

logger = get_logger(__name__)

DEFAULT_SUBSYSTEM = "privlog"


def format_location(file: str, function: str, line: int) -> str:
    """Return the ``[<file stem>.<function>():<line>]`` location prefix."""
    stem = Path(file).name.split(".")[0] if file else "<unknown>"
    return f"[{stem}.{function}():{line}]"


def format_prefix(file: str, function: str, line: int) -> str:
    """Return the text placed before a message body: ``[location] - ``."""
    return f"{format_location(file, function, line)} - "


class PrivacyLogger:
    """Logger bound to a label, writing to both log sinks."""

    def __init__(
        self,
        label: Label | str,
        *,
        subsystem: str = DEFAULT_SUBSYSTEM,
        store: LogStore | None = None,
        capabilities_provider: Callable[[], Capabilities] | None = None,
    ) -> None:
        self.label = Label.coerce(label)
        self.subsystem = subsystem
        self._store = store
        self._capabilities = capabilities_provider or get_capabilities
        self._platform = get_logger(f"{subsystem}.{self.label.value}")

    def __repr__(self) -> str:
        return f"PrivacyLogger(label={self.label.value!r}, subsystem={self.subsystem!r})"

    @property
    def store(self) -> LogStore:
        if self._store is None:
            self._store = LogStore.shared()
        return self._store

    def info(self, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.INFO, message, **kwargs)

    def debug(self, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.DEBUG, message, **kwargs)

    def warning(self, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.ERROR, message, **kwargs)

    def critical(self, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.CRITICAL, message, **kwargs)

    def log(self, level: LogLevel | str, message: Any, **kwargs: Any) -> Message:
        return self._log(LogLevel.coerce(level), message, **kwargs)

    def _log(
        self,
        level: LogLevel,
        message: Any,
        *,
        label: Label | str | None = None,
        metadata: Mapping[str, Any] | None = None,
        file: str | None = None,
        function: str | None = None,
        line: int | None = None,
    ) -> Message:
        """Build, format and route one log call.

        Args:
        ----
            level: Severity
            message: A Message, a string, a token sequence or a MessageBuilder
            label: Overrides the logger's label for the capture store
            metadata: Free-form metadata for the capture store
            file: Originating file. Taken from the caller's frame when omitted
            function: Originating function. Taken from the caller's frame when omitted
            line: Originating line. Taken from the caller's frame when omitted

        Returns:
        -------
            The built Message

        """
        capabilities = self._capabilities()
        built = Message.coerce(message, capabilities.disclosure_allowed)

        if file is None or function is None or line is None:
            caller_file, caller_function, caller_line = _caller_location()
            file = file if file is not None else caller_file
            function = function if function is not None else caller_function
            line = line if line is not None else caller_line

        prefix = format_prefix(file, function, line)
        formatted = prefix + built.final_text
        effective_label = Label.coerce(label) if label is not None else self.label

        if capabilities.preview_session_active:
            print(formatted)
            return built

        try:
            getattr(self._platform, level.method_name)(
                formatted,
                label=effective_label.value,
                subsystem=self.subsystem,
                file=file,
                function=function,
                line=line,
            )
        except Exception as e:
            logger.warning("Platform log sink failed", label=effective_label.value, error=str(e))

        try:
            self.store.store_message(
                label=effective_label,
                level=level,
                message=formatted,
                prefix=prefix,
                segments=built.segments,
                metadata=metadata,
                file=file,
                function=function,
                line=line,
            )
        except Exception as e:
            logger.warning("Capture log sink failed", label=effective_label.value, error=str(e))

        return built


def _caller_location() -> tuple[str, str, int]:
    """Location of the first frame outside this module."""
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code.co_filename == __file__:
            frame = frame.f_back
        if frame is None:
            return "<unknown>", "<unknown>", 0
        return frame.f_code.co_filename, frame.f_code.co_name, frame.f_lineno
    finally:
        del frame
