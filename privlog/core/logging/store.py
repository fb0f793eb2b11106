"""In-memory capture store for log entries.

Keeps the most recent entries in a ring buffer so a console viewer can
list them. Each entry keeps the message segments, which lets a privileged
viewer reveal private and hashed values without re-running the logging
call.
"""
import itertools
import threading
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar, Literal

from .config import LogLevel
from .labels import Label
from .message import Segment

DEFAULT_MAX_ENTRIES = 5000


@dataclass(frozen=True, slots=True)
class MetadataValue:
    """A metadata value coerced to text.

    ``kind`` is "string" when the original value was a string, and
    "string_convertible" when it was rendered with ``str()``.
    """

    kind: Literal["string", "string_convertible"]
    value: str

    def __str__(self) -> str:
        return self.value


def coerce_metadata(metadata: Mapping[str, Any] | None) -> dict[str, MetadataValue]:
    """Coerce free-form metadata values to MetadataValue."""
    if not metadata:
        return {}
    coerced: dict[str, MetadataValue] = {}
    for key, value in metadata.items():
        if isinstance(value, MetadataValue):
            coerced[str(key)] = value
        elif isinstance(value, str):
            coerced[str(key)] = MetadataValue("string", value)
        else:
            coerced[str(key)] = MetadataValue("string_convertible", str(value))
    return coerced


@dataclass(frozen=True, slots=True)
class StoredEntry:
    """A captured log entry."""

    id: int
    label: str
    level: LogLevel
    message: str
    prefix: str = ""
    segments: tuple[Segment, ...] = ()
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    file: str | None = None
    function: str | None = None
    line: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_redactions(self) -> bool:
        return any(segment.privacy.is_not_public for segment in self.segments)

    def revealed(self) -> str:
        """Return the message with every segment disclosed.

        The message is ``prefix`` followed by the rendered segments, so the
        disclosed text is rebuilt from the same parts.
        """
        if not self.segments:
            return self.message
        return self.prefix + "".join(s.text for s in self.segments)

    def to_dict(self, reveal: bool = False) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "label": self.label,
            "level": self.level.value,
            "message": self.revealed() if reveal else self.message,
            "metadata": {key: value.value for key, value in self.metadata.items()},
            "file": self.file,
            "function": self.function,
            "line": self.line,
        }


class LogStore:
    """Thread-safe ring buffer of captured log entries."""

    _shared: ClassVar["LogStore | None"] = None
    _shared_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: deque[StoredEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    @classmethod
    def shared(cls) -> "LogStore":
        """Return the process-wide store, creating it from settings."""
        with cls._shared_lock:
            if cls._shared is None:
                from privlog.core.config import get_settings

                cls._shared = cls(max_entries=get_settings().STORE_MAX_ENTRIES)
            return cls._shared

    def store_message(
        self,
        *,
        label: Label | str,
        level: LogLevel | str,
        message: str,
        prefix: str = "",
        segments: Iterable[Segment] = (),
        metadata: Mapping[str, Any] | None = None,
        file: str | None = None,
        function: str | None = None,
        line: int | None = None,
    ) -> StoredEntry:
        """Capture a log entry.

        Args:
        ----
            label: Category of the entry
            level: Severity
            message: Formatted, already redacted text
            prefix: Leading part of message that is not rendered from segments
            segments: Raw message segments
            metadata: Free-form metadata, coerced to text
            file: Originating file
            function: Originating function
            line: Originating line

        Returns:
        -------
            The stored entry

        """
        with self._lock:
            entry = StoredEntry(
                id=next(self._ids),
                label=str(label),
                level=LogLevel.coerce(level),
                message=message,
                prefix=prefix,
                segments=tuple(segments),
                metadata=coerce_metadata(metadata),
                file=file,
                function=function,
                line=line,
            )
            self._entries.append(entry)
        return entry

    def entries(
        self,
        level: LogLevel | str | None = None,
        label: Label | str | None = None,
        search: str | None = None,
        min_level: LogLevel | str | None = None,
    ) -> list[StoredEntry]:
        """Return captured entries, oldest first, optionally filtered."""
        with self._lock:
            snapshot = list(self._entries)

        if level is not None:
            wanted = LogLevel.coerce(level)
            snapshot = [e for e in snapshot if e.level is wanted]
        if min_level is not None:
            floor = LogLevel.coerce(min_level)
            snapshot = [e for e in snapshot if e.level.numeric >= floor.numeric]
        if label is not None:
            snapshot = [e for e in snapshot if e.label == str(label)]
        if search:
            needle = search.lower()
            snapshot = [e for e in snapshot if needle in e.message.lower()]
        return snapshot

    def labels(self) -> list[str]:
        """Distinct labels seen, in first-seen order."""
        with self._lock:
            return list(dict.fromkeys(e.label for e in self._entries))

    def export(self, reveal: bool = False) -> list[dict[str, Any]]:
        return [entry.to_dict(reveal=reveal) for entry in self.entries()]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
