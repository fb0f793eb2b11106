"""Registry mapping labels to loggers.

The host application builds one registry at startup and looks loggers up
by label. Loggers are created on first use, so there is no required
initialisation order.

Usage:
    registry = LoggerRegistry.with_defaults(subsystem="com.example.app")
    registry[labels.NETWORK].info(["GET ", private(url)])
"""
import threading
from collections.abc import Callable, Iterable, Iterator

from privlog.core.context import Capabilities

from .exceptions import UnknownLabelError
from .labels import PREDEFINED_LABELS, Label
from .logger import DEFAULT_SUBSYSTEM, PrivacyLogger
from .store import LogStore


class LoggerRegistry:
    """Thread-safe mapping from Label to PrivacyLogger."""

    def __init__(
        self,
        *,
        subsystem: str = DEFAULT_SUBSYSTEM,
        store: LogStore | None = None,
        capabilities_provider: Callable[[], Capabilities] | None = None,
        labels: Iterable[Label | str] = (),
    ) -> None:
        self.subsystem = subsystem
        self.store = store
        self._capabilities_provider = capabilities_provider
        self._loggers: dict[Label, PrivacyLogger] = {}
        self._lock = threading.Lock()
        for label in labels:
            self.register(label)

    @classmethod
    def with_defaults(cls, **kwargs) -> "LoggerRegistry":
        """Create a registry with every predefined label registered."""
        return cls(labels=PREDEFINED_LABELS, **kwargs)

    def register(self, label: Label | str) -> PrivacyLogger:
        """Create the logger for a label if needed and return it."""
        key = Label.coerce(label)
        with self._lock:
            existing = self._loggers.get(key)
            if existing is None:
                existing = PrivacyLogger(
                    key,
                    subsystem=self.subsystem,
                    store=self.store,
                    capabilities_provider=self._capabilities_provider,
                )
                self._loggers[key] = existing
            return existing

    def get(self, label: Label | str) -> PrivacyLogger:
        """Return the logger for a label, creating it on first use."""
        return self.register(label)

    def require(self, label: Label | str) -> PrivacyLogger:
        """
        Return the logger for an already registered label.

        Raises:
            UnknownLabelError: If no logger was registered for the label
        """
        key = Label.coerce(label)
        with self._lock:
            existing = self._loggers.get(key)
        if existing is None:
            raise UnknownLabelError(key.value, registered=[item.value for item in self.labels()])
        return existing

    def labels(self) -> list[Label]:
        with self._lock:
            return list(self._loggers)

    def __getitem__(self, label: Label | str) -> PrivacyLogger:
        return self.get(label)

    def __contains__(self, label: object) -> bool:
        if not isinstance(label, (Label, str)):
            return False
        with self._lock:
            return Label.coerce(label) in self._loggers

    def __iter__(self) -> Iterator[PrivacyLogger]:
        with self._lock:
            return iter(list(self._loggers.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._loggers)
