"""Tests for the label to logger registry."""
import threading

import pytest

from privlog.core.logging import labels
from privlog.core.logging.exceptions import ErrorCode, UnknownLabelError
from privlog.core.logging.labels import PREDEFINED_LABELS, Label
from privlog.core.logging.registry import LoggerRegistry

pytestmark = pytest.mark.unit


class TestLabels:
    """Test label values."""

    def test_predefined_labels(self):
        """Test the predefined set is complete and unique."""
        assert len(PREDEFINED_LABELS) == 34
        assert len({label.value for label in PREDEFINED_LABELS}) == 34
        assert labels.GENERIC.value == "Generic"
        assert labels.STORE_KIT.value == "StoreKit"

    def test_labels_compare_by_value(self):
        """Test a host-defined label equals the predefined one."""
        assert Label("Network") == labels.NETWORK
        assert Label.coerce("Network") == labels.NETWORK
        assert str(labels.VIEW_LIFECYCLE) == "View Lifecycle"


class TestLoggerRegistry:
    """Test registering and looking up loggers."""

    def test_with_defaults(self, store):
        """Test every predefined label is registered."""
        registry = LoggerRegistry.with_defaults(subsystem="com.example.app", store=store)

        assert len(registry) == 34
        assert registry.labels() == list(PREDEFINED_LABELS)
        assert all(logger.subsystem == "com.example.app" for logger in registry)

    def test_get_creates_once(self, store):
        """Test lookups return the same logger instance."""
        registry = LoggerRegistry(store=store)

        first = registry.get("Payments")
        second = registry[Label("Payments")]

        assert first is second
        assert first.label == Label("Payments")
        assert first.store is store
        assert "Payments" in registry

    def test_contains(self):
        """Test membership for labels, strings and other objects."""
        registry = LoggerRegistry(labels=[labels.UI])

        assert labels.UI in registry
        assert "UI" in registry
        assert labels.MAPS not in registry
        assert 3 not in registry

    def test_require_known(self):
        """Test require returns registered loggers."""
        registry = LoggerRegistry(labels=[labels.MAPS])

        assert registry.require("Maps") is registry.get(labels.MAPS)

    def test_require_unknown_raises(self):
        """Test require fails for labels never registered."""
        registry = LoggerRegistry(labels=[labels.MAPS, labels.UI])

        with pytest.raises(UnknownLabelError) as exc_info:
            registry.require("Billing")

        error = exc_info.value
        assert error.label == "Billing"
        assert error.error_code is ErrorCode.UNKNOWN_LABEL
        assert error.to_dict()["details"]["registered"] == ["Maps", "UI"]
        assert "Billing" not in registry

    def test_capabilities_provider_is_shared(self, store, unredacted):
        """Test registered loggers use the registry's capabilities."""
        registry = LoggerRegistry(store=store, capabilities_provider=lambda: unredacted)

        registry[labels.API].info(["token=", "x"], file="a.py", function="f", line=1)

        assert store.entries()[0].message == "[a.f():1] - token=x"

    def test_concurrent_registration(self):
        """Test concurrent first use yields a single logger."""
        registry = LoggerRegistry()
        results = []

        def register():
            results.append(registry.get("Concurrent"))

        threads = [threading.Thread(target=register) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 20
        assert all(result is results[0] for result in results)
        assert len(registry) == 1
