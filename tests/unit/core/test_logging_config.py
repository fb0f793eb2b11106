"""Tests for logging configuration and privacy-aware processing."""
import json
import logging
from logging.handlers import RotatingFileHandler

import pytest
import structlog

from privlog.core.context import Capabilities, disclosure_scope, set_capabilities
from privlog.core.logging.config import (
    LogConfig,
    LogFormat,
    LogLevel,
    MessageProcessor,
    configure_logging,
    get_logger,
)
from privlog.core.logging.exceptions import ConfigurationError, ErrorCode
from privlog.core.logging.message import REDACTION_MARKER, Message, build, hash_text, hashed, private

pytestmark = pytest.mark.unit


def json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def quiet_config(**kwargs) -> LogConfig:
    kwargs.setdefault("format", LogFormat.JSON)
    kwargs.setdefault("add_timestamp", False)
    kwargs.setdefault("cache_loggers", False)
    return LogConfig(_env_file=None, **kwargs)


class TestLogConfig:
    """Test configuration loading."""

    def test_defaults(self, monkeypatch):
        """Test default configuration values."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        config = LogConfig(_env_file=None)

        assert config.level is LogLevel.INFO
        assert config.format is LogFormat.JSON
        assert config.enable_message_processing is True
        assert config.log_file_path is None

    def test_environment_variables(self, monkeypatch):
        """Test LOG_ variables are read."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "console")
        monkeypatch.setenv("LOG_ADD_CALLER_INFO", "true")

        config = LogConfig(_env_file=None)

        assert config.level is LogLevel.DEBUG
        assert config.format is LogFormat.CONSOLE
        assert config.add_caller_info is True

    def test_empty_format_follows_environment(self, monkeypatch):
        """Test an empty format picks console output in development."""
        monkeypatch.setenv("ENVIRONMENT", "development")

        assert LogConfig(_env_file=None, format="").format is LogFormat.CONSOLE

    def test_log_level_helpers(self):
        """Test stdlib mapping and parsing."""
        assert LogLevel.WARNING.numeric == logging.WARNING
        assert LogLevel.CRITICAL.method_name == "critical"
        assert LogLevel.coerce(" error ") is LogLevel.ERROR


class TestMessageProcessor:
    """Test the privacy-aware structlog processor."""

    def test_message_event(self):
        """Test a Message event becomes its final text."""
        message = build(["Login by: ", private("user@example.com")], False)

        event_dict = MessageProcessor()(None, "info", {"event": message})

        assert event_dict == {"event": f"Login by: {REDACTION_MARKER}", "redacted_fields": 1}

    def test_public_message_has_no_count(self):
        """Test no redaction count is added for public messages."""
        event_dict = MessageProcessor()(None, "info", {"event": Message.from_literal("ok")})

        assert event_dict == {"event": "ok"}

    def test_value_fields_redacted(self):
        """Test Value fields follow the current disclosure policy."""
        event_dict = MessageProcessor()(
            None, "info", {"event": "login", "user": private("bob"), "id": hashed(7)}
        )

        assert event_dict["user"] == REDACTION_MARKER
        assert event_dict["id"] == hash_text("7")

    def test_value_fields_disclosed(self):
        """Test Value fields are shown in clear in a disclosure scope."""
        with disclosure_scope():
            event_dict = MessageProcessor()(None, "info", {"event": "login", "user": private("bob")})

        assert event_dict["user"] == "bob"

    def test_other_fields_untouched(self):
        """Test plain fields pass through."""
        event_dict = MessageProcessor()(None, "info", {"event": "x", "count": 3})

        assert event_dict == {"event": "x", "count": 3}


class TestConfigureLogging:
    """Test the configured logging pipeline."""

    def test_json_output_is_redacted(self, capsys):
        """Test JSON lines carry redacted text only."""
        configure_logging(quiet_config())

        get_logger("privlog.test").info(
            build(["Login by: ", private("user@example.com")], False), user=private("bob")
        )

        record = json_lines(capsys.readouterr().err)[-1]
        assert record["event"] == f"Login by: {REDACTION_MARKER}"
        assert record["user"] == REDACTION_MARKER
        assert record["redacted_fields"] == 1
        assert record["level"] == "info"
        assert record["logger"] == "privlog.test"
        assert "timestamp" not in record

    def test_level_filtering(self, capsys):
        """Test events below the configured level are dropped."""
        configure_logging(quiet_config(level=LogLevel.WARNING))

        log = get_logger("privlog.test")
        log.info("hidden")
        log.warning("shown")

        events = [record["event"] for record in json_lines(capsys.readouterr().err)]
        assert events == ["shown"]

    def test_foreign_records_are_formatted(self, capsys):
        """Test stdlib records go through the same pipeline."""
        configure_logging(quiet_config())

        logging.getLogger("thirdparty").warning("plain %s", "record")

        record = json_lines(capsys.readouterr().err)[-1]
        assert record["event"] == "plain record"
        assert record["logger"] == "thirdparty"

    def test_timestamp_and_preview_flag(self, capsys):
        """Test timestamps and the preview flag are added."""
        configure_logging(quiet_config(add_timestamp=True))
        set_capabilities(Capabilities(preview_session_active=True))

        get_logger("privlog.test").info("hello")

        record = json_lines(capsys.readouterr().err)[-1]
        assert "timestamp" in record
        assert record["preview"] is True

    def test_processing_can_be_disabled(self):
        """Test the privacy processor is left out when disabled."""
        configure_logging(quiet_config(enable_message_processing=False))

        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, MessageProcessor) for p in processors)

    def test_replaces_root_handlers(self):
        """Test reconfiguring does not stack handlers."""
        configure_logging(quiet_config())
        configure_logging(quiet_config())

        assert len(logging.getLogger().handlers) == 1

    def test_console_format(self, capsys):
        """Test console output renders the event text."""
        configure_logging(quiet_config(format=LogFormat.CONSOLE))

        get_logger("privlog.test").warning("disk almost full", free_mb=12)

        err = capsys.readouterr().err
        assert "disk almost full" in err
        assert "free_mb: 12" in err

    def test_file_output(self, tmp_path, capsys):
        """Test the rotating file receives JSON lines."""
        log_file = tmp_path / "logs" / "app.log"
        configure_logging(quiet_config(format=LogFormat.CONSOLE, log_file_path=str(log_file)))

        get_logger("privlog.test").error("written", token=private("abc"))

        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        handlers[0].flush()
        record = json_lines(log_file.read_text(encoding="utf-8"))[-1]
        assert record["event"] == "written"
        assert record["token"] == REDACTION_MARKER

    def test_file_failure_falls_back(self, tmp_path, capsys):
        """Test an unusable log path falls back to console output."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        configure_logging(quiet_config(log_file_path=str(blocker / "app.log")))

        assert not any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)
        assert "Could not create log file" in capsys.readouterr().err

    def test_file_failure_strict(self, tmp_path):
        """Test strict mode raises a configuration error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging(quiet_config(log_file_path=str(blocker / "app.log"), strict=True))

        assert exc_info.value.error_code is ErrorCode.INVALID_CONFIGURATION
        assert exc_info.value.details["path"] == str(blocker / "app.log")
