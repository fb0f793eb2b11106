"""Rich console output for structured logs and captured entries.

This module provides:
- a structlog renderer that formats platform log events with Rich
- a table view over the capture store, optionally revealing private values
"""

import io
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.traceback import Traceback

from .config import LogLevel
from .store import LogStore

# Shared console instance for viewer output
console = Console(stderr=True)

# Log level colors and icons
LEVEL_STYLES: dict[str, tuple[str, str]] = {
    "debug": ("dim cyan", "🔍"),
    "info": ("green", "ℹ️ "),
    "warning": ("yellow", "⚠️ "),
    "error": ("red bold", "❌"),
    "critical": ("red bold reverse", "🚨"),
}


class RichConsoleRenderer:
    """Structlog renderer using Rich markup.

    The event is rendered into a string, so it can be used as the final
    processor of a ``ProcessorFormatter`` and written by any handler.
    """

    def __init__(
        self,
        show_path: bool = True,
        show_timestamp: bool = True,
        colors: bool | None = None,
        width: int = 120,
    ) -> None:
        """Initialize the Rich console renderer.

        Args:
        ----
            show_path: Whether to show file path, line number and function
            show_timestamp: Whether to show timestamp
            colors: Force colors on or off. Defaults to whether stderr is a tty
            width: Console width used for rendering

        """
        self.show_path = show_path
        self.show_timestamp = show_timestamp
        self.colors = sys.stderr.isatty() if colors is None else colors
        self.width = width

    def __call__(self, _: Any, __: str, event_dict: dict[str, Any]) -> str:
        """Render log event using Rich.

        Args:
        ----
            _: Logger (unused)
            __: Method name (unused)
            event_dict: Event dictionary from structlog

        Returns:
        -------
            The rendered line(s)

        """
        buffer = io.StringIO()
        out = Console(
            file=buffer,
            force_terminal=self.colors,
            no_color=not self.colors,
            width=self.width,
            highlight=False,
        )

        level = str(event_dict.pop("level", "info")).lower()
        msg = str(event_dict.pop("event", ""))
        timestamp = event_dict.pop("timestamp", None)

        logger_name = event_dict.pop("logger", None)
        label = event_dict.pop("label", None)
        event_dict.pop("subsystem", None)
        # Location supplied by the facade, or by CallsiteParameterAdder
        pathname = event_dict.pop("file", None) or event_dict.pop("filename", None)
        lineno = event_dict.pop("line", None) or event_dict.pop("lineno", None)
        func_name = event_dict.pop("function", None) or event_dict.pop("func_name", None)

        style, icon = LEVEL_STYLES.get(level, ("white", "•"))

        output_parts = []

        if self.show_timestamp and timestamp:
            output_parts.append(f"[dim]{timestamp}[/dim]")

        output_parts.append(f"[{style}]{icon} {level.upper():>8}[/{style}]")

        if label:
            output_parts.append(f"[magenta]{escape(str(label))}[/magenta]")

        if self.show_path and (logger_name or pathname):
            location_parts = [str(logger_name)] if logger_name else []
            if pathname and lineno:
                location_parts.append(f"{pathname}:{lineno}")
            if func_name:
                location_parts.append(f"in {func_name}()")
            output_parts.append(f"[dim blue]{escape(' '.join(location_parts))}[/dim blue]")

        output_parts.append(f"[bold]{escape(msg)}[/bold]")
        out.print(" │ ".join(output_parts))

        exc_info = event_dict.pop("exc_info", None)
        if isinstance(exc_info, tuple) and len(exc_info) >= 3 and exc_info[0]:
            out.print(
                Traceback.from_exception(
                    exc_info[0], exc_info[1], exc_info[2], width=self.width
                )
            )
        exception = event_dict.pop("exception", None)
        if exception:
            out.print(escape(str(exception)))

        if event_dict:
            self._render_extra_fields(out, event_dict, indent=2)

        return buffer.getvalue().rstrip("\n")

    def _render_extra_fields(
        self, out: Console, fields: dict[str, Any], indent: int = 0
    ) -> None:
        """Render additional fields, one per line."""
        skip_fields = {"_record", "_from_structlog"}
        fields = {k: v for k, v in fields.items() if k not in skip_fields}

        indent_str = " " * indent
        for key, value in fields.items():
            if isinstance(value, dict):
                out.print(f"{indent_str}[dim cyan]{escape(str(key))}:[/dim cyan]")
                self._render_extra_fields(out, value, indent + 2)
            else:
                out.print(
                    f"{indent_str}[dim cyan]{escape(str(key))}:[/dim cyan] {escape(str(value))}"
                )


def render_store_table(
    store: LogStore,
    reveal: bool = False,
    level: LogLevel | str | None = None,
    label: str | None = None,
    search: str | None = None,
    limit: int | None = None,
) -> Table:
    """Build a Rich table of captured log entries.

    Args:
    ----
        store: The capture store to read from
        reveal: Show private and hashed values in clear, for authorised viewers
        level: Only show entries of this level
        label: Only show entries with this label
        search: Only show entries whose message contains this text
        limit: Only show the most recent entries

    Returns:
    -------
        A table with one row per entry

    """
    entries = store.entries(level=level, label=label, search=search)
    if limit is not None:
        entries = entries[-limit:] if limit > 0 else []

    table = Table(title="Captured logs", expand=True)
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Level", no_wrap=True)
    table.add_column("Label", style="magenta")
    table.add_column("Message")
    table.add_column("Metadata", style="dim")

    for entry in entries:
        style, icon = LEVEL_STYLES.get(entry.level.method_name, ("white", "•"))
        message = entry.revealed() if reveal else entry.message
        metadata = ", ".join(f"{k}={v}" for k, v in entry.metadata.items())
        table.add_row(
            entry.created_at.strftime("%H:%M:%S.%f")[:-3],
            f"[{style}]{icon} {entry.level.value}[/{style}]",
            escape(entry.label),
            escape(message),
            escape(metadata),
        )

    return table


def print_store(store: LogStore | None = None, **kwargs: Any) -> None:
    """Print the captured entries table to the shared console."""
    console.print(render_store_table(store or LogStore.shared(), **kwargs))
