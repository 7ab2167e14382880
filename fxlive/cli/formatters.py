"""Table and JSON Lines renderers for rate rows."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table
from rich.text import Text

from fxlive.core.formatting import PLACEHOLDER

Row = Mapping[str, object]

FORMATS = ("table", "jsonl")

# right-aligned so decimal places line up
NUMERIC_COLUMNS = frozenset(
    {"rate", "amount", "converted", "first", "last", "low", "high", "delta", "delta_pct", "x", "y"}
)

STATE_STYLES = {"idle": "dim", "syncing": "cyan", "loaded": "green", "degraded": "yellow"}


class OutputFormatter:
    """Protocol-like base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        """Render the provided rows to the target stream."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render rows as a Rich table with aligned numbers and styled states."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        names = list(columns) if columns else list(rows[0].keys()) if rows else []

        if names:
            table = Table(box=SIMPLE, title=title, header_style="" if self.no_color else "bold")
            for name in names:
                table.add_column(name, justify="right" if name in NUMERIC_COLUMNS else "left")
            for row in rows:
                table.add_row(*(self._cell(name, row.get(name)) for name in names))
            console.print(table)
        if not rows:
            console.print("No data available.")

    def _cell(self, column: str, value: object) -> str | Text:
        if value is None or value == "":
            return PLACEHOLDER
        if isinstance(value, bool):
            return "yes" if value else "no"
        text = str(value)
        if self.no_color:
            return text
        if column == "state":
            return Text(text, style=STATE_STYLES.get(text, ""))
        if column in ("delta", "delta_pct") and text.startswith(("+", "-")):
            return Text(text, style="green" if text.startswith("+") else "red")
        return text


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render rows as JSON Lines; titles are dropped and ``None`` stays ``null``."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        for row in rows:
            record = {column: row.get(column) for column in columns} if columns else dict(row)
            stream.write(json.dumps(record, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    raise ValueError(f"Unsupported format '{name}'. Available formats: {', '.join(FORMATS)}.")


__all__ = ["FORMATS", "OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter"]
