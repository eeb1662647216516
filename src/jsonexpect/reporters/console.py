"""Console reporter for failure records using Rich."""

from __future__ import annotations

import sys

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from jsonexpect.config import ExpectSettings, get_settings
from jsonexpect.failure import FailureRecord, format_value


class ConsoleReporter:
    """Reporter that prints each failure record as a Rich panel."""

    def __init__(self, console: Console | None = None, settings: ExpectSettings | None = None) -> None:
        self.console = console or Console(file=sys.__stderr__)
        self.settings = settings or get_settings()
        self.count = 0

    def _truncate(self, text: str) -> str:
        max_len = self.settings.max_value_length
        return text if len(text) <= max_len else text[:max_len] + "..."

    def _operand_lines(self, record: FailureRecord) -> list[Text]:
        lines = []
        for label, operand in (("actual", record.actual), ("expected", record.expected), ("delta", record.delta)):
            if operand is None:
                continue
            line = Text(f"{label:>8}: ", style="bold")
            line.append(self._truncate(format_value(operand)))
            lines.append(line)
        return lines

    def report(self, record: FailureRecord) -> None:
        self.count += 1
        title = escape(record.name or record.kind.value)
        body: list[Text] = []
        if self.settings.show_trail and record.trail:
            body.append(Text(record.path, style="dim"))
        body.extend(Text(error, style="red") for error in record.errors)
        body.extend(self._operand_lines(record))
        self.console.print(
            Panel(
                Group(*body),
                title=f"[bold red]✗[/] {title}",
                subtitle=record.kind.value,
                border_style="red",
                expand=False,
            )
        )
