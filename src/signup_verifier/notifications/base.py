"""Run event channels: live console lines and an end-of-run summary."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import EventLevel, RunEvent

_LEVEL_STYLES = {
    EventLevel.INFO: "cyan",
    EventLevel.WARNING: "yellow",
    EventLevel.ERROR: "red",
    EventLevel.SUCCESS: "green",
}


class Notifier(ABC):
    """Interface for reporting run events."""

    @abstractmethod
    def notify(self, event: RunEvent) -> None:
        """Send a run event."""


class ConsoleNotifier(Notifier):
    """Print one line per event as it happens."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def notify(self, event: RunEvent) -> None:
        line = Text()
        line.append(event.timestamp.strftime("%H:%M:%S"), style="dim")
        line.append(" ")
        line.append(f"{event.type:<13}", style=_LEVEL_STYLES.get(event.level, "white"))
        line.append(" ")
        line.append(event.message)
        for key, value in event.data.items():
            line.append(f" {key}={value}", style="dim")
        self._console.print(line)


class SummaryNotifier(Notifier):
    """Collect flow outcomes and print them as a table once the run finishes.

    Workers notify from their own threads, so rows are gathered under a lock.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self._lock = threading.Lock()
        self._rows: list[tuple[int, int, bool, str]] = []

    def notify(self, event: RunEvent) -> None:
        if event.type in ("flow_passed", "flow_failed"):
            row = (
                int(event.data.get("worker", 0)),
                int(event.data.get("iteration", 0)),
                event.type == "flow_passed",
                event.message,
            )
            with self._lock:
                self._rows.append(row)
        elif event.type == "run_finished":
            self._console.print(self.render(event))

    def render(self, finished: RunEvent) -> Table:
        table = Table(title=finished.message)
        table.add_column("Worker", justify="right")
        table.add_column("Iteration", justify="right")
        table.add_column("Result")
        table.add_column("Detail", overflow="fold")
        with self._lock:
            rows = sorted(self._rows)
        for worker, iteration, passed, detail in rows:
            result = Text("passed", style="green") if passed else Text("failed", style="red")
            table.add_row(str(worker), str(iteration), result, detail)
        return table


class CompositeNotifier(Notifier):
    """Fan-out notifier that propagates events to multiple notifiers."""

    def __init__(self, notifiers: Iterable[Notifier]) -> None:
        self._notifiers = list(notifiers)

    def notify(self, event: RunEvent) -> None:
        for notifier in self._notifiers:
            notifier.notify(event)
