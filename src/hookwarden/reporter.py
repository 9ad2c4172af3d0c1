# Copyright 2026 Pennyworth Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Human-readable progress for hook runs, rendered with rich."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from rich.console import Console
from rich.markup import escape

from hookwarden.hooks.events import ExecutionStatus, StatusBus, StatusEvent
from hookwarden.hooks.executor import StepFailure

STATUS_STYLES = {
    ExecutionStatus.RUNNING: ("→", "dim"),
    ExecutionStatus.SKIPPED: ("-", "dim"),
    ExecutionStatus.SUCCESS: ("✓", "green"),
    ExecutionStatus.FAILURE: ("✗", "red"),
}


class TerminalReporter:
    """Bus subscriber printing one line per step status change.

    ``RUNNING`` lines are only printed when ``verbose`` is set, since with
    concurrent steps they interleave with the final lines of other steps.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, bus: StatusBus) -> None:
        self.detach()
        self._unsubscribe = bus.subscribe(self.on_status)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_status(self, event: StatusEvent) -> None:
        if event.status is ExecutionStatus.RUNNING and not self.verbose:
            return
        symbol, style = STATUS_STYLES[event.status]
        self.console.print(
            f"[{style}]{symbol}[/{style}] "
            f"[bold]{escape(event.package_name)}[/bold] › {escape(event.step_name)} "
            f"[{style}]{event.status.value}[/{style}]"
        )

    def print_failures(self, failures: Iterable[StepFailure]) -> None:
        """Print the captured output of every failed step."""
        for failure in failures:
            self.console.print()
            self.console.rule(
                f"[red]{escape(failure.package_name)} › {escape(failure.step.name)}[/red]"
            )
            if failure.command:
                self.console.print(f"[dim]$ {escape(failure.command)}[/dim]")
            self.console.print(escape(failure.message.strip("\n")), highlight=False)
