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

"""Step lifecycle events and the bus that fans them out to observers.

The bus is constructed once by the caller and handed to every executor and
observer that needs it. Delivery is synchronous, in publish order, to the
handlers subscribed at publish time. Nothing is retained.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ExecutionStatus(str, Enum):
    """Lifecycle status of a step run.

    ``RUNNING`` is always published first, followed by exactly one of the
    terminal statuses.
    """

    RUNNING = "running"
    SKIPPED = "skipped"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.RUNNING


@dataclass(frozen=True)
class StatusEvent:
    """A step changed status."""

    package_name: str
    step_name: str
    status: ExecutionStatus


StatusHandler = Callable[[StatusEvent], None]


class StatusBus:
    """Publish/subscribe channel for step status events."""

    def __init__(self):
        self._handlers: list[StatusHandler] = []

    def subscribe(self, handler: StatusHandler) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Called with every event published after subscription.

        Returns:
            A function removing the handler; calling it twice is harmless.
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: StatusEvent) -> None:
        """Deliver an event to every current handler.

        A handler that raises is logged and skipped; the remaining handlers
        still receive the event and the publisher never sees the error.
        """
        # Snapshot so handlers may unsubscribe while being called
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    f"Status handler {handler!r} failed on "
                    f"{event.package_name}/{event.step_name} {event.status.value}"
                )

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)
