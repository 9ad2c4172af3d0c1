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

"""Step result schemas for JSON output.

The runner records one ``StepRecord`` per executed step and returns them in a
``HookRunSummary``. With ``--format json`` the summary is printed to stdout.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any
import json


@dataclass
class StepRecord:
    """Final state of one step of one package."""

    package: str
    step: str
    status: str = "running"
    duration_seconds: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class HookRunSummary:
    """Result of running every applicable step for one hook invocation."""

    hook_type: str
    steps: list[StepRecord] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def failed(self) -> list[StepRecord]:
        return [record for record in self.steps if record.status == "failure"]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        """Exit code of the hook process: 1 if any step failed, else 0."""
        return 0 if self.success else 1

    def counts(self) -> dict[str, int]:
        """Count steps by final status."""
        result: dict[str, int] = {}
        for record in self.steps:
            result[record.status] = result.get(record.status, 0) + 1
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hook_type": self.hook_type,
            "success": self.success,
            "exit_code": self.exit_code,
            "timestamp": self.timestamp,
            "counts": self.counts(),
            "steps": [record.to_dict() for record in self.steps],
        }

    def to_json(self) -> str:
        """Serialize to JSON string for stdout."""
        return json.dumps(self.to_dict(), default=str)
