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

"""Pytest configuration and shared fixtures for hookwarden tests."""

import logging
from pathlib import Path

import pytest

from hookwarden.hooks import (
    ExecutionContext,
    GenericStepType,
    StatusBus,
    StatusEvent,
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Run every test in a temp directory with a temp home and no env overrides."""
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "HOOKWARDEN_LOG_LEVEL",
        "HOOKWARDEN_OUTPUT_FORMAT",
        "HOOKWARDEN_QUIET",
        "HOOKWARDEN_PARALLEL",
        "HOOKWARDEN_OUTPUT_LIMIT",
        "HOOKWARDEN_ROOT",
    ):
        monkeypatch.delenv(var, raising=False)
    yield
    # The CLI sets the root level; restore pytest's default
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
def repo(tmp_path):
    """A repository root with two package directories."""
    root = tmp_path / "repo"
    (root / "packages" / "api").mkdir(parents=True)
    (root / "packages" / "web").mkdir(parents=True)
    return root


@pytest.fixture
def bus():
    return StatusBus()


class EventRecorder:
    """Bus subscriber keeping every event it receives."""

    def __init__(self):
        self.events: list[StatusEvent] = []

    def __call__(self, event: StatusEvent) -> None:
        self.events.append(event)

    def statuses(self, step_name: str | None = None) -> list[str]:
        return [
            e.status.value
            for e in self.events
            if step_name is None or e.step_name == step_name
        ]


@pytest.fixture
def recorder(bus):
    """An EventRecorder subscribed to the bus fixture."""
    rec = EventRecorder()
    bus.subscribe(rec)
    return rec


@pytest.fixture
def make_context(repo):
    """Factory for execution contexts of the 'api' package."""

    def _make(
        staged_files=(),
        hook_arguments="",
        step_type=None,
        package_path: Path | None = None,
    ) -> ExecutionContext:
        return ExecutionContext(
            package_name="api",
            package_path=package_path or repo / "packages" / "api",
            root_dir=repo,
            step_type=step_type or GenericStepType(),
            hook_arguments=hook_arguments,
            staged_files=tuple(staged_files),
        )

    return _make
