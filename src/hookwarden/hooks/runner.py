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

"""Runs every step of every package for one hook invocation.

The runner creates one executor per (package, step), runs them concurrently
(or one by one), and aggregates their outcomes into a ``HookRunSummary``.
Invalid ``only_on`` patterns surface while building executors, before any
step starts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from pathlib import Path

from hookwarden.constants import DEFAULT_OUTPUT_LIMIT
from hookwarden.hooks.base import PackageHook
from hookwarden.hooks.events import ExecutionStatus, StatusBus
from hookwarden.hooks.executor import StepExecutor, StepFailure
from hookwarden.step_results import HookRunSummary, StepRecord

logger = logging.getLogger(__name__)


class HookRunner:
    """Aggregates step executors for one hook invocation.

    Args:
        bus: Bus shared with the executors and any reporter.
        parallel: Run all steps concurrently when True, in definition order
            otherwise.
        output_limit: Maximum characters kept per output stream and step.
    """

    def __init__(
        self,
        bus: StatusBus,
        parallel: bool = True,
        output_limit: int = DEFAULT_OUTPUT_LIMIT,
    ):
        self.bus = bus
        self.parallel = parallel
        self.output_limit = output_limit
        self.failures: list[StepFailure] = []

    def build_executors(
        self,
        packages: Iterable[PackageHook],
        root_dir: Path,
        hook_arguments: str = "",
        staged_files: Iterable[str] = (),
    ) -> list[StepExecutor]:
        """Create one executor per step of each package.

        Raises:
            InvalidPatternError: If a step's ``only_on`` pattern is invalid.
        """
        root_dir = Path(root_dir).resolve()
        files = tuple(staged_files)
        executors = []
        for package in packages:
            context = package.context_for(root_dir, hook_arguments, files)
            for step in package.steps:
                executors.append(
                    StepExecutor(step, context, self.bus, output_limit=self.output_limit)
                )
        return executors

    async def run(
        self,
        packages: Iterable[PackageHook],
        root_dir: Path,
        hook_type: str,
        hook_arguments: str = "",
        staged_files: Iterable[str] = (),
    ) -> HookRunSummary:
        """Run every applicable step and summarize the outcomes.

        Args:
            packages: Package hooks declaring the steps of this hook type.
            root_dir: Repository root; relative package paths resolve here.
            hook_type: Git hook name, recorded in the summary.
            hook_arguments: Raw argument string git passed to the hook.
            staged_files: Changed files, relative to ``root_dir``.

        Returns:
            The summary; ``exit_code`` is 1 if any step failed.
        """
        executors = self.build_executors(packages, root_dir, hook_arguments, staged_files)

        if self.parallel:
            records = await asyncio.gather(*(self._run_one(executor) for executor in executors))
        else:
            records = [await self._run_one(executor) for executor in executors]

        self.failures = [failure for _, failure in records if failure is not None]

        summary = HookRunSummary(hook_type=hook_type, steps=[record for record, _ in records])
        logger.info(f"Hook {hook_type}: {summary.counts()}")
        return summary

    async def _run_one(
        self, executor: StepExecutor
    ) -> tuple[StepRecord, StepFailure | None]:
        """Run one executor and record its outcome.

        Each executor gets its own record, so steps sharing a package and
        step name never overwrite each other.
        """
        started = time.monotonic()
        failure = await executor.run()
        if failure is not None:
            status = ExecutionStatus.FAILURE
        elif executor.skipped:
            status = ExecutionStatus.SKIPPED
        else:
            status = ExecutionStatus.SUCCESS

        record = StepRecord(
            package=executor.context.package_name,
            step=executor.step.name,
            status=status.value,
            duration_seconds=time.monotonic() - started,
            error=failure.message if failure is not None else None,
        )
        return record, failure

    def run_sync(self, *args, **kwargs) -> HookRunSummary:
        """Run ``run()`` to completion on a fresh event loop."""
        return asyncio.run(self.run(*args, **kwargs))
