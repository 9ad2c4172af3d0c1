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

"""Step executor: decides whether a step runs, runs it, reports its outcome.

One executor is created per (package, step, hook invocation). Whether the
step is skipped is decided once at construction. ``run()`` publishes
``RUNNING`` followed by exactly one terminal status on the bus and resolves to
``None`` (skipped or succeeded) or a ``StepFailure``. A failing command is a
normal outcome, never an exception.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from dataclasses import dataclass
from typing import Any

from hookwarden.constants import DEFAULT_OUTPUT_LIMIT, STDOUT_SEPARATOR
from hookwarden.hooks.base import ExecutionContext, Step
from hookwarden.hooks.command import build_command
from hookwarden.hooks.events import ExecutionStatus, StatusBus, StatusEvent
from hookwarden.hooks.matcher import PatternError, match_files

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536
TRUNCATION_MARKER = "[...truncated]"


class InvalidPatternError(Exception):
    """Raised at construction when a step's ``only_on`` pattern is invalid."""

    pass


@dataclass
class StepFailure:
    """Outcome of a step whose command failed.

    ``message`` holds the captured stderr followed by the captured stdout.
    """

    step: Step
    message: str
    package_name: str = ""
    command: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package_name,
            "step": self.step.name,
            "command": self.command,
            "message": self.message,
        }


class OutputBuffer:
    """Accumulates the output of one stream, keeping at most ``limit`` chars.

    Every chunk is appended with a leading newline. When the limit is
    exceeded the oldest text is dropped, since errors are usually at the end.
    """

    def __init__(self, limit: int = DEFAULT_OUTPUT_LIMIT):
        self.limit = limit
        self.truncated = False
        self._text = ""

    def append(self, chunk: str) -> None:
        if not chunk:
            return
        self._text += "\n" + chunk
        if len(self._text) > self.limit:
            self._text = self._text[-self.limit :]
            self.truncated = True

    def getvalue(self) -> str:
        if self.truncated:
            return f"\n{TRUNCATION_MARKER}{self._text}"
        return self._text


async def _drain(stream: asyncio.StreamReader, buffer: OutputBuffer) -> None:
    """Read a stream to EOF into a buffer, decoding UTF-8 incrementally."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.append(decoder.decode(chunk))
    buffer.append(decoder.decode(b"", final=True))


class StepExecutor:
    """Runs a single step of a package in its own subprocess.

    Args:
        step: The step to run.
        context: Package paths, step kind, hook arguments and changed files.
        bus: Bus receiving this step's status events.
        output_limit: Maximum characters kept per output stream.

    Raises:
        InvalidPatternError: If ``step.only_on`` is not a valid glob.
    """

    def __init__(
        self,
        step: Step,
        context: ExecutionContext,
        bus: StatusBus,
        output_limit: int = DEFAULT_OUTPUT_LIMIT,
    ):
        self.step = step
        self.context = context
        self.bus = bus
        self.output_limit = output_limit
        self._task: asyncio.Future[StepFailure | None] | None = None

        self.skipped = self._is_skipped()

    def _is_skipped(self) -> bool:
        """Decide whether the step is skipped.

        A step without ``only_on`` always runs. Otherwise it runs only if at
        least one changed file of the package matches the pattern.
        """
        only_on = self.step.only_on
        if not only_on:
            return False

        try:
            matched = match_files(
                only_on,
                self.context.package_path,
                self.context.staged_files,
                self.context.root_dir,
            )
        except PatternError as e:
            raise InvalidPatternError(
                f"Invalid `only_on` pattern for step '{self.step.name}' "
                f"of package '{self.context.package_name}': {only_on}\n{e}"
            ) from e

        if not matched:
            logger.info(
                f"Skipping {self.context.package_name}/{self.step.name}: "
                f"no changed file matches {only_on!r}"
            )
            return True
        return False

    def emit_status(self, status: ExecutionStatus) -> None:
        """Publish a status change of this step."""
        self.bus.publish(
            StatusEvent(
                package_name=self.context.package_name,
                step_name=self.step.name,
                status=status,
            )
        )

    def compute_command(self) -> str:
        """Return the full command line passed to the shell."""
        return build_command(
            self.step.command,
            self.context.hook_arguments,
            self.context.step_type,
        )

    async def run(self) -> StepFailure | None:
        """Run the step once and return its outcome.

        The first call starts the execution. Later calls, concurrent or not,
        wait for that same execution and return its outcome without starting
        another subprocess or publishing further events.

        Returns:
            None if the step was skipped or succeeded, otherwise a StepFailure.
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._execute())
        else:
            logger.debug(
                f"{self.context.package_name}/{self.step.name} already started, "
                "returning its outcome"
            )
        return await self._task

    async def _execute(self) -> StepFailure | None:
        self.emit_status(ExecutionStatus.RUNNING)

        if self.skipped:
            self.emit_status(ExecutionStatus.SKIPPED)
            return None

        command = self.compute_command()
        cwd = self.context.package_path
        logger.debug(f"Executing shell command: {command}")
        logger.debug(f"Working directory: {cwd}")

        stdout = OutputBuffer(self.output_limit)
        stderr = OutputBuffer(self.output_limit)

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            stderr.append(f"Failed to start command: {e}")
            return self._failure(command, stdout, stderr)

        # Resolve only once the process exited and both streams are drained
        _, _, return_code = await asyncio.gather(
            _drain(process.stdout, stdout),
            _drain(process.stderr, stderr),
            process.wait(),
        )

        if return_code == 0:
            self.emit_status(ExecutionStatus.SUCCESS)
            return None

        logger.debug(f"Command exited with code {return_code}: {command}")
        return self._failure(command, stdout, stderr)

    def _failure(
        self, command: str, stdout: OutputBuffer, stderr: OutputBuffer
    ) -> StepFailure:
        logger.warning(f"Step {self.context.package_name}/{self.step.name} failed")
        self.emit_status(ExecutionStatus.FAILURE)
        return StepFailure(
            step=self.step,
            message=stderr.getvalue() + STDOUT_SEPARATOR + stdout.getvalue(),
            package_name=self.context.package_name,
            command=command,
        )
