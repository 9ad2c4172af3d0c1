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

"""Base types for hook steps: step definitions, step kinds and execution context."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from hookwarden.hooks.command import TemplateError, validate_command_template

VALID_STEP_KINDS = ("generic", "python")


class HookDefinitionError(Exception):
    """Raised when a step or package hook definition is invalid."""

    pass


@dataclass(frozen=True)
class GenericStepType:
    """A plain shell step."""

    kind: ClassVar[str] = "generic"


@dataclass(frozen=True)
class PythonStepType:
    """A step run inside an optional virtual environment.

    When ``venv_activate`` is set the command is wrapped with
    ``. <venv_activate>`` and ``deactivate``.
    """

    kind: ClassVar[str] = "python"
    venv_activate: str | None = None


StepType = GenericStepType | PythonStepType


def step_type_from_dict(data: dict[str, Any]) -> StepType:
    """Build a step kind from a package hook definition.

    Args:
        data: Mapping with an optional ``type`` (``generic`` or ``python``)
            and, for python packages only, an optional ``venvActivate``.

    Raises:
        HookDefinitionError: On an unknown type or a venv on a generic step.
    """
    kind = data.get("type") or "generic"
    venv_activate = data.get("venvActivate", data.get("venv_activate"))

    if kind == "python":
        return PythonStepType(venv_activate=venv_activate)
    if kind == "generic":
        if venv_activate:
            raise HookDefinitionError(
                "venvActivate is only allowed on packages of type 'python'"
            )
        return GenericStepType()

    raise HookDefinitionError(
        f"Invalid step type '{kind}'. Valid values: {', '.join(VALID_STEP_KINDS)}"
    )


@dataclass(frozen=True)
class Step:
    """A named shell command bound to a package.

    Attributes:
        name: Step name, unique within a package.
        command: Command template; may contain the ``{args}`` placeholder.
        only_on: Optional glob restricting the step to matching changed files.
    """

    name: str
    command: str
    only_on: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "command": self.command}
        if self.only_on is not None:
            result["onlyOn"] = self.only_on
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Step":
        """Create a step from a definition, validating its command template.

        Raises:
            HookDefinitionError: If a required field is missing or the
                command template is malformed.
        """
        if not isinstance(data, dict):
            raise HookDefinitionError(
                f"Step definition must be a mapping, got {type(data).__name__}: {data!r}"
            )
        name = data.get("name")
        if not name:
            raise HookDefinitionError("Step definition requires a 'name'")

        command = data.get("command")
        if not isinstance(command, str):
            raise HookDefinitionError(f"Step '{name}' requires a 'command' string")
        try:
            validate_command_template(command)
        except TemplateError as e:
            raise HookDefinitionError(f"Step '{name}': {e}") from e

        only_on = data.get("onlyOn", data.get("only_on"))
        if only_on is not None and not isinstance(only_on, str):
            raise HookDefinitionError(f"Step '{name}': 'onlyOn' must be a string")

        return cls(name=name, command=command, only_on=only_on)


@dataclass(frozen=True)
class ExecutionContext:
    """Everything a step executor needs about one hook invocation.

    Attributes:
        package_name: Name of the package owning the step.
        package_path: Absolute path of the package; the step runs there.
        root_dir: Absolute path of the repository root.
        step_type: Step kind, governs virtual environment activation.
        hook_arguments: Raw argument string git passed to the hook.
        staged_files: Files changed in this operation, relative to root_dir.
    """

    package_name: str
    package_path: Path
    root_dir: Path
    step_type: StepType = field(default_factory=GenericStepType)
    hook_arguments: str = ""
    staged_files: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageHook:
    """The steps one package declares for one hook type."""

    name: str
    path: Path
    steps: tuple[Step, ...] = ()
    step_type: StepType = field(default_factory=GenericStepType)

    def context_for(
        self,
        root_dir: Path,
        hook_arguments: str,
        staged_files: tuple[str, ...],
    ) -> ExecutionContext:
        """Build the execution context of this package's steps."""
        package_path = self.path if self.path.is_absolute() else root_dir / self.path
        return ExecutionContext(
            package_name=self.name,
            package_path=package_path,
            root_dir=root_dir,
            step_type=self.step_type,
            hook_arguments=hook_arguments,
            staged_files=staged_files,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PackageHook":
        """Create a package hook from a definition.

        Expected shape::

            {"name": "api", "path": "packages/api", "type": "python",
             "venvActivate": ".venv/bin/activate",
             "steps": [{"name": "lint", "command": "ruff check .",
                        "onlyOn": "**/*.py"}]}

        Raises:
            HookDefinitionError: If the definition is invalid.
        """
        if not isinstance(data, dict):
            raise HookDefinitionError(
                f"Package definition must be a mapping, got {type(data).__name__}: {data!r}"
            )
        name = data.get("name")
        if not name:
            raise HookDefinitionError("Package definition requires a 'name'")

        steps_data = data.get("steps", [])
        if not isinstance(steps_data, list):
            raise HookDefinitionError(f"Package '{name}': 'steps' must be a list")
        steps = tuple(Step.from_dict(step) for step in steps_data)

        seen: set[str] = set()
        for step in steps:
            if step.name in seen:
                raise HookDefinitionError(
                    f"Package '{name}': duplicate step name '{step.name}'"
                )
            seen.add(step.name)

        return cls(
            name=name,
            path=Path(data.get("path", ".")),
            steps=steps,
            step_type=step_type_from_dict(data),
        )
