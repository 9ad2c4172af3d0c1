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

"""Tests for step and package hook definitions."""

from pathlib import Path

import pytest

from hookwarden.hooks.base import (
    GenericStepType,
    HookDefinitionError,
    PackageHook,
    PythonStepType,
    Step,
    step_type_from_dict,
)


class TestStepFromDict:
    """Tests for Step.from_dict()."""

    def test_minimal_step(self):
        step = Step.from_dict({"name": "lint", "command": "make lint"})
        assert step == Step(name="lint", command="make lint", only_on=None)

    def test_only_on_camel_case(self):
        step = Step.from_dict({"name": "vet", "command": "go vet", "onlyOn": "*.go"})
        assert step.only_on == "*.go"

    def test_only_on_snake_case(self):
        step = Step.from_dict({"name": "vet", "command": "go vet", "only_on": "*.go"})
        assert step.only_on == "*.go"

    def test_missing_name_raises(self):
        with pytest.raises(HookDefinitionError, match="requires a 'name'"):
            Step.from_dict({"command": "true"})

    def test_non_mapping_raises(self):
        with pytest.raises(HookDefinitionError, match="must be a mapping, got str"):
            Step.from_dict("make lint")

    def test_missing_command_raises(self):
        with pytest.raises(HookDefinitionError, match="requires a 'command'"):
            Step.from_dict({"name": "lint"})

    def test_malformed_template_fails_at_load_time(self):
        with pytest.raises(HookDefinitionError, match="Step 'lint'.*unknown placeholder"):
            Step.from_dict({"name": "lint", "command": "eslint {arg}"})

    def test_to_dict_round_trip(self):
        data = {"name": "vet", "command": "go vet", "onlyOn": "*.go"}
        assert Step.from_dict(data).to_dict() == data

    def test_steps_are_immutable(self):
        step = Step(name="lint", command="true")
        with pytest.raises(AttributeError):
            step.command = "false"


class TestStepType:
    """Tests for step kinds."""

    def test_default_is_generic(self):
        assert step_type_from_dict({}) == GenericStepType()

    def test_python_with_venv(self):
        step_type = step_type_from_dict({"type": "python", "venvActivate": ".venv/bin/activate"})
        assert step_type == PythonStepType(venv_activate=".venv/bin/activate")
        assert step_type.kind == "python"

    def test_venv_on_generic_package_is_rejected(self):
        with pytest.raises(HookDefinitionError, match="only allowed"):
            step_type_from_dict({"type": "generic", "venvActivate": ".venv/bin/activate"})

    def test_unknown_type_is_rejected(self):
        with pytest.raises(HookDefinitionError, match="Invalid step type 'js'"):
            step_type_from_dict({"type": "js"})


class TestPackageHook:
    """Tests for PackageHook."""

    def test_from_dict(self):
        package = PackageHook.from_dict(
            {
                "name": "api",
                "path": "packages/api",
                "type": "python",
                "steps": [
                    {"name": "lint", "command": "ruff check ."},
                    {"name": "test", "command": "pytest", "onlyOn": "**/*.py"},
                ],
            }
        )
        assert package.name == "api"
        assert package.path == Path("packages/api")
        assert [step.name for step in package.steps] == ["lint", "test"]
        assert isinstance(package.step_type, PythonStepType)

    def test_duplicate_step_names_are_rejected(self):
        with pytest.raises(HookDefinitionError, match="duplicate step name 'lint'"):
            PackageHook.from_dict(
                {
                    "name": "api",
                    "steps": [
                        {"name": "lint", "command": "true"},
                        {"name": "lint", "command": "false"},
                    ],
                }
            )

    def test_steps_must_be_a_list(self):
        with pytest.raises(HookDefinitionError, match="must be a list"):
            PackageHook.from_dict({"name": "api", "steps": {"name": "lint"}})

    def test_context_for_resolves_relative_path(self, tmp_path):
        package = PackageHook(name="api", path=Path("packages/api"))
        context = package.context_for(tmp_path, "msg", ("packages/api/a.py",))
        assert context.package_path == tmp_path / "packages" / "api"
        assert context.root_dir == tmp_path
        assert context.hook_arguments == "msg"
        assert context.staged_files == ("packages/api/a.py",)

    def test_context_for_keeps_absolute_path(self, tmp_path):
        package = PackageHook(name="api", path=tmp_path / "elsewhere")
        context = package.context_for(tmp_path, "", ())
        assert context.package_path == tmp_path / "elsewhere"
