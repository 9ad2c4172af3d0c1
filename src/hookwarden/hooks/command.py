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

"""Build the shell command a step executes.

Commands are templates: the hook arguments replace the ``{args}``
placeholder, and python steps with a virtual environment are wrapped with
its activation.
"""

from __future__ import annotations

import re
import shlex
from typing import TYPE_CHECKING

from hookwarden.constants import ARGS_PLACEHOLDER

if TYPE_CHECKING:
    from hookwarden.hooks.base import StepType

# Misspellings of the {args} placeholder, e.g. {arg}, { args } or {ARGS}.
# Other brace text such as awk programs or "${VAR}" is left alone.
PLACEHOLDER_LIKE_PATTERN = re.compile(r"(?<!\$)\{\s*args?\s*\}", re.IGNORECASE)


class TemplateError(ValueError):
    """Raised when a command template is malformed."""


def validate_command_template(template: str) -> None:
    """Check a command template at load time.

    A template may contain ``{args}`` at most once. A brace token that
    misspells it is most likely a typo and is rejected.

    Raises:
        TemplateError: If the template is empty or malformed.
    """
    if not template.strip():
        raise TemplateError("command is empty")

    count = template.count(ARGS_PLACEHOLDER)
    if count > 1:
        raise TemplateError(
            f"placeholder {ARGS_PLACEHOLDER} may appear at most once, found {count}"
        )

    for match in PLACEHOLDER_LIKE_PATTERN.finditer(template):
        if match.group(0) != ARGS_PLACEHOLDER:
            raise TemplateError(
                f"unknown placeholder {match.group(0)!r}; "
                f"the only supported placeholder is {ARGS_PLACEHOLDER}"
            )


def format_hook_arguments(hook_arguments: str) -> str:
    """Collapse the raw hook argument string into shell-quoted text.

    Tokens are split on whitespace, empty tokens dropped and the rest joined
    with single spaces before quoting, so ``"  a  b "`` becomes ``'a b'``.
    """
    return shlex.quote(" ".join(hook_arguments.split()))


def build_command(template: str, hook_arguments: str, step_type: "StepType") -> str:
    """Produce the final shell command of a step.

    Args:
        template: The step's command template.
        hook_arguments: Raw argument string passed to the git hook.
        step_type: Step kind; python steps with ``venv_activate`` set are
            wrapped as ``. <venv> && <command> && deactivate``.

    Returns:
        The command string to hand to the shell.
    """
    command = template
    venv_activate = getattr(step_type, "venv_activate", None)
    if step_type.kind == "python" and venv_activate:
        command = f". {shlex.quote(venv_activate)} && {command} && deactivate"

    # Only the first occurrence is replaced
    return command.replace(ARGS_PLACEHOLDER, format_hook_arguments(hook_arguments), 1)
