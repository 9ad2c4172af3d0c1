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

"""Step execution and gating engine.

When a git hook fires, each package's steps for that hook are run as shell
commands, unless the step declares an ``onlyOn`` glob that none of the
package's changed files match.

Step Kinds:
- generic: Run the command as is
- python: Optionally activate a virtual environment around the command

Lifecycle:
- running: Published first for every step
- skipped / success / failure: Exactly one, published last
"""

from hookwarden.hooks.base import (
    ExecutionContext,
    GenericStepType,
    HookDefinitionError,
    PackageHook,
    PythonStepType,
    Step,
    StepType,
)
from hookwarden.hooks.command import (
    TemplateError,
    build_command,
    validate_command_template,
)
from hookwarden.hooks.events import (
    ExecutionStatus,
    StatusBus,
    StatusEvent,
)
from hookwarden.hooks.executor import (
    InvalidPatternError,
    OutputBuffer,
    StepExecutor,
    StepFailure,
)
from hookwarden.hooks.matcher import (
    PatternError,
    match_files,
)
from hookwarden.hooks.runner import HookRunner

__all__ = [
    # Definitions
    "ExecutionContext",
    "GenericStepType",
    "HookDefinitionError",
    "PackageHook",
    "PythonStepType",
    "Step",
    "StepType",
    # Commands
    "TemplateError",
    "build_command",
    "validate_command_template",
    # Events
    "ExecutionStatus",
    "StatusBus",
    "StatusEvent",
    # Execution
    "InvalidPatternError",
    "OutputBuffer",
    "StepExecutor",
    "StepFailure",
    "HookRunner",
    # Matching
    "PatternError",
    "match_files",
]
