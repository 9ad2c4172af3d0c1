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

"""Constants shared by the step engine, the installer and the CLI.

Hook scripts written by the installer call back into the CLI with the hook
type and the raw argument string git passed to the hook. Steps may forward
those arguments through the ``{args}`` placeholder.
"""

from typing import Final

# Directory names
HOOKWARDEN_DIR_NAME: Final = ".hookwarden"
PACKAGE_HOOKS_DIR_NAME: Final = ".hooks"

# Placeholder replaced by the hook arguments in step commands
ARGS_PLACEHOLDER: Final = "{args}"

# Separator between captured stderr and stdout in failure messages
STDOUT_SEPARATOR: Final = "\nstdout:\n"

# Default cap on captured output per stream, in characters
DEFAULT_OUTPUT_LIMIT: Final = 1_000_000

# Line ignored in each package so local step overrides stay untracked
LOCAL_HOOKS_GITIGNORE_LINE: Final = f"{PACKAGE_HOOKS_DIR_NAME}/*.local.json"

# Git hooks hookwarden knows how to install
HOOK_TYPES: Final[tuple[str, ...]] = (
    "pre-commit",
    "prepare-commit-msg",
    "commit-msg",
    "post-commit",
    "post-merge",
    "post-rewrite",
    "pre-rebase",
    "post-checkout",
    "pre-push",
)

HOOK_SHEBANG: Final = "#!/bin/sh"


def hook_invocation(hook_type: str) -> str:
    """Return the shell line a git hook script uses to call hookwarden.

    Args:
        hook_type: Git hook name, e.g. ``pre-commit``.

    Returns:
        The command line appended to ``.git/hooks/<hook_type>``.
    """
    return f'hookwarden run --type {hook_type} --args "$1"'
