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

"""Install git hook scripts and per-package .gitignore entries."""

from __future__ import annotations

import logging
import stat
from collections.abc import Iterable
from pathlib import Path

from hookwarden.constants import (
    HOOK_SHEBANG,
    HOOK_TYPES,
    LOCAL_HOOKS_GITIGNORE_LINE,
    hook_invocation,
)

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Error while writing hook or gitignore files."""

    pass


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def write_git_hooks_files(hook_types: Iterable[str], root_dir: Path) -> dict[str, str]:
    """Make each git hook call ``hookwarden run`` for its hook type.

    Missing hook scripts are created. Existing scripts get the invocation
    appended unless they already contain it, so the function is idempotent
    and keeps user-written hook content.

    Args:
        hook_types: Git hook names, e.g. ``["pre-commit", "commit-msg"]``.
        root_dir: Repository root containing the ``.git`` directory.

    Returns:
        Mapping of hook type to ``created``, ``appended`` or ``existing``.

    Raises:
        InstallError: On an unknown hook type or a missing ``.git`` directory.
    """
    git_dir = Path(root_dir) / ".git"
    if not git_dir.is_dir():
        raise InstallError(
            f"No .git directory in {root_dir}. "
            "Run 'hookwarden init' from the root of a git repository."
        )

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(exist_ok=True)

    result: dict[str, str] = {}
    for hook_type in hook_types:
        if hook_type not in HOOK_TYPES:
            raise InstallError(
                f"Unknown hook type '{hook_type}'. Valid types: {', '.join(HOOK_TYPES)}"
            )

        hook_path = hooks_dir / hook_type
        invocation = hook_invocation(hook_type)

        if not hook_path.exists():
            logger.info(f"Creating hook {hook_path}")
            hook_path.write_text(f"{HOOK_SHEBANG}\n{invocation}\n")
            result[hook_type] = "created"
        else:
            content = hook_path.read_text()
            if invocation in content:
                logger.debug(f"Hook {hook_type} already declared, skipping")
                result[hook_type] = "existing"
            else:
                logger.info(f"Appending hookwarden to existing hook {hook_path}")
                if content and not content.endswith("\n"):
                    content += "\n"
                hook_path.write_text(f"{content}{invocation}\n")
                result[hook_type] = "appended"

        _make_executable(hook_path)

    return result


def _add_to_gitignore(directory: Path, entry: str) -> bool:
    """Add an entry to ``directory/.gitignore`` if not already present.

    Returns:
        True if the entry was added, False if it already existed.
    """
    gitignore = directory / ".gitignore"

    if gitignore.exists():
        content = gitignore.read_text()
        if any(line.strip() == entry for line in content.splitlines()):
            return False
        if content and not content.endswith("\n"):
            content += "\n"
        gitignore.write_text(f"{content}{entry}\n")
    else:
        gitignore.write_text(f"{entry}\n")

    return True


def write_gitignore_files(package_paths: Iterable[Path]) -> dict[str, list[Path]]:
    """Ignore local step overrides in every package.

    Args:
        package_paths: Package directories.

    Returns:
        Dictionary with 'added' (packages whose .gitignore gained the entry)
        and 'existing' (packages that already had it).
    """
    result: dict[str, list[Path]] = {"added": [], "existing": []}
    for package_path in package_paths:
        package_path = Path(package_path)
        if not package_path.is_dir():
            raise InstallError(f"Package directory not found: {package_path}")
        if _add_to_gitignore(package_path, LOCAL_HOOKS_GITIGNORE_LINE):
            logger.info(f"Added {LOCAL_HOOKS_GITIGNORE_LINE} to {package_path}/.gitignore")
            result["added"].append(package_path)
        else:
            result["existing"].append(package_path)
    return result
