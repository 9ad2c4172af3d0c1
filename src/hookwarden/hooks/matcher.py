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

"""Glob matching of changed files against a package-relative pattern.

Patterns are written relative to the package directory while the changed
file list is relative to the repository root. A file matches when it lies
under the package directory and its package-relative path satisfies the glob.

Supported syntax:
- ``*``: any run of characters except ``/``
- ``**``: any run of characters including ``/`` (``**/`` also matches zero
  directories)
- ``?``: one character except ``/``
- ``[abc]``: character classes; ``[!abc]`` and ``[^abc]`` both negate
- ``{a,b}``: alternation
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class PatternError(ValueError):
    """Raised when a glob pattern is not syntactically valid."""


def _normalize(path: str | Path) -> str:
    """Normalize separators and redundant segments to a POSIX relative path."""
    normalized = posixpath.normpath(str(path).replace("\\", "/"))
    return "" if normalized == "." else normalized


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a ``[...]`` class starting at ``start``.

    Returns the regex fragment and the index just past the closing bracket.
    """
    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    # A leading "]" is part of the class, not its end
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    end = pattern.find("]", i)
    if end == -1:
        raise PatternError(f"unbalanced '[' at position {start} in {pattern!r}")

    content = pattern[start + 1 : end].replace("\\", "\\\\")
    if content[0] in "!^":
        content = "^" + content[1:]
    return f"[{content}]", end + 1


def translate(pattern: str) -> str:
    """Translate a glob pattern to a regular expression string.

    Args:
        pattern: Glob pattern, see the module docstring for the syntax.

    Returns:
        A regex matching the whole of a normalized relative path.

    Raises:
        PatternError: If the pattern is empty or has unbalanced brackets
            or braces.
    """
    if not pattern or not pattern.strip():
        raise PatternError("empty pattern")

    parts: list[str] = []
    brace_depth = 0
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**/", i):
                parts.append("(?:.*/)?")
                i += 3
            elif pattern.startswith("**", i):
                parts.append(".*")
                i += 2
            else:
                parts.append("[^/]*")
                i += 1
            continue
        if c == "[":
            fragment, i = _translate_class(pattern, i)
            parts.append(fragment)
            continue

        if c == "?":
            parts.append("[^/]")
        elif c == "]":
            raise PatternError(f"unbalanced ']' at position {i} in {pattern!r}")
        elif c == "{":
            brace_depth += 1
            parts.append("(?:")
        elif c == "}":
            if brace_depth == 0:
                raise PatternError(f"unbalanced '}}' at position {i} in {pattern!r}")
            brace_depth -= 1
            parts.append(")")
        elif c == "," and brace_depth:
            parts.append("|")
        else:
            parts.append(re.escape(c))
        i += 1

    if brace_depth:
        raise PatternError(f"unbalanced '{{' in {pattern!r}")

    return "(?s:" + "".join(parts) + r")\Z"


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern, raising PatternError if it is invalid."""
    regex = translate(pattern)
    try:
        return re.compile(regex)
    except re.error as e:
        raise PatternError(f"invalid pattern {pattern!r}: {e}") from e


def package_prefix(base_path: str | Path, root_dir: str | Path) -> str | None:
    """Return the package directory relative to the root, POSIX style.

    Returns an empty string for the root itself and None when the package
    lies outside the root directory.
    """
    absolute = Path(root_dir) / base_path
    relative = _normalize(os.path.relpath(absolute, root_dir))
    if relative == ".." or relative.startswith("../"):
        return None
    return relative


def match_files(
    pattern: str,
    base_path: str | Path,
    files: Iterable[str],
    root_dir: str | Path,
) -> list[str]:
    """Return the files under ``base_path`` whose package-relative path matches.

    Args:
        pattern: Glob pattern relative to the package directory.
        base_path: Package directory, absolute or relative to ``root_dir``.
        files: Changed file paths relative to ``root_dir``.
        root_dir: Repository root directory.

    Returns:
        The matching entries of ``files``, in their original order and form.
        An empty list when nothing matches.

    Raises:
        PatternError: If ``pattern`` is not a valid glob.
    """
    regex = compile_pattern(pattern)
    prefix = package_prefix(base_path, root_dir)
    if prefix is None:
        logger.debug(f"Package {base_path} is outside {root_dir}, nothing to match")
        return []

    matched = []
    for file in files:
        relative = _normalize(file)
        if not relative:
            continue
        if prefix:
            if not relative.startswith(prefix + "/"):
                continue
            relative = relative[len(prefix) + 1 :]
        if regex.match(relative):
            matched.append(file)

    logger.debug(f"Pattern {pattern!r} matched {len(matched)} file(s) under {prefix or '.'}")
    return matched
