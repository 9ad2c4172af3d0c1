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

"""Tests for git hook and .gitignore installation."""

import os

import pytest

from hookwarden.constants import LOCAL_HOOKS_GITIGNORE_LINE, hook_invocation
from hookwarden.install import (
    InstallError,
    write_git_hooks_files,
    write_gitignore_files,
)


@pytest.fixture
def git_root(tmp_path):
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return root


class TestWriteGitHooksFiles:
    """Tests for write_git_hooks_files()."""

    def test_creates_missing_hook(self, git_root):
        result = write_git_hooks_files(["pre-commit"], git_root)

        hook = git_root / ".git" / "hooks" / "pre-commit"
        assert result == {"pre-commit": "created"}
        assert hook.read_text() == f"#!/bin/sh\n{hook_invocation('pre-commit')}\n"
        assert os.access(hook, os.X_OK)

    def test_appends_to_existing_hook(self, git_root):
        hooks_dir = git_root / ".git" / "hooks"
        hooks_dir.mkdir()
        (hooks_dir / "commit-msg").write_text("#!/bin/sh\nexisting-check")

        result = write_git_hooks_files(["commit-msg"], git_root)

        content = (hooks_dir / "commit-msg").read_text()
        assert result == {"commit-msg": "appended"}
        assert content == f"#!/bin/sh\nexisting-check\n{hook_invocation('commit-msg')}\n"
        assert os.access(hooks_dir / "commit-msg", os.X_OK)

    def test_is_idempotent(self, git_root):
        write_git_hooks_files(["pre-commit"], git_root)
        result = write_git_hooks_files(["pre-commit"], git_root)

        content = (git_root / ".git" / "hooks" / "pre-commit").read_text()
        assert result == {"pre-commit": "existing"}
        assert content.count(hook_invocation("pre-commit")) == 1

    def test_multiple_hook_types(self, git_root):
        result = write_git_hooks_files(["pre-commit", "pre-push"], git_root)
        assert result == {"pre-commit": "created", "pre-push": "created"}

    def test_requires_git_directory(self, tmp_path):
        with pytest.raises(InstallError, match="No .git directory"):
            write_git_hooks_files(["pre-commit"], tmp_path)

    def test_unknown_hook_type(self, git_root):
        with pytest.raises(InstallError, match="Unknown hook type 'pre-lunch'"):
            write_git_hooks_files(["pre-lunch"], git_root)


class TestWriteGitignoreFiles:
    """Tests for write_gitignore_files()."""

    def test_creates_gitignore(self, tmp_path):
        result = write_gitignore_files([tmp_path])

        assert result == {"added": [tmp_path], "existing": []}
        assert (tmp_path / ".gitignore").read_text() == f"{LOCAL_HOOKS_GITIGNORE_LINE}\n"

    def test_appends_when_line_is_absent(self, tmp_path):
        (tmp_path / ".gitignore").write_text("node_modules/")

        write_gitignore_files([tmp_path])

        assert (tmp_path / ".gitignore").read_text() == (
            f"node_modules/\n{LOCAL_HOOKS_GITIGNORE_LINE}\n"
        )

    def test_leaves_file_alone_when_line_is_present(self, tmp_path):
        original = f"dist/\n{LOCAL_HOOKS_GITIGNORE_LINE}\n"
        (tmp_path / ".gitignore").write_text(original)

        result = write_gitignore_files([tmp_path])

        assert result == {"added": [], "existing": [tmp_path]}
        assert (tmp_path / ".gitignore").read_text() == original

    def test_missing_package_directory(self, tmp_path):
        with pytest.raises(InstallError, match="Package directory not found"):
            write_gitignore_files([tmp_path / "missing"])
