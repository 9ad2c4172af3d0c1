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

"""Tests for glob matching of changed files against package patterns."""

import pytest

from hookwarden.hooks.matcher import (
    PatternError,
    compile_pattern,
    match_files,
    package_prefix,
)


class TestCompilePattern:
    """Tests for glob syntax."""

    @pytest.mark.parametrize(
        "pattern,path,expected",
        [
            ("*.go", "main.go", True),
            ("*.go", "cmd/main.go", False),
            ("**/*.go", "cmd/main.go", True),
            ("**/*.go", "main.go", True),
            ("src/**", "src/a/b/c.txt", True),
            ("file?.txt", "file1.txt", True),
            ("file?.txt", "file10.txt", False),
            ("[ab].py", "a.py", True),
            ("[!ab].py", "a.py", False),
            ("[!ab].py", "c.py", True),
            ("[^ab].py", "a.py", False),
            ("[^ab].py", "c.py", True),
            ("*.{js,ts}", "index.ts", True),
            ("*.{js,ts}", "index.py", False),
            ("a+b.txt", "a+b.txt", True),
        ],
    )
    def test_glob_semantics(self, pattern, path, expected):
        assert bool(compile_pattern(pattern).match(path)) is expected

    @pytest.mark.parametrize("pattern", ["[abc", "*.py]", "{a,b", "a}", "", "   "])
    def test_invalid_patterns_raise(self, pattern):
        with pytest.raises(PatternError):
            compile_pattern(pattern)


class TestPackagePrefix:
    """Tests for resolving the package directory against the root."""

    def test_absolute_package_path(self, tmp_path):
        assert package_prefix(tmp_path / "packages" / "api", tmp_path) == "packages/api"

    def test_relative_package_path(self, tmp_path):
        assert package_prefix("packages/api", tmp_path) == "packages/api"

    def test_root_package(self, tmp_path):
        assert package_prefix(tmp_path, tmp_path) == ""

    def test_package_outside_root(self, tmp_path):
        assert package_prefix(tmp_path.parent / "elsewhere", tmp_path) is None


class TestMatchFiles:
    """Tests for match_files()."""

    def test_matches_only_files_under_package(self, repo):
        files = ["packages/api/main.go", "packages/web/main.go", "main.go"]
        matched = match_files("*.go", repo / "packages" / "api", files, repo)
        assert matched == ["packages/api/main.go"]

    def test_pattern_is_relative_to_package(self, repo):
        files = ["packages/api/cmd/server.go"]
        assert match_files("*.go", repo / "packages" / "api", files, repo) == []
        assert match_files("cmd/*.go", repo / "packages" / "api", files, repo) == files

    def test_no_match_returns_empty_list(self, repo):
        files = ["packages/api/README.md"]
        assert match_files("*.go", repo / "packages" / "api", files, repo) == []

    def test_package_prefix_is_not_a_string_prefix(self, repo):
        """packages/api must not match files of packages/api-gateway."""
        files = ["packages/api-gateway/main.go"]
        assert match_files("**/*.go", repo / "packages" / "api", files, repo) == []

    def test_normalizes_separators(self, repo):
        files = ["packages\\api\\main.go", "./packages/api/util.go"]
        matched = match_files("*.go", repo / "packages" / "api", files, repo)
        assert matched == files

    def test_root_package_matches_all_files(self, repo):
        files = ["main.go", "packages/api/main.go"]
        assert match_files("**/*.go", repo, files, repo) == files

    def test_ignores_empty_entries(self, repo):
        assert match_files("**", repo, ["", "a.txt"], repo) == ["a.txt"]

    def test_invalid_pattern_raises(self, repo):
        with pytest.raises(PatternError):
            match_files("[*.go", repo, ["main.go"], repo)
