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

"""Configuration system for hookwarden.

Provides hierarchical configuration with precedence:
1. CLI flags (highest)
2. Environment variables
3. Project config (<root>/.hookwarden/config.json)
4. Global config (~/.hookwarden_config.json)
5. Hardcoded defaults (lowest)

Hook definitions (the steps of each package) are not part of this
configuration; they are handed over explicitly, see ``load_hook_definitions``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from hookwarden.constants import DEFAULT_OUTPUT_LIMIT, HOOKWARDEN_DIR_NAME
from hookwarden.hooks.base import HookDefinitionError, PackageHook

logger = logging.getLogger(__name__)

# Valid values for enums
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_OUTPUT_FORMATS = ("json", "text")

# Hardcoded defaults
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_OUTPUT_FORMAT = "text"

# Environment variable names
ENV_LOG_LEVEL = "HOOKWARDEN_LOG_LEVEL"
ENV_OUTPUT_FORMAT = "HOOKWARDEN_OUTPUT_FORMAT"
ENV_QUIET = "HOOKWARDEN_QUIET"
ENV_PARALLEL = "HOOKWARDEN_PARALLEL"
ENV_OUTPUT_LIMIT = "HOOKWARDEN_OUTPUT_LIMIT"

TRUE_VALUES = ("true", "1", "yes")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigLoadError(Exception):
    """Raised when configuration file cannot be loaded."""

    pass


def _check_unknown(cls: type, data: dict[str, Any], section: str) -> None:
    known_fields = {f.name for f in fields(cls)}
    unknown = set(data.keys()) - known_fields
    if unknown:
        raise ConfigValidationError(
            f"Unknown fields in {section} config: {', '.join(sorted(unknown))}"
        )


@dataclass
class DefaultsConfig:
    """Output and logging defaults."""

    log_level: str = DEFAULT_LOG_LEVEL
    output_format: str = DEFAULT_OUTPUT_FORMAT
    quiet: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log_level '{self.log_level}'. "
                f"Valid values: {', '.join(VALID_LOG_LEVELS)}"
            )
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"Invalid output_format '{self.output_format}'. "
                f"Valid values: {', '.join(VALID_OUTPUT_FORMATS)}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "log_level": self.log_level,
            "output_format": self.output_format,
            "quiet": self.quiet,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "DefaultsConfig":
        """Create from dictionary."""
        if strict:
            _check_unknown(cls, data, "defaults")

        return cls(
            log_level=data.get("log_level", DEFAULT_LOG_LEVEL),
            output_format=data.get("output_format", DEFAULT_OUTPUT_FORMAT),
            quiet=data.get("quiet", False),
        )


@dataclass
class RunConfig:
    """Step execution settings."""

    parallel: bool = True
    output_limit: int = DEFAULT_OUTPUT_LIMIT

    def validate(self) -> None:
        """Validate run settings."""
        if self.output_limit <= 0:
            raise ConfigValidationError(
                f"output_limit must be positive, got {self.output_limit}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"parallel": self.parallel, "output_limit": self.output_limit}

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "RunConfig":
        """Create from dictionary."""
        if strict:
            _check_unknown(cls, data, "run")

        return cls(
            parallel=data.get("parallel", True),
            output_limit=data.get("output_limit", DEFAULT_OUTPUT_LIMIT),
        )


@dataclass
class HookwardenConfig:
    """Main configuration container."""

    version: str = "1"
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    run: RunConfig = field(default_factory=RunConfig)

    def validate(self) -> None:
        """Validate entire configuration."""
        self.defaults.validate()
        self.run.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "defaults": self.defaults.to_dict(),
            "run": self.run.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "HookwardenConfig":
        """Create from dictionary."""
        if strict:
            unknown = set(data.keys()) - {"version", "defaults", "run"}
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in config: {', '.join(sorted(unknown))}"
                )

        return cls(
            version=data.get("version", "1"),
            defaults=DefaultsConfig.from_dict(data.get("defaults", {}), strict),
            run=RunConfig.from_dict(data.get("run", {}), strict),
        )


def get_global_config_path() -> Path:
    """Get path to global config file."""
    return Path.home() / ".hookwarden_config.json"


def get_project_config_path(root_dir: Path) -> Path:
    """Get path to project config file."""
    return root_dir / HOOKWARDEN_DIR_NAME / "config.json"


def load_config_file(path: Path, strict: bool = False) -> HookwardenConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file
        strict: If True, fail on unknown fields

    Returns:
        HookwardenConfig instance; defaults if the file does not exist

    Raises:
        ConfigLoadError: If file cannot be read or parsed
        ConfigValidationError: If strict=True and unknown fields found
    """
    if not path.exists():
        return HookwardenConfig()

    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigLoadError(f"Error reading {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config in {path} must be a JSON object")

    return HookwardenConfig.from_dict(data, strict=strict)


def merge_configs(*configs: HookwardenConfig) -> HookwardenConfig:
    """Merge multiple configs with later configs taking precedence.

    Only values that differ from the hardcoded defaults override earlier
    values, so partial configs layer properly.

    Args:
        *configs: Configs to merge (first is base, last has highest priority)

    Returns:
        Merged HookwardenConfig
    """
    if not configs:
        return HookwardenConfig()

    result = copy.deepcopy(configs[0])
    default = HookwardenConfig()

    for config in configs[1:]:
        if config.defaults.log_level != default.defaults.log_level:
            result.defaults.log_level = config.defaults.log_level
        if config.defaults.output_format != default.defaults.output_format:
            result.defaults.output_format = config.defaults.output_format
        if config.defaults.quiet:
            result.defaults.quiet = config.defaults.quiet

        if config.run.parallel != default.run.parallel:
            result.run.parallel = config.run.parallel
        if config.run.output_limit != default.run.output_limit:
            result.run.output_limit = config.run.output_limit

    return result


def apply_env_overrides(config: HookwardenConfig) -> HookwardenConfig:
    """Apply environment variable overrides to config.

    Args:
        config: Base configuration

    Returns:
        New config with env var overrides applied

    Raises:
        ConfigValidationError: If env var value is invalid
    """
    result = copy.deepcopy(config)

    if log_level := os.environ.get(ENV_LOG_LEVEL):
        result.defaults.log_level = log_level.upper()

    if output_format := os.environ.get(ENV_OUTPUT_FORMAT):
        result.defaults.output_format = output_format

    if quiet := os.environ.get(ENV_QUIET):
        result.defaults.quiet = quiet.lower() in TRUE_VALUES

    if parallel := os.environ.get(ENV_PARALLEL):
        result.run.parallel = parallel.lower() in TRUE_VALUES

    if output_limit_str := os.environ.get(ENV_OUTPUT_LIMIT):
        try:
            result.run.output_limit = int(output_limit_str)
        except ValueError:
            raise ConfigValidationError(
                f"{ENV_OUTPUT_LIMIT} must be an integer, got '{output_limit_str}'"
            )

    return result


def get_config(root_dir: Path | None = None) -> HookwardenConfig:
    """Load and merge configuration from all sources.

    Loads in order (later sources override earlier):
    1. Hardcoded defaults
    2. Global config (~/.hookwarden_config.json)
    3. Project config (<root>/.hookwarden/config.json)
    4. Environment variables

    Args:
        root_dir: Repository root (for project config)

    Returns:
        Merged, validated configuration
    """
    base_config = HookwardenConfig()
    global_config = load_config_file(get_global_config_path())

    project_config = HookwardenConfig()
    if root_dir is not None:
        project_config = load_config_file(get_project_config_path(root_dir))

    merged = apply_env_overrides(merge_configs(base_config, global_config, project_config))
    merged.validate()
    return merged


def load_hook_definitions(path: Path) -> list[PackageHook]:
    """Load package hook definitions from a YAML or JSON file.

    The file holds either a list of package definitions or a mapping with a
    ``packages`` list; see ``PackageHook.from_dict`` for each entry.

    Raises:
        ConfigLoadError: If the file cannot be read or parsed.
        HookDefinitionError: If a definition is invalid or two packages
            share a name.
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigLoadError(f"Error reading {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid hook definitions in {path}: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("packages", [])
    if not isinstance(data, list):
        raise HookDefinitionError(f"Hook definitions in {path} must be a list of packages")

    packages = [PackageHook.from_dict(entry) for entry in data]

    seen: set[str] = set()
    for package in packages:
        if package.name in seen:
            raise HookDefinitionError(
                f"Hook definitions in {path}: duplicate package name '{package.name}'"
            )
        seen.add(package.name)

    logger.debug(f"Loaded {len(packages)} package hook(s) from {path}")
    return packages


def generate_config_template() -> dict[str, Any]:
    """Generate a config template dictionary.

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "version": "1",
        "_comment_version": "Config file format version",
        "defaults": {
            "log_level": DEFAULT_LOG_LEVEL,
            "_comment_log_level": f"Log level. Valid: {', '.join(VALID_LOG_LEVELS)}",
            "output_format": DEFAULT_OUTPUT_FORMAT,
            "_comment_output_format": f"Output format. Valid: {', '.join(VALID_OUTPUT_FORMATS)}",
            "quiet": False,
            "_comment_quiet": "Suppress per-step progress lines",
        },
        "run": {
            "parallel": True,
            "_comment_parallel": "Run the steps of a hook concurrently",
            "output_limit": DEFAULT_OUTPUT_LIMIT,
            "_comment_output_limit": "Characters of output kept per stream and step",
        },
    }


def generate_config_template_string() -> str:
    """Generate a config template as a formatted JSON string."""
    return json.dumps(generate_config_template(), indent=2)
