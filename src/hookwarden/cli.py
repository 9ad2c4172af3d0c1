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

"""hookwarden CLI - run per-package git hook steps."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from hookwarden import __version__
from hookwarden.config import (
    VALID_LOG_LEVELS,
    ConfigLoadError,
    ConfigValidationError,
    generate_config_template_string,
    get_config,
    get_global_config_path,
    get_project_config_path,
    load_hook_definitions,
)
from hookwarden.constants import HOOK_TYPES
from hookwarden.hooks import (
    HookDefinitionError,
    HookRunner,
    InvalidPatternError,
    StatusBus,
)
from hookwarden.install import InstallError, write_git_hooks_files, write_gitignore_files
from hookwarden.reporter import TerminalReporter

logger = logging.getLogger(__name__)

console = Console()

# Exit code for configuration faults, distinct from failing steps (1)
CONFIG_ERROR_EXIT_CODE = 2


def _configure_logging(level: str) -> None:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(getattr(logging, level.upper()))


def _read_staged_files(files: tuple[str, ...]) -> list[str]:
    """Changed files from the arguments, or from stdin (one per line)."""
    if files:
        return list(files)
    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        return []
    return [line.strip() for line in stdin if line.strip()]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: WARNING)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress per-step progress lines")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["json", "text"]),
    default=None,
    help="Output format: text (default) or json",
)
@click.option(
    "--root",
    envvar="HOOKWARDEN_ROOT",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Repository root (default: current directory)",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    quiet: bool,
    output_format: str | None,
    root: Path | None,
) -> None:
    """hookwarden - run per-package git hook steps.

    Steps are skipped when none of the package's changed files match
    their onlyOn pattern.
    """
    root_dir = (root or Path.cwd()).resolve()
    try:
        config = get_config(root_dir)
    except (ConfigLoadError, ConfigValidationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(CONFIG_ERROR_EXIT_CODE)

    _configure_logging(log_level or config.defaults.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["root_dir"] = root_dir
    ctx.obj["quiet"] = quiet or config.defaults.quiet
    ctx.obj["output_format"] = output_format or config.defaults.output_format


@main.command()
def version() -> None:
    """Show version."""
    console.print(f"hookwarden {__version__}")


@main.command()
@click.option(
    "--type", "-t", "hook_types",
    type=click.Choice(HOOK_TYPES),
    multiple=True,
    help="Hook type to install (repeatable, default: pre-commit)",
)
@click.option(
    "--package", "-p", "packages",
    type=click.Path(file_okay=False, path_type=Path),
    multiple=True,
    help="Package directory whose .gitignore should ignore local step files",
)
@click.pass_context
def init(ctx: click.Context, hook_types: tuple[str, ...], packages: tuple[Path, ...]) -> None:
    """Install git hooks calling hookwarden in the repository root."""
    root_dir = ctx.obj["root_dir"]
    try:
        hooks = write_git_hooks_files(hook_types or ("pre-commit",), root_dir)
        ignores = write_gitignore_files(root_dir / package for package in packages)
    except InstallError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    for hook_type, state in hooks.items():
        console.print(f"[green]OK:[/green] {hook_type} hook {state}")
    for package_path in ignores["added"]:
        console.print(f"[green]OK:[/green] .gitignore updated in {package_path}")
    for package_path in ignores["existing"]:
        console.print(f"[dim].gitignore already set up in {package_path}[/dim]")


@main.command()
@click.option("--type", "-t", "hook_type", type=click.Choice(HOOK_TYPES), required=True,
              help="Git hook being run")
@click.option("--args", "hook_arguments", default="", help="Arguments git passed to the hook")
@click.option(
    "--hooks", "hooks_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="YAML or JSON file with the package hook definitions",
)
@click.option("--sequential", is_flag=True, help="Run steps one at a time")
@click.option("--verbose", "-v", is_flag=True, help="Also print when each step starts")
@click.argument("files", nargs=-1)
@click.pass_context
def run(
    ctx: click.Context,
    hook_type: str,
    hook_arguments: str,
    hooks_file: Path,
    sequential: bool,
    verbose: bool,
    files: tuple[str, ...],
) -> None:
    """Run the steps of every package for a hook.

    FILES are the changed paths relative to the repository root. Without
    FILES they are read from stdin, one per line, e.g.

        git diff --cached --name-only | hookwarden run --type pre-commit --hooks hooks.yml
    """
    config = ctx.obj["config"]
    output_format = ctx.obj["output_format"]

    try:
        packages = load_hook_definitions(hooks_file)
    except (ConfigLoadError, HookDefinitionError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(CONFIG_ERROR_EXIT_CODE)

    staged_files = _read_staged_files(files)
    logger.debug(f"{len(staged_files)} changed file(s)")

    bus = StatusBus()
    runner = HookRunner(
        bus,
        parallel=config.run.parallel and not sequential,
        output_limit=config.run.output_limit,
    )
    reporter = TerminalReporter(console, verbose=verbose)
    if output_format == "text" and not ctx.obj["quiet"]:
        reporter.attach(bus)

    try:
        summary = runner.run_sync(
            packages,
            ctx.obj["root_dir"],
            hook_type,
            hook_arguments=hook_arguments,
            staged_files=staged_files,
        )
    except InvalidPatternError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(CONFIG_ERROR_EXIT_CODE)
    finally:
        reporter.detach()

    if output_format == "json":
        print(summary.to_json())
    else:
        reporter.print_failures(runner.failures)
        counts = summary.counts()
        parts = [f"{count} {status}" for status, count in sorted(counts.items())]
        if summary.success:
            console.print(f"[green]OK:[/green] {hook_type}: {', '.join(parts) or 'no steps'}")
        else:
            console.print(f"[red]Failed:[/red] {hook_type}: {', '.join(parts)}")

    if summary.exit_code:
        raise SystemExit(summary.exit_code)


@main.group()
def config() -> None:
    """Manage hookwarden configuration."""
    pass


@config.command("init")
@click.option("--global", "is_global", is_flag=True, help="Create global config at ~/.hookwarden_config.json")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config file")
@click.pass_context
def config_init(ctx: click.Context, is_global: bool, force: bool) -> None:
    """Write a commented config template."""
    if is_global:
        path = get_global_config_path()
    else:
        path = get_project_config_path(ctx.obj["root_dir"])

    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} already exists (use --force to overwrite)")
        raise SystemExit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_config_template_string())
    console.print(f"[green]Created config at[/green] {path}")


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the merged configuration as JSON."""
    print(json.dumps(ctx.obj["config"].to_dict(), indent=2))
