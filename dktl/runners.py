"""Behat, PHPUnit and Cypress invocations."""

from __future__ import annotations

import typing as typ

from .environment import JUNIT_DIR, TestEnvironment
from .errors import MissingFileError
from .process import Command, CommandResult, CommandStack, run_command

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .context import ToolContext

BEHAT_CONFIG_FILES = ("behat.yml", "behat.docker.yml")
BEHAT_DOCKER_CONFIG = "behat.docker.yml"
PHPUNIT_CONFIG_DIR = "phpunit"
PHPUNIT_CONFIG_FILE = "phpunit/phpunit.xml"
CORE_SUITE = "dkan"
CUSTOM_SUITE = "custom"
CYPRESS_PACKAGE = "cypress"
CYPRESS_BASE_URL_ENV = "CYPRESS_baseUrl"


def ensure_files_exist(paths: cabc.Iterable[Path], label: str) -> None:
    """Raise MissingFileError for the first path that does not exist."""
    for path in paths:
        if not path.exists():
            raise MissingFileError(path, label)


def behat_command(directory: Path, suite: str, args: cabc.Sequence[str]) -> Command:
    """Return the behat command line for a suite in `directory`."""
    return Command(
        args=(
            str(directory / "bin" / "behat"),
            "--colors",
            f"--suite={suite}",
            "--format=pretty",
            "--out=std",
            "--format=junit",
            f"--out={JUNIT_DIR.as_posix()}",
            f"--config={BEHAT_DOCKER_CONFIG}",
            *args,
        ),
        cwd=directory,
    )


def phpunit_command(directory: Path, args: cabc.Sequence[str]) -> Command:
    """Return the phpunit command line for `directory`."""
    return Command(
        args=(
            str(directory / "bin" / "phpunit"),
            "--verbose",
            f"--configuration={PHPUNIT_CONFIG_DIR}",
            *args,
        ),
        cwd=directory,
    )


def run_behat(
    context: ToolContext,
    directory: Path,
    suite: str,
    args: cabc.Sequence[str] = (),
) -> CommandResult:
    """Run a behat suite after checking its configuration files."""
    ensure_files_exist(
        (directory / name for name in BEHAT_CONFIG_FILES),
        "Behat config file",
    )
    TestEnvironment(context).initialize()
    return run_command(behat_command(directory, suite, args))


def run_phpunit(
    context: ToolContext,
    directory: Path,
    args: cabc.Sequence[str] = (),
) -> CommandResult:
    """Run phpunit after checking its configuration file."""
    ensure_files_exist([directory / PHPUNIT_CONFIG_FILE], "PHPUnit config file")
    TestEnvironment(context).initialize()
    return run_command(phpunit_command(directory, args))


def run_behat_core(
    context: ToolContext, args: cabc.Sequence[str] = ()
) -> CommandResult:
    """Run the platform behat suite."""
    return run_behat(context, context.primary_test_dir, CORE_SUITE, args)


def run_behat_custom(
    context: ToolContext, args: cabc.Sequence[str] = ()
) -> CommandResult:
    """Run the project-specific behat suite."""
    return run_behat(context, context.secondary_test_dir, CUSTOM_SUITE, args)


def run_phpunit_core(
    context: ToolContext, args: cabc.Sequence[str] = ()
) -> CommandResult:
    """Run the platform phpunit tests."""
    return run_phpunit(context, context.primary_test_dir, args)


def run_phpunit_custom(
    context: ToolContext, args: cabc.Sequence[str] = ()
) -> CommandResult:
    """Run the project-specific phpunit tests."""
    return run_phpunit(context, context.secondary_test_dir, args)


def cypress_commands(
    context: ToolContext,
    base_url: str | None = None,
) -> list[Command]:
    """Return the install and run steps for cypress."""
    project = context.project_dir
    url = base_url or context.settings.cypress_base_url
    binary = project / "node_modules" / CYPRESS_PACKAGE / "bin" / CYPRESS_PACKAGE
    return [
        Command(
            args=(context.settings.npm, "install", CYPRESS_PACKAGE),
            cwd=project,
        ),
        Command(
            args=(str(binary), "run"),
            cwd=project,
            env={CYPRESS_BASE_URL_ENV: url},
        ),
    ]


def run_cypress(context: ToolContext, base_url: str | None = None) -> CommandResult:
    """Install cypress into the project and run it."""
    return CommandStack().extend(cypress_commands(context, base_url)).run()
