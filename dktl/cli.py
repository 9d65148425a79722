"""Command line entry points for the dktl tooling."""

from __future__ import annotations

import logging
import os
import sys
import typing as typ

from cyclopts import App, Parameter

from . import __version__
from .context import ToolContext, resolve_context
from .environment import TestEnvironment
from .errors import DktlError
from .lint import lint as run_lint
from .lint import lint_fix as run_lint_fix
from .lint import phpcbf as run_phpcbf
from .lint import phpcs as run_phpcs
from .qa_users import create_qa_users
from .runners import (
    run_behat_core,
    run_behat_custom,
    run_cypress,
    run_phpunit_core,
    run_phpunit_custom,
)

LOG_LEVEL_ENV = "DKTL_LOG_LEVEL"

app = App(name="dktl", version=__version__)


def _configure_logging() -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def _context() -> ToolContext:
    return resolve_context()


@app.command(name="test:init")
def test_init() -> int:
    """Install test dependencies and create the test output directories.

    Usually this does not need to be run on its own: every behat and phpunit
    command runs it first.
    """
    result = TestEnvironment(_context()).initialize()
    return result.exit_code if result is not None else 0


@app.command(name="test:behat")
def test_behat(*behat_args: str) -> int:
    """Run the DKAN core behat suite.

    Extra behat options follow `--`, for example
    `dktl test:behat -- --name="Datastore API"`.
    """
    return run_behat_core(_context(), behat_args).exit_code


@app.command(name="test:behat-custom")
def test_behat_custom(*behat_args: str) -> int:
    """Run the project's custom behat suite."""
    return run_behat_custom(_context(), behat_args).exit_code


@app.command(name="test:phpunit")
def test_phpunit(*phpunit_args: str) -> int:
    """Run the DKAN core phpunit tests.

    For example `dktl test:phpunit -- --testsuite="DKAN Harvest Test Suite"`.
    """
    return run_phpunit_core(_context(), phpunit_args).exit_code


@app.command(name="test:phpunit-custom")
def test_phpunit_custom(*phpunit_args: str) -> int:
    """Run the project's custom phpunit tests."""
    return run_phpunit_custom(_context(), phpunit_args).exit_code


@app.command(name="test:cypress")
def test_cypress(*, base_url: str | None = None) -> int:
    """Install cypress in the project and run it against the web container."""
    return run_cypress(_context(), base_url=base_url).exit_code


@app.command(name="lint")
def lint(*paths: str) -> int:
    """Lint project paths with the Drupal coding standards."""
    return run_lint(_context(), paths).exit_code


@app.command(name="lint:fix")
def lint_fix(*paths: str) -> int:
    """Fix coding standard violations in project paths."""
    return run_lint_fix(_context(), paths).exit_code


@app.command()
def phpcs(*phpcs_args: str) -> int:
    """Proxy to phpcs with the Drupal coder rules registered."""
    return run_phpcs(_context(), phpcs_args).exit_code


@app.command()
def phpcbf(*phpcbf_args: str) -> int:
    """Proxy to phpcbf."""
    return run_phpcbf(_context(), phpcbf_args).exit_code


@app.command(name="test:qa-users")
def test_qa_users(
    *,
    workflow: typ.Annotated[bool, Parameter(name=["--workflow", "-w"])] = False,
) -> int:
    """Create QA users for each basic DKAN role.

    Creates sitemanager, editor and creator, each with the matching role and a
    password equal to the username. With --workflow, contributor, moderator
    and supervisor are added with their workflow roles.
    """
    return create_qa_users(_context(), workflow=workflow).exit_code


def main(argv: list[str] | tuple[str, ...] | None = None) -> int:
    """Entry point for the dktl CLI."""
    _configure_logging()
    try:
        result = app(argv)
    except DktlError as error:
        print(f"dktl: {error}")
        return 1
    return int(result or 0)


if __name__ == "__main__":
    raise SystemExit(main())
