"""Preparation of the test directories used by behat and phpunit."""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

from .errors import TestEnvironmentError
from .process import Command, CommandResult, run_command

if typ.TYPE_CHECKING:
    from .context import ToolContext

_logger = logging.getLogger(__name__)

DEPENDENCY_MARKER = "vendor"
JUNIT_DIR = Path("assets", "junit")
LINKED_BINARIES = ("behat", "phpunit")


def _relative_target(target: Path, link: Path) -> Path:
    return Path(os.path.relpath(target, link.parent))


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise TestEnvironmentError(path, error.strerror or str(error)) from error


class TestEnvironment:
    """Install dependencies, output directories and links for test runs."""

    __test__ = False

    def __init__(
        self,
        context: ToolContext,
        runner: typ.Callable[[Command], CommandResult] = run_command,
    ) -> None:
        """Bind the environment to a project context."""
        self.context = context
        self._run = runner

    def install_dependencies(self, directory: Path) -> CommandResult | None:
        """Run `composer install` unless the vendor directory is present."""
        if (directory / DEPENDENCY_MARKER).exists():
            return None
        _logger.info("Installing test dependencies in %s", directory)
        result = self._run(
            Command(
                args=(
                    self.context.settings.composer,
                    "install",
                    "--prefer-source",
                    "--no-interaction",
                ),
                cwd=directory,
            )
        )
        if not result.ok:
            _logger.warning(
                "composer install failed in %s (exit %d)",
                directory,
                result.exit_code,
            )
        return result

    def init_test_dirs(self, directory: Path) -> bool:
        """Create the junit output tree; return True if it was missing."""
        output = directory / JUNIT_DIR
        if output.is_dir():
            return False
        _logger.info("Creating test subdirectories in %s", directory)
        _make_dirs(output)
        return True

    def link(self, source_dir: Path, dest_dir: Path) -> list[Path]:
        """Point the binaries and vendor dir of `dest_dir` at `source_dir`.

        Links are relative so the project tree can be mounted elsewhere. A
        correct link is left alone, a stale one is replaced, and a real file
        or directory in the way is reported and kept.
        """
        _logger.info("Linking test environment %s to %s", dest_dir, source_dir)
        _make_dirs(dest_dir / "bin")
        pairs = [
            (source_dir / "bin" / name, dest_dir / "bin" / name)
            for name in LINKED_BINARIES
        ]
        pairs.append((source_dir / DEPENDENCY_MARKER, dest_dir / DEPENDENCY_MARKER))

        changed: list[Path] = []
        for target, link in pairs:
            if self._ensure_link(target, link):
                changed.append(link)
        return changed

    def _ensure_link(self, target: Path, link: Path) -> bool:
        relative = _relative_target(target, link)
        try:
            if link.is_symlink():
                if Path(os.readlink(link)) == relative:
                    return False
                link.unlink()
            elif link.exists():
                _logger.warning(
                    "%s exists and is not a link; leaving it in place", link
                )
                return False
            link.symlink_to(relative, target_is_directory=target.is_dir())
        except OSError as error:
            raise TestEnvironmentError(link, error.strerror or str(error)) from error
        return True

    def initialize(self) -> CommandResult | None:
        """Prepare the platform test dir and link the project one to it."""
        primary = self.context.primary_test_dir
        secondary = self.context.secondary_test_dir
        result = self.install_dependencies(primary)
        self.init_test_dirs(primary)
        if secondary.is_dir():
            self.init_test_dirs(secondary)
            self.link(primary, secondary)
        return result
