"""External command execution primitives.

Every dktl operation ends in one or more external processes. Commands are
described by immutable `Command` values, executed through `run_command`, and
sequenced with `CommandStack`, which halts on the first failure and hands the
failing `CommandResult` back to the caller instead of raising.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import shlex
import subprocess
import typing as typ

from .errors import ExecutableNotFoundError, MissingFileError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Command:
    """An external process invocation."""

    args: tuple[str, ...]
    cwd: Path | None = None
    env: cabc.Mapping[str, str] | None = None
    capture: bool = False

    def render(self) -> str:
        """Return a shell-quoted rendering of the command line."""
        rendered = shlex.join(self.args)
        if self.env:
            assignments = " ".join(
                f"{key}={shlex.quote(value)}" for key, value in self.env.items()
            )
            rendered = f"{assignments} {rendered}"
        return rendered


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Outcome of an external process."""

    command: Command | None
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return True when the process exited successfully."""
        return self.exit_code == 0

    @property
    def message(self) -> str:
        """Return the captured standard output without surrounding whitespace."""
        return self.stdout.strip()


def _environment(overrides: cabc.Mapping[str, str] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    env = dict(os.environ)
    env.update(overrides)
    return env


def run_command(command: Command) -> CommandResult:
    """Run a command to completion and return its result."""
    if command.cwd is not None and not command.cwd.is_dir():
        raise MissingFileError(command.cwd, "Working directory")
    _logger.info(
        "running: %s (cwd=%s)",
        command.render(),
        command.cwd if command.cwd is not None else os.getcwd(),
    )
    try:
        completed = subprocess.run(  # noqa: S603
            list(command.args),
            cwd=command.cwd,
            env=_environment(command.env),
            check=False,
            capture_output=command.capture,
            text=True,
        )
    except FileNotFoundError as error:
        raise ExecutableNotFoundError(command.args[0]) from error
    return CommandResult(
        command=command,
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


class CommandStack:
    """Ordered list of commands executed one after another."""

    def __init__(
        self,
        *,
        runner: typ.Callable[[Command], CommandResult] | None = None,
    ) -> None:
        """Create an empty stack."""
        self._runner = runner or run_command
        self._commands: list[Command] = []

    @property
    def commands(self) -> tuple[Command, ...]:
        """Return the queued commands in execution order."""
        return tuple(self._commands)

    def add(self, command: Command) -> CommandStack:
        """Queue a command and return the stack for chaining."""
        self._commands.append(command)
        return self

    def extend(self, commands: cabc.Iterable[Command]) -> CommandStack:
        """Queue several commands in order."""
        self._commands.extend(commands)
        return self

    def run(self) -> CommandResult:
        """Execute the queued commands in order and return the aggregate result.

        The first failing result is returned immediately and the remaining
        commands are skipped. A fully successful run reports the last command.
        """
        result = CommandResult(command=None, exit_code=0)
        for command in self._commands:
            result = self._runner(command)
            if not result.ok:
                _logger.info("failed: %s (exit %d)", command.args[0], result.exit_code)
                return result
            _logger.info("completed: %s", command.args[0])
        return result
