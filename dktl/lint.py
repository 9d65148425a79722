"""PHP_CodeSniffer proxies preconfigured with the Drupal coding standards."""

from __future__ import annotations

import typing as typ

from .process import Command, CommandResult, CommandStack

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .context import ToolContext

STANDARDS = ("Drupal", "DrupalPractice")
EXTENSIONS = ("php", "module", "inc", "install", "test", "profile", "theme", "info")
PHPCS = "phpcs"
PHPCBF = "phpcbf"


def register_rules_command(context: ToolContext) -> Command:
    """Return the phpcs call that registers the coder sniffer rules."""
    return Command(
        args=(
            str(context.vendor_bin(PHPCS)),
            "--config-set",
            "installed_paths",
            str(context.coder_sniffer_dir),
        )
    )


def standard_args() -> tuple[str, ...]:
    """Return the rule-set and extension filter shared by lint and fix."""
    return (
        f"--standard={','.join(STANDARDS)}",
        f"--extensions={','.join(EXTENSIONS)}",
    )


def _project_paths(context: ToolContext, paths: cabc.Iterable[str]) -> list[str]:
    return [str(context.project_dir / path) for path in paths]


def lint_command(context: ToolContext, paths: cabc.Iterable[str]) -> Command:
    """Return the phpcs command for project-relative paths."""
    return Command(
        args=(
            str(context.vendor_bin(PHPCS)),
            *standard_args(),
            *_project_paths(context, paths),
        )
    )


def lint_fix_command(context: ToolContext, paths: cabc.Iterable[str]) -> Command:
    """Return the phpcbf command for project-relative paths."""
    return Command(
        args=(
            str(context.vendor_bin(PHPCBF)),
            *standard_args(),
            *_project_paths(context, paths),
        )
    )


def lint(context: ToolContext, paths: cabc.Sequence[str]) -> CommandResult:
    """Register the coder rules and lint the given project paths."""
    stack = CommandStack()
    stack.add(register_rules_command(context)).add(lint_command(context, paths))
    return stack.run()


def lint_fix(context: ToolContext, paths: cabc.Sequence[str]) -> CommandResult:
    """Register the coder rules and auto-fix the given project paths."""
    stack = CommandStack()
    stack.add(register_rules_command(context)).add(lint_fix_command(context, paths))
    return stack.run()


def phpcs(context: ToolContext, args: cabc.Sequence[str]) -> CommandResult:
    """Proxy arbitrary arguments to phpcs."""
    stack = CommandStack().add(register_rules_command(context))
    stack.add(Command(args=(str(context.vendor_bin(PHPCS)), *args)))
    return stack.run()


def phpcbf(context: ToolContext, args: cabc.Sequence[str]) -> CommandResult:
    """Proxy arbitrary arguments to phpcbf."""
    command = Command(args=(str(context.vendor_bin(PHPCBF)), *args))
    return CommandStack().add(command).run()
