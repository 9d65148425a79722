"""Creation of QA fixture users through drush."""

from __future__ import annotations

import dataclasses
import logging
import typing as typ

from .errors import DrushCommandError, WorkflowNotEnabledError
from .process import Command, CommandResult, CommandStack, run_command

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .context import ToolContext

_logger = logging.getLogger(__name__)

WORKFLOW_MODULE = "dkan_workflow_permissions"
MAIL_DOMAIN = "example.com"

BASE_USERS: dict[str, tuple[str, ...]] = {
    "sitemanager": ("site manager",),
    "editor": ("editor",),
    "creator": ("content creator",),
}
WORKFLOW_USERS: dict[str, tuple[str, ...]] = {
    "contributor": ("content creator", "Workflow Contributor"),
    "moderator": ("editor", "Workflow Moderator"),
    "supervisor": ("site manager", "Workflow Supervisor"),
}


@dataclasses.dataclass(frozen=True, slots=True)
class UserSpec:
    """A QA user and the roles assigned to it, base role first."""

    name: str
    roles: tuple[str, ...]


class RoleManager(typ.Protocol):
    """Collaborator able to create CMS users and grant roles."""

    def has_workflow(self) -> bool:
        """Return True when the workflow permissions module is enabled."""
        ...

    def create_user(self, name: str) -> Command:
        """Return the command creating `name`."""
        ...

    def assign_role(self, name: str, role: str) -> Command:
        """Return the command granting `role` to `name`."""
        ...


class DrushRoleManager:
    """RoleManager backed by the drush command-line tool."""

    def __init__(
        self,
        docroot: Path,
        drush: str = "drush",
        runner: typ.Callable[[Command], CommandResult] = run_command,
    ) -> None:
        """Bind the manager to a Drupal docroot."""
        self.docroot = docroot
        self.drush = drush
        self._run = runner

    def has_workflow(self) -> bool:
        """Ask drush whether the workflow permissions module is enabled."""
        result = self._run(
            Command(
                args=(
                    self.drush,
                    "php-eval",
                    f'echo module_exists("{WORKFLOW_MODULE}");',
                ),
                cwd=self.docroot,
                capture=True,
            )
        )
        if not result.ok:
            raise DrushCommandError
        return result.message not in {"", "0"}

    def create_user(self, name: str) -> Command:
        """Return the drush user-create command; the password is the name."""
        return Command(
            args=(
                self.drush,
                "ucrt",
                name,
                f"--mail={name}@{MAIL_DOMAIN}",
                f"--password={name}",
            ),
            cwd=self.docroot,
        )

    def assign_role(self, name: str, role: str) -> Command:
        """Return the drush user-add-role command."""
        return Command(
            args=(self.drush, "urol", role, f"--name={name}"),
            cwd=self.docroot,
        )


def plan_users(manager: RoleManager, *, workflow: bool = False) -> list[UserSpec]:
    """Return the users to create, checking the workflow module when asked."""
    users = dict(BASE_USERS)
    if workflow:
        if not manager.has_workflow():
            raise WorkflowNotEnabledError
        users |= WORKFLOW_USERS
    return [UserSpec(name=name, roles=roles) for name, roles in users.items()]


def user_commands(
    manager: RoleManager,
    users: cabc.Iterable[UserSpec],
) -> list[Command]:
    """Return the create and role commands for each user, in order."""
    commands: list[Command] = []
    for user in users:
        commands.append(manager.create_user(user.name))
        commands.extend(manager.assign_role(user.name, role) for role in user.roles)
    return commands


def create_qa_users(
    context: ToolContext,
    *,
    workflow: bool = False,
    manager: RoleManager | None = None,
) -> CommandResult:
    """Create the QA users, stopping at the first failing drush call."""
    role_manager = manager or DrushRoleManager(
        context.docroot, drush=context.settings.drush
    )
    users = plan_users(role_manager, workflow=workflow)
    _logger.info("Creating QA users: %s", ", ".join(user.name for user in users))
    return CommandStack().extend(user_commands(role_manager, users)).run()
