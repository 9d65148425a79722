"""Shared exception types for the dktl CLI."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

ERROR_MISSING_FILE = "{label} {path} is missing."
ERROR_PROJECT_NOT_FOUND = (
    "No dktl.yml found in {start} or any parent directory; "
    "set DKTL_PROJECT_DIRECTORY or run dktl inside a project."
)
ERROR_EXECUTABLE_NOT_FOUND = "Executable {binary!r} was not found."
ERROR_INVALID_SETTINGS = "Invalid settings in {path}: {detail}"
ERROR_TEST_ENVIRONMENT = "Cannot prepare test environment at {path}: {detail}"
ERROR_DRUSH_FAILED = "Drush command failed; aborting."
ERROR_WORKFLOW_NOT_ENABLED = (
    "Workflow QA users requested, but dkan_workflow_permissions is not enabled."
)


class DktlError(RuntimeError):
    """Base error for dktl CLI operations."""


class MissingFileError(DktlError):
    """Raised when a required configuration file is absent."""

    def __init__(self, path: Path, label: str = "Required file") -> None:
        """Record the missing path in the error message."""
        super().__init__(ERROR_MISSING_FILE.format(label=label, path=path))
        self.path = path


class ProjectNotFoundError(DktlError):
    """Raised when the project directory cannot be discovered."""

    def __init__(self, start: Path) -> None:
        """Describe where the search started."""
        super().__init__(ERROR_PROJECT_NOT_FOUND.format(start=start))


class ExecutableNotFoundError(DktlError):
    """Raised when an external binary cannot be executed."""

    def __init__(self, binary: str) -> None:
        """Name the binary that could not be started."""
        super().__init__(ERROR_EXECUTABLE_NOT_FOUND.format(binary=binary))
        self.binary = binary


class SettingsError(DktlError):
    """Raised when the project settings file cannot be used."""

    def __init__(self, path: Path, detail: str) -> None:
        """Initialise the error with the offending file and the reason."""
        super().__init__(ERROR_INVALID_SETTINGS.format(path=path, detail=detail))


class TestEnvironmentError(DktlError):
    """Raised when test directories or links cannot be created."""

    __test__ = False

    def __init__(self, path: Path, detail: str) -> None:
        """Name the path that could not be prepared and the OS reason."""
        super().__init__(ERROR_TEST_ENVIRONMENT.format(path=path, detail=detail))
        self.path = path


class DrushCommandError(DktlError):
    """Raised when a drush query command itself fails."""

    def __init__(self) -> None:
        """Initialise the error message."""
        super().__init__(ERROR_DRUSH_FAILED)


class WorkflowNotEnabledError(DktlError):
    """Raised when workflow users are requested without the workflow module."""

    def __init__(self) -> None:
        """Initialise the error message."""
        super().__init__(ERROR_WORKFLOW_NOT_ENABLED)
