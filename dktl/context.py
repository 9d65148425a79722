"""Project and tool directory discovery for dktl commands."""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ProjectNotFoundError, SettingsError

PROJECT_DIR_ENV = "DKTL_PROJECT_DIRECTORY"
TOOL_DIR_ENV = "DKTL_DIRECTORY"
SETTINGS_FILENAME = "dktl.yml"
SETTINGS_SECTION = "test"

DOCROOT_DIRNAME = "docroot"
PRIMARY_TEST_DIR = Path("dkan", "test")
SECONDARY_TEST_DIR = Path("src", "test")
CODER_SNIFFER_DIR = Path("vendor", "drupal", "coder", "coder_sniffer")

DEFAULT_CYPRESS_BASE_URL = "http://web"

_yaml = YAML(typ="safe")


@dataclasses.dataclass(frozen=True, slots=True)
class Settings:
    """Optional per-project overrides read from `dktl.yml`."""

    cypress_base_url: str = DEFAULT_CYPRESS_BASE_URL
    composer: str = "composer"
    npm: str = "npm"
    drush: str = "drush"


@dataclasses.dataclass(frozen=True, slots=True)
class ToolContext:
    """Directories every dktl command works relative to."""

    project_dir: Path
    tool_dir: Path
    settings: Settings = dataclasses.field(default_factory=Settings)

    @property
    def docroot(self) -> Path:
        """Return the Drupal docroot used as drush working directory."""
        return self.project_dir / DOCROOT_DIRNAME

    @property
    def primary_test_dir(self) -> Path:
        """Return the platform test directory holding the real install."""
        return self.project_dir / PRIMARY_TEST_DIR

    @property
    def secondary_test_dir(self) -> Path:
        """Return the project-specific test directory."""
        return self.project_dir / SECONDARY_TEST_DIR

    @property
    def coder_sniffer_dir(self) -> Path:
        """Return the directory carrying the Drupal coding standards."""
        return self.tool_dir / CODER_SNIFFER_DIR

    def vendor_bin(self, name: str) -> Path:
        """Return the path of a binary installed in the tool's vendor dir."""
        return self.tool_dir / "vendor" / "bin" / name


def default_tool_dir() -> Path:
    """Return the directory dktl itself is installed in."""
    return Path(__file__).resolve().parents[1]


def find_project_dir(start: Path) -> Path:
    """Walk up from `start` to the first directory containing `dktl.yml`."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / SETTINGS_FILENAME).is_file():
            return candidate
    raise ProjectNotFoundError(start)


def load_settings(project_dir: Path) -> Settings:
    """Read the `test` section of the project's settings file."""
    path = project_dir / SETTINGS_FILENAME
    if not path.is_file():
        return Settings()
    try:
        with path.open("r", encoding="utf-8") as handle:
            document = _yaml.load(handle) or {}
    except YAMLError as error:
        raise SettingsError(path, str(error)) from error
    if not isinstance(document, dict):
        raise SettingsError(path, "expected a mapping at the top level")

    section = document.get(SETTINGS_SECTION) or {}
    if not isinstance(section, dict):
        raise SettingsError(path, f"{SETTINGS_SECTION!r} must be a mapping")

    known = {field.name for field in dataclasses.fields(Settings)}
    values = {
        key: str(value)
        for key, value in section.items()
        if key in known and value is not None
    }
    return Settings(**values)


def resolve_context(
    *,
    cwd: Path | None = None,
    env: typ.Mapping[str, str] | None = None,
) -> ToolContext:
    """Build the tool context from the environment and working directory."""
    source = env if env is not None else os.environ
    if explicit := source.get(PROJECT_DIR_ENV):
        project_dir = Path(explicit).expanduser().resolve()
    else:
        project_dir = find_project_dir(cwd or Path.cwd())

    if tool := source.get(TOOL_DIR_ENV):
        tool_dir = Path(tool).expanduser().resolve()
    else:
        tool_dir = default_tool_dir()

    return ToolContext(
        project_dir=project_dir,
        tool_dir=tool_dir,
        settings=load_settings(project_dir),
    )
