"""Shared fixtures and steps for behaviour-driven CLI tests."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, then, when

from tests.helpers.fake_tools import FakeToolbox


@dataclasses.dataclass
class RunResult:
    """Record CLI invocation results."""

    stdout: str
    stderr: str
    returncode: int


@pytest.fixture
def cli_invocation() -> dict[str, RunResult]:
    """Collect the result of running the CLI within a scenario."""
    return {}


@pytest.fixture
def toolbox(tmp_path: Path) -> FakeToolbox:
    """Provide an empty project, tool dir and fake binary directory."""
    project = tmp_path / "project"
    project.mkdir()
    return FakeToolbox(
        project=project,
        tool_dir=tmp_path / "dktl",
        bin_dir=tmp_path / "fakebin",
        log=tmp_path / "invocations.log",
    )


def _platform_dir(toolbox: FakeToolbox) -> Path:
    return toolbox.project / "dkan" / "test"


@given("a DKAN project without test dependencies")
def given_fresh_project(toolbox: FakeToolbox) -> None:
    """Seed the platform test config and a composer that creates vendor/."""
    test_dir = _platform_dir(toolbox)
    (test_dir / "phpunit").mkdir(parents=True)
    for name in ("behat.yml", "behat.docker.yml"):
        (test_dir / name).write_text("default: {}\n", encoding="utf-8")
    (test_dir / "phpunit" / "phpunit.xml").write_text("<phpunit/>\n", encoding="utf-8")
    (toolbox.project / "docroot").mkdir()
    (toolbox.project / "dktl.yml").write_text("test: {}\n", encoding="utf-8")
    toolbox.write("composer", body="mkdir -p vendor")
    toolbox.write("behat", directory=test_dir / "bin")
    toolbox.write("phpunit", directory=test_dir / "bin")


@given("a DKAN project with test dependencies installed")
def given_installed_project(toolbox: FakeToolbox) -> None:
    """Seed a project whose platform test dir already has vendor/."""
    given_fresh_project(toolbox)
    (_platform_dir(toolbox) / "vendor").mkdir()


@when(parsers.cfparse('I run dktl "{command_line}"'))
def when_run_dktl(
    toolbox: FakeToolbox,
    cli_invocation: dict[str, RunResult],
    command_line: str,
) -> None:
    """Execute the CLI as a subprocess."""
    completed = toolbox.run_cli(command_line)
    cli_invocation["result"] = RunResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


@then("the command succeeds")
def then_command_succeeds(cli_invocation: dict[str, RunResult]) -> None:
    """Assert the CLI exited cleanly."""
    result = cli_invocation["result"]
    assert result.returncode == 0, result.stderr or result.stdout


@then(parsers.cfparse("the command exits with status {status:d}"))
def then_command_exits_with(
    cli_invocation: dict[str, RunResult],
    status: int,
) -> None:
    """Assert the CLI propagated the expected exit code."""
    result = cli_invocation["result"]
    assert result.returncode == status, result.stderr or result.stdout


@then(parsers.cfparse('the output mentions "{text}"'))
def then_output_mentions(cli_invocation: dict[str, RunResult], text: str) -> None:
    """Assert the CLI reported the given text."""
    result = cli_invocation["result"]
    assert text in result.stdout + result.stderr


@then(parsers.cfparse("{tool} was invoked {count:d} time"))
@then(parsers.cfparse("{tool} was invoked {count:d} times"))
def then_tool_invoked(toolbox: FakeToolbox, tool: str, count: int) -> None:
    """Assert how often a fake tool ran."""
    assert len(toolbox.invocations(tool)) == count


@then(parsers.cfparse("{tool} was not invoked"))
def then_tool_not_invoked(toolbox: FakeToolbox, tool: str) -> None:
    """Assert a fake tool never ran."""
    assert toolbox.invocations(tool) == []
