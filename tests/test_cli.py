"""Tests for the build-validation command line."""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from buildvalidation import __version__
from buildvalidation.cli import main
from buildvalidation.core.exceptions import GitError
from buildvalidation.experiment import workspace
from buildvalidation.experiment.scan_reader import SCAN_FILE_NAME, read_scans

from _helpers import SERVER, build_output

REPO = "https://github.com/acme/app.git"

GRADLE_QUICK_LINKS = (
    "Task execution overview:",
    "Cache performance:",
    "Executed tasks timeline:",
    "Task inputs comparison:",
    "Executed cacheable tasks:",
    "Non-cacheable tasks:",
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _fake_clone(git_repo, dest, **kwargs):
    Path(dest).mkdir(parents=True)
    return Path(dest)


def _fake_build(scan_ids: dict[int, str] | None = None, exit_code: int = 0):
    """run_build replacement that prints a scan URL per run (looked up by build log name)."""
    scan_ids = {1: "aaaa1111", 2: "bbbb2222"} if scan_ids is None else scan_ids

    def run(command, cwd, log_file, on_output=None):
        run_num = 1 if log_file.name == "build-1.log" else 2
        scan_id = scan_ids.get(run_num)
        output = build_output(scan_id) if scan_id else "BUILD SUCCESSFUL in 3s"
        for line in output.splitlines():
            if on_output is not None:
                on_output(line)
        return exit_code, output

    return run


def _patched_experiment(stack: ExitStack, run_build=None, clone=_fake_clone) -> MagicMock:
    """Patch git and the build subprocess; return the run_build mock."""
    stack.enter_context(patch("buildvalidation.experiment.git_ops.clone_project", side_effect=clone))
    stack.enter_context(patch("buildvalidation.experiment.git_ops.commit_id", return_value="1a2b3c4d"))
    stack.enter_context(patch("buildvalidation.experiment.git_ops.branch_name", return_value="main"))
    stack.enter_context(patch("buildvalidation.experiment.git_ops.status_porcelain", return_value=""))
    return stack.enter_context(
        patch("buildvalidation.stages.build_stage.run_build", side_effect=run_build or _fake_build())
    )


def _experiment_dir(tool: str) -> Path:
    return Path.cwd() / "data" / tool / workspace.EXPERIMENT_SLUG


# ---------------------------------------------------------------------------
# group
# ---------------------------------------------------------------------------


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(main, ["-h"])
    assert result.exit_code == 0
    for command in ("gradle", "maven", "check", "user-data"):
        assert command in result.output


# ---------------------------------------------------------------------------
# argument resolution
# ---------------------------------------------------------------------------


def test_unknown_flag(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["gradle", "--git-repo", REPO, "--tasks", "build", "--bogus"])
    assert result.exit_code == 2
    assert "--bogus" in result.output


def test_flag_missing_value(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["gradle", "--tasks", "build", "--git-repo"])
    assert result.exit_code == 2


def test_missing_git_repo(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["gradle", "--tasks", "build"])
    assert result.exit_code == 2
    assert "--git-repo" in result.output


def test_missing_goals(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["maven", "--git-repo", REPO])
    assert result.exit_code == 2
    assert "--goals" in result.output


def test_tasks_flag_is_not_accepted_by_maven(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["maven", "--git-repo", REPO, "--tasks", "verify"])
    assert result.exit_code == 2


def test_unbalanced_quotes_in_args(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["gradle", "-r", REPO, "-t", "build", "-a", "-Pfoo='bar"])
    assert result.exit_code == 2
    assert "--args" in result.output


# ---------------------------------------------------------------------------
# experiment runs
# ---------------------------------------------------------------------------


def test_failing_clone_stops_before_build(runner: CliRunner, tmp_path: Path) -> None:
    def fail_clone(git_repo, dest, **kwargs):
        raise GitError(f"Unable to clone from {git_repo}: repository not found")

    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack, clone=fail_clone)
        result = runner.invoke(main, ["gradle", "--git-repo", REPO, "--tasks", "build"])

    assert result.exit_code == 1
    assert "ERROR: Unable to clone from" in result.output
    assert "Experiment log:" in result.output
    run_build.assert_not_called()


def test_gradle_experiment(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack)
        result = runner.invoke(
            main,
            ["gradle", "-r", REPO, "-b", "main", "-t", "build", "-a", "-x test", "-s", SERVER],
        )
        exp_dir = _experiment_dir("gradle")
        scans = read_scans(exp_dir / SCAN_FILE_NAME)
        log_exists = (exp_dir / workspace.LOG_FILE_NAME).is_file()

    assert result.exit_code == 0, result.output
    assert run_build.call_count == 2
    first_command = run_build.call_args_list[0].args[0]
    second_command = run_build.call_args_list[1].args[0]
    assert "--rerun-tasks" in first_command
    assert "--rerun-tasks" not in second_command
    assert f"-Dbuild_validation.server={SERVER}" in first_command
    assert first_command[-4:] == ["-x", "test", "clean", "build"]
    assert "-Dscan.value.Git commit id=1a2b3c4d" in first_command

    assert [s.scan_id for s in scans] == ["aaaa1111", "bbbb2222"]
    assert log_exists
    assert f"{SERVER}/s/aaaa1111" in result.output
    assert f"{SERVER}/s/bbbb2222" in result.output
    for label in GRADLE_QUICK_LINKS:
        assert result.output.count(label) == 1
    assert "WARNING" not in result.output


def test_maven_experiment_uses_goals(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack)
        result = runner.invoke(main, ["maven", "--git-repo", REPO, "--goals", "verify"])

    assert result.exit_code == 0, result.output
    command = run_build.call_args.args[0]
    assert "-Dscan" in command
    assert "-Dscan.tag.exp2-maven" in command
    assert command[-2:] == ["clean", "verify"]
    assert "Goals:" in result.output
    assert "Goal inputs comparison:" in result.output


def test_server_from_environment(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRADLE_ENTERPRISE_SERVER", SERVER)
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack)
        result = runner.invoke(main, ["maven", "--git-repo", REPO, "--goals", "verify"])

    assert result.exit_code == 0, result.output
    assert f"-Dgradle.enterprise.url={SERVER}" in run_build.call_args.args[0]


def test_failing_build(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack, run_build=_fake_build(exit_code=1))
        result = runner.invoke(main, ["gradle", "--git-repo", REPO, "--tasks", "build"])

    assert result.exit_code == 1
    assert "ERROR: The first build failed (exit 1)" in result.output
    assert run_build.call_count == 1


def test_missing_scan_warns(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        _patched_experiment(stack, run_build=_fake_build(scan_ids={1: "aaaa1111"}))
        result = runner.invoke(main, ["gradle", "--git-repo", REPO, "--tasks", "build"])

    assert result.exit_code == 0, result.output
    assert "WARNING: No build scan was captured for the second build." in result.output
    assert "<not captured>" in result.output
    assert "Investigation Quick Links" not in result.output


def test_interactive_experiment(runner: CliRunner, tmp_path: Path) -> None:
    # intro, repo, branch, project dir, tasks, extra args, then clone/cache/first/second build
    answers = "\n" + f"{REPO}\n" + "\n" * 4 + "\n" * 4
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        run_build = _patched_experiment(stack)
        result = runner.invoke(main, ["gradle", "-i", "--tasks", "build"], input=answers)

    assert result.exit_code == 0, result.output
    assert run_build.call_count == 2
    assert "Clone project" in result.output
    assert "Run second build" in result.output
    assert "Measure build results" in result.output
    assert "Repeat the experiment" in result.output
    assert f"build-validation gradle --git-repo {REPO} --tasks build" in result.output


# ---------------------------------------------------------------------------
# check / user-data
# ---------------------------------------------------------------------------


def test_check_all_ok(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), patch(
        "buildvalidation.core.health._run_cmd", return_value=(True, "ok")
    ):
        result = runner.invoke(main, ["check", "-s", SERVER, "--verbose"])
    assert result.exit_code == 0
    assert "git: OK" in result.output
    assert "java: OK" in result.output
    assert SERVER in result.output
    assert "All checks passed." in result.output


def test_check_missing_git(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path), patch(
        "buildvalidation.core.health._run_cmd", return_value=(False, "command not found")
    ):
        result = runner.invoke(main, ["check", "--skip-java"])
    assert result.exit_code == 1
    assert "git: FAIL" in result.output
    assert "java" not in result.output


def test_user_data(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUILD_URL", "https://jenkins.example.com/job/app/7/")
    monkeypatch.setenv("JOB_NAME", "app")
    with runner.isolated_filesystem(temp_dir=tmp_path), ExitStack() as stack:
        stack.enter_context(patch("buildvalidation.experiment.git_ops.commit_id", return_value="1a2b3c4d"))
        stack.enter_context(patch("buildvalidation.experiment.git_ops.branch_name", return_value="main"))
        stack.enter_context(patch("buildvalidation.experiment.git_ops.status_porcelain", return_value=""))
        result = runner.invoke(main, ["user-data", "-s", SERVER])

    assert result.exit_code == 0, result.output
    assert "tag:   CI" in result.output
    assert "tag:   main" in result.output
    assert "value: CI job = app" in result.output
    assert "value: Git commit id = 1a2b3c4d" in result.output
    assert "link:  Jenkins build = https://jenkins.example.com/job/app/7/" in result.output
    assert f"link:  CI job build scans = {SERVER}/scans?search.names=CI+job&search.values=app" in result.output


def test_invalid_config_file(runner: CliRunner, tmp_path: Path) -> None:
    with runner.isolated_filesystem(temp_dir=tmp_path):
        Path("build-validation.yaml").write_text("build:\n  use_wrapper: sometimes\n")
        result = runner.invoke(main, ["gradle", "--git-repo", REPO, "--tasks", "build"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
