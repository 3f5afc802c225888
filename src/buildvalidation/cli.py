"""CLI entry point for build-validation."""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Callable

import click
from dotenv import load_dotenv

from buildvalidation import __version__
from buildvalidation.core.config import ConfigManager
from buildvalidation.core.exceptions import BuildValidationError, ConfigError
from buildvalidation.core.health import HealthChecker
from buildvalidation.core.pipeline import PipelineEngine
from buildvalidation.core.registry import ComponentRegistry
from buildvalidation.core.schema import ExperimentConfig, ExperimentContext
from buildvalidation.experiment import summary, workspace
from buildvalidation.experiment.custom_data import collect_custom_data
from buildvalidation.experiment.experiment_log import experiment_log_context
from buildvalidation.experiment.wizard import Wizard
from buildvalidation.stages import register_builtin_stages
from buildvalidation.tools import register_builtin_tools


def _load_env_and_registry(project_root: Path | None = None) -> tuple[ConfigManager, ComponentRegistry]:
    """Load .env and register built-in tools and stages; return config and registry."""
    root = project_root or Path.cwd()
    load_dotenv(root / ".env")
    config = ConfigManager(project_root=root)
    try:
        config.load()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    registry = ComponentRegistry()
    register_builtin_tools(registry)
    register_builtin_stages(registry)
    return config, registry


def _experiment_options(unit_flag: str, unit_short: str) -> Callable:
    """Options shared by the Gradle and Maven experiment commands."""
    options = [
        click.option("-r", "--git-repo", "git_repo", default="", help="Git repository (URL or path) of the project to build."),
        click.option("-b", "--git-branch", "git_branch", default="", help="Branch to build (default: the repository's default branch)."),
        click.option("-p", "--project-dir", "project_dir", default="", help="Directory inside the repository the build runs in."),
        click.option(f"-{unit_short}", f"--{unit_flag}", "tasks", default="", help=f"{unit_flag.capitalize()} to run, e.g. 'build' or 'verify'."),
        click.option("-a", "--args", "extra_args", default="", help="Additional arguments passed through to the build."),
        click.option("-s", "--gradle-enterprise-server", "server", default=None, help="Gradle Enterprise server to publish build scans to."),
        click.option("-i", "--interactive/--no-interactive", "interactive", default=False, help="Explain each step and prompt for the configuration."),
        click.option("--debug/--no-debug", "debug", default=False, help="Write DEBUG-level details to the experiment log."),
    ]

    def decorator(f: Callable) -> Callable:
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


def _resolve_experiment_config(
    unit_flag: str,
    git_repo: str,
    git_branch: str,
    project_dir: str,
    tasks: str,
    extra_args: str,
    server: str | None,
    interactive: bool,
    debug: bool,
) -> ExperimentConfig:
    """Build the experiment configuration from CLI values; raise UsageError for missing values."""
    try:
        args = shlex.split(extra_args)
    except ValueError as e:
        raise click.UsageError(f"Invalid value for '--args': {e}") from e
    cfg = ExperimentConfig(
        git_repo=git_repo,
        git_branch=git_branch,
        project_dir=project_dir,
        tasks=tasks,
        extra_args=args,
        gradle_enterprise_server=server,
        interactive=interactive,
        debug=debug,
    )
    if not interactive:
        if not cfg.git_repo:
            raise click.UsageError("Missing required option '--git-repo'.")
        if not cfg.tasks.strip():
            raise click.UsageError(f"Missing required option '--{unit_flag}'.")
    return cfg


def _run_experiment(tool_name: str, unit_flag: str, **options) -> None:
    config, registry = _load_env_and_registry()
    options["server"] = options["server"] or config.config.gradle_enterprise_server
    cfg = _resolve_experiment_config(unit_flag, **options)
    tool = registry.get_tool(tool_name)

    wizard = Wizard(tool) if cfg.interactive else None
    if wizard is not None:
        wizard.introduction()
        click.echo()
        wizard.collect_git_details(cfg)
        click.echo()
        wizard.collect_build_details(cfg)

    exp_dir = workspace.experiment_dir(config.data_dir(), tool_name)
    log_file = exp_dir / workspace.LOG_FILE_NAME
    context = ExperimentContext(
        experiment=cfg,
        tool_name=tool_name,
        run_id=workspace.generate_run_id(),
        experiment_dir=exp_dir,
        build_cache_dir=exp_dir / workspace.BUILD_CACHE_DIR_NAME,
        settings={
            "registry": registry,
            "config_manager": config,
            "on_output": click.echo,
        },
    )

    engine = PipelineEngine(registry)
    with experiment_log_context(log_file, debug=cfg.debug) as log:
        log.info("=== Experiment %s %s (%s) ===", workspace.EXPERIMENT_NO, workspace.EXPERIMENT_NAME, tool.display_name)
        log.info("run_id=%s git_repo=%s git_branch=%s project_dir=%s", context.run_id, cfg.git_repo, cfg.git_branch, cfg.project_dir)
        try:
            result = engine.run(context, before_stage=wizard.before_stage if wizard else None)
        except BuildValidationError as e:
            log.error("%s", e)
            click.echo(f"ERROR: {e}", err=True)
            click.echo(f"Experiment log: {log_file}", err=True)
            raise SystemExit(1)

        failed = result.failed_stage
        if failed is not None:
            log.error("Stage %s failed: %s", failed.stage_name, failed.message)
            click.echo(f"ERROR: {failed.message}", err=True)
            click.echo(f"Experiment log: {log_file}", err=True)
            raise SystemExit(1)
        log.info("=== Experiment finished ===")

    click.echo()
    for warning in result.warnings:
        click.echo(click.style(f"WARNING: {warning}", fg="yellow"))
    if wizard is not None:
        wizard.explain_warnings(result.warnings)
        click.echo()
        wizard.explain_summary(context)
        wizard.explain_how_to_repeat(context)
    else:
        if result.warnings:
            click.echo()
        for line in summary.summary_lines(context, tool):
            click.echo(line)
    click.echo()
    click.echo(f"Experiment log: {log_file}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version")
def main() -> None:
    """build-validation: check that a build is optimized for local build caching."""
    pass


@main.command()
@_experiment_options("tasks", "t")
def gradle(**options) -> None:
    """Validate that a Gradle build is optimized for local in-place build caching."""
    _run_experiment("gradle", "tasks", **options)


@main.command()
@_experiment_options("goals", "g")
def maven(**options) -> None:
    """Validate that a Maven build is optimized for local in-place build caching."""
    _run_experiment("maven", "goals", **options)


@main.command()
@click.option("--verbose", "-V", is_flag=True, help="Show details for passing checks too.")
@click.option("--skip-java", is_flag=True, help="Skip the java check.")
@click.option("-s", "--gradle-enterprise-server", "server", default=None, help="Gradle Enterprise server to report.")
def check(verbose: bool, skip_java: bool, server: str | None) -> None:
    """Verify that git and java are available and show the server configuration."""
    config, _ = _load_env_and_registry()
    checker = HealthChecker(config=config)
    results = checker.check_all(skip_java=skip_java, server=server)
    for r in results:
        status = "OK" if r.ok else "FAIL"
        click.echo(f"  {r.name}: {status}")
        if verbose or not r.ok:
            click.echo(f"    {r.message}")
        if (verbose or not r.ok) and r.suggestion:
            click.echo(f"    → {r.suggestion}")
    if all(r.ok for r in results):
        click.echo("All checks passed.")
    else:
        click.echo("Some checks failed. Fix the issues above or follow the suggested steps.", err=True)
        raise SystemExit(1)


@main.command("user-data")
@click.option(
    "-p",
    "--project-dir",
    "project_dir",
    type=click.Path(path_type=Path, exists=True, file_okay=False),
    default=".",
    help="Git working copy to read metadata from (default: current directory).",
)
@click.option("-s", "--gradle-enterprise-server", "server", default=None, help="Server used for search links.")
def user_data(project_dir: Path, server: str | None) -> None:
    """Print the custom tags, values and links attached to build scans."""
    config, _ = _load_env_and_registry()
    data = collect_custom_data(
        os.environ,
        repo_dir=project_dir.resolve(),
        server=server or config.config.gradle_enterprise_server,
    )
    for tag in data.tags:
        click.echo(f"tag:   {tag}")
    for name, value in data.values.items():
        click.echo(f"value: {name} = {value}")
    for name, url in data.links.items():
        click.echo(f"link:  {name} = {url}")


if __name__ == "__main__":
    main()
