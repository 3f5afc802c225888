"""Interactive mode: explain each experiment step and collect the configuration by prompting."""

from __future__ import annotations

import shlex

import click

from buildvalidation.core.schema import ExperimentConfig, ExperimentContext
from buildvalidation.experiment import summary
from buildvalidation.experiment.workspace import EXPERIMENT_NAME, EXPERIMENT_NO
from buildvalidation.protocols import BuildTool

SEPARATOR = "-" * 80


def _header(text: str) -> str:
    return click.style(text, bold=True)


def _action(text: str) -> str:
    return click.style(text, fg="yellow")


def repeat_command(tool: BuildTool, cfg: ExperimentConfig) -> str:
    """Non-interactive command line that repeats an experiment with the same configuration."""
    unit_flag = "--tasks" if tool.work_unit == "task" else "--goals"
    parts = ["build-validation", tool.name, "--git-repo", cfg.git_repo]
    if cfg.git_branch:
        parts += ["--git-branch", cfg.git_branch]
    if cfg.project_dir:
        parts += ["--project-dir", cfg.project_dir]
    parts += [unit_flag, cfg.tasks]
    if cfg.extra_args:
        parts += ["--args", shlex.join(cfg.extra_args)]
    if cfg.gradle_enterprise_server:
        parts += ["--gradle-enterprise-server", cfg.gradle_enterprise_server]
    return shlex.join(parts)


class Wizard:
    """Walks the user through the experiment, one explained step at a time."""

    def __init__(self, tool: BuildTool) -> None:
        self._tool = tool
        self._unit = tool.work_unit
        self._units = f"{tool.work_unit}s"

    def _print(self, text: str) -> None:
        click.echo(text)

    def wait_for_enter(self, message: str = "Press <Enter> to continue.") -> None:
        click.prompt(_action(message), default="", show_default=False, prompt_suffix="")

    def introduction(self) -> None:
        tool = self._tool.display_name
        self._print(
            f"""{SEPARATOR}
{_header(f"Experiment {EXPERIMENT_NO}: {EXPERIMENT_NAME}")}
{SEPARATOR}

This experiment checks how well your {tool} build takes advantage of the
local build cache. When the build cache is enabled, {tool} saves the output of
{self._units} so that the same output can be reused when a {self._unit} runs
again with the same inputs. Unlike incremental builds, the cache is used across
build runs: even after a clean, cached output is used if the inputs of a
{self._unit} have not changed.

To test the build cache we run two builds with build caching enabled. Both
builds invoke clean and run the same {self._units}. Nothing changes between
the two runs.

If the build takes advantage of the local build cache, very few (if any)
{self._units} should execute in the second build; their output should come
from the local cache instead.
"""
        )
        self.wait_for_enter("Press <Enter> to get started.")

    def collect_git_details(self, cfg: ExperimentConfig) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Configure the experiment: git repository")}

We clone a fresh copy of your project so that nothing left over in your
working copy affects the experiment. Enter the repository URL (or path) and,
optionally, the branch to build. Leave the branch empty to use the default
branch.
"""
        )
        cfg.git_repo = click.prompt("Git repository", default=cfg.git_repo or None)
        cfg.git_branch = click.prompt("Git branch", default=cfg.git_branch, show_default=bool(cfg.git_branch))

    def collect_build_details(self, cfg: ExperimentConfig) -> None:
        self._print(
            f"""{SEPARATOR}
{_header(f"Configure the experiment: {self._tool.display_name} invocation")}

Enter the directory (relative to the repository root) the build runs in,
the {self._units} to run, and any additional arguments to pass to the build.
"""
        )
        cfg.project_dir = click.prompt("Project directory", default=cfg.project_dir, show_default=bool(cfg.project_dir))
        cfg.tasks = click.prompt(self._units.capitalize(), default=cfg.tasks or None)
        extra = click.prompt(
            "Additional arguments",
            default=shlex.join(cfg.extra_args),
            show_default=bool(cfg.extra_args),
        )
        cfg.extra_args = shlex.split(extra)

    def explain_clone(self, context: ExperimentContext) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Clone project")}

We are going to clone {context.experiment.git_repo} into a fresh directory.
Any clone left from an earlier run of the experiment is deleted first.
"""
        )
        self.wait_for_enter()

    def explain_local_cache_dir(self, context: ExperimentContext) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Configure local build cache")}

We create a new, empty local build cache directory and configure
{self._tool.display_name} to use it instead of the default one. This way the
first build finds nothing in the cache and every {self._unit} runs, which
makes sure that cacheable {self._units} do store their output in the cache.

This directory is used for the local build cache (it is deleted if it exists
from an earlier run of the experiment):

{context.build_cache_dir or ""}
"""
        )
        self.wait_for_enter()

    def explain_first_build(self, context: ExperimentContext) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Run first build")}

We are ready to run the first build. It executes 'clean {context.experiment.tasks}'.

Clean runs even though the clone is fresh because clean can change the order
in which other {self._units} run, which can affect how the build cache is used.
The experiment id and run id are added to the build scan.
"""
        )
        self.wait_for_enter("Press <Enter> to run the first build.")

    def explain_second_build(self, context: ExperimentContext) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Run second build")}

Now we run the build again without changing anything.

In a fully optimized build no {self._units} run in this second build: all of
their outputs are already in the local build cache. {self._units.capitalize()}
that do run show up in the build scan of the second build.
"""
        )
        self.wait_for_enter("Press <Enter> to run the second build.")

    def before_stage(self, stage_name: str, context: ExperimentContext) -> None:
        """Pipeline hook: explain the stage that is about to run."""
        explainers = {
            "clone": self.explain_clone,
            "cache": self.explain_local_cache_dir,
            "first_build": self.explain_first_build,
            "second_build": self.explain_second_build,
        }
        explain = explainers.get(stage_name)
        if explain is not None:
            click.echo()
            explain(context)

    def explain_warnings(self, warnings: list[str]) -> None:
        if not warnings:
            return
        self._print(
            """
Without build scans for both builds the investigation links below cannot be
generated. Check the warnings above, fix the build configuration and run the
experiment again.
"""
        )

    def explain_summary(self, context: ExperimentContext) -> None:
        info = "\n".join(summary.experiment_info_lines(context, self._tool))
        scans = "\n".join(summary.build_scan_lines(context.scans))
        quick_links = "\n".join(summary.quick_link_lines(context.scans, self._tool))
        self._print(
            f"""{SEPARATOR}
{_header("Measure build results")}

Both builds have completed. The build scans hold a lot of data that helps
find inefficiencies in your build. Here is a summary of the experiment:

{info}

"Experiment id" and "Experiment run id" are added to the build scans. Use the
experiment id to find the build scans of every run of this experiment, and the
run id (unique per run) to find the build scans of this run.

{scans}

Above are the build scans of the two builds.
"""
        )
        if not quick_links:
            return
        self._print(
            f"""{quick_links}

Use these links to start the analysis.

The execution overview summarizes the second build and shows where there may
be overall opportunities to optimize.

"Cache performance" opens the build cache page of the second build scan, with
metrics such as cache hits and misses.

The timeline link shows only the {self._units} that executed in the second build,
longest first. Use it to find {self._units} that ran again unnecessarily.

The inputs comparison shows which {self._unit} inputs differ between the two
builds.

"Executed cacheable {self._units}" lists {self._units} that ran again although they are
cacheable. One of their inputs changed even though we changed nothing, or they
do not declare their inputs correctly.

"Non-cacheable {self._units}" lists {self._units} that ran and cannot be cached. Not every
{self._unit} can (or should) be cached; clean, for example, deletes output
instead of producing it.
"""
        )

    def explain_how_to_repeat(self, context: ExperimentContext) -> None:
        self._print(
            f"""{SEPARATOR}
{_header("Repeat the experiment")}

To run this experiment again with the same configuration without the
explanations, run:

{repeat_command(self._tool, context.experiment)}
"""
        )
