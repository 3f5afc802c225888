"""Build stage: one build run with the local build cache, capturing its build scan."""

from __future__ import annotations

import os
import shlex

from buildvalidation.core.exceptions import BuildError, ScanDataError
from buildvalidation.core.schema import ExperimentContext, StageResult
from buildvalidation.experiment import workspace
from buildvalidation.experiment.build_runner import run_build
from buildvalidation.experiment.custom_data import collect_custom_data, to_system_properties
from buildvalidation.experiment.experiment_log import get_logger
from buildvalidation.experiment.scan_reader import append_scan, find_scan_url, parse_scan_url
from buildvalidation.utils import get_output_callback, get_registry_and_config

_ORDINALS = {1: "first", 2: "second"}


class BuildStage:
    """Runs ``clean <tasks>`` once; ``run_num`` tells the first (cold cache) run from the second."""

    def __init__(self, run_num: int = 1) -> None:
        self.run_num = run_num
        self.name = f"{_ORDINALS.get(run_num, str(run_num))}_build"

    def _fail(self, message: str, **data) -> StageResult:
        return StageResult(stage_name=self.name, success=False, message=message, data=data)

    def execute(self, context: ExperimentContext) -> StageResult:
        registry, config_manager, err = get_registry_and_config(context, self.name)
        if err:
            return err
        build_dir = context.build_dir
        if build_dir is None or context.experiment_dir is None or context.build_cache_dir is None:
            return self._fail("clone_dir, experiment_dir or build_cache_dir not set in context")

        log = get_logger()
        echo = get_output_callback(context)
        cfg = context.experiment
        tool = registry.get_tool(context.tool_name)
        which = _ORDINALS.get(self.run_num, str(self.run_num))

        system_properties = [
            f"-Dscan.tag.{tool.scan_tag}",
            f"-Dscan.value.runId={context.run_id}",
            f"-Dscan.value.runNum={self.run_num}",
        ]
        custom = collect_custom_data(os.environ, repo_dir=context.clone_dir, server=cfg.gradle_enterprise_server)
        system_properties += to_system_properties(custom)

        executable = tool.executable(build_dir, use_wrapper=config_manager.config.build.use_wrapper)
        args = tool.build_args(
            self.run_num,
            context.build_cache_dir,
            cfg.task_list(),
            system_properties,
            cfg.extra_args,
            server=cfg.gradle_enterprise_server,
        )
        command = [executable, *args]
        log_file = workspace.build_log_file(context.experiment_dir, self.run_num)

        echo(f"Running {which} build:")
        echo(shlex.join(command))
        log.info("=== %s build ===", which.capitalize())
        try:
            exit_code, output = run_build(command, build_dir, log_file, on_output=echo)
        except BuildError as e:
            return self._fail(str(e))

        if exit_code != 0:
            log.error("%s build failed (exit %s)", which.capitalize(), exit_code)
            return self._fail(
                f"The {which} build failed (exit {exit_code}). Build output: {log_file}",
                build_log_file=log_file,
            )

        scans = list(context.scans)
        scan_url = find_scan_url(output)
        if scan_url is None:
            log.warning("No build scan URL found in the %s build output", which)
        else:
            try:
                scan = parse_scan_url(scan_url, self.run_num, cfg.project_name)
            except ScanDataError as e:
                log.warning("%s", e)
            else:
                if context.scan_file is not None:
                    append_scan(context.scan_file, scan)
                scans.append(scan)
                log.info("Build scan %s build: %s", which, scan.scan_url)

        return StageResult(
            stage_name=self.name,
            data={"scans": scans, "build_log_file": log_file},
        )
