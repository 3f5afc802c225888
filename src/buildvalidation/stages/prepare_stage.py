"""Prepare stage: create the experiment directory and clear data from earlier runs."""

from __future__ import annotations

from buildvalidation.core.schema import ExperimentContext, StageResult
from buildvalidation.experiment import workspace
from buildvalidation.experiment.experiment_log import get_logger
from buildvalidation.experiment.scan_reader import SCAN_FILE_NAME
from buildvalidation.utils import get_registry_and_config


class PrepareStage:
    """Creates the experiment directory; resets scans.csv and build logs."""

    name = "prepare"

    def execute(self, context: ExperimentContext) -> StageResult:
        _, config_manager, err = get_registry_and_config(context, self.name)
        if err:
            return err

        exp_dir = context.experiment_dir or workspace.experiment_dir(config_manager.data_dir(), context.tool_name)
        scan_file = exp_dir / SCAN_FILE_NAME
        try:
            workspace.make_experiment_dir(exp_dir, scan_file)
        except OSError as e:
            return StageResult(
                stage_name=self.name,
                success=False,
                message=f"Unable to create experiment directory {exp_dir}: {e}",
            )
        get_logger().info("Experiment dir: %s", exp_dir)
        return StageResult(
            stage_name=self.name,
            data={"experiment_dir": exp_dir, "scan_file": scan_file},
        )
