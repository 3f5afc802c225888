"""Clone stage: fresh shallow clone of the project under test."""

from __future__ import annotations

from buildvalidation.core.exceptions import GitError
from buildvalidation.core.schema import ExperimentContext, StageResult
from buildvalidation.experiment import git_ops
from buildvalidation.experiment.experiment_log import get_logger
from buildvalidation.utils import get_output_callback, get_registry_and_config


class CloneStage:
    """Clones the configured repository (and branch) into the experiment directory."""

    name = "clone"

    def execute(self, context: ExperimentContext) -> StageResult:
        _, config_manager, err = get_registry_and_config(context, self.name)
        if err:
            return err
        cfg = context.experiment
        if not cfg.git_repo:
            return StageResult(stage_name=self.name, success=False, message="git repository not set")
        if context.experiment_dir is None:
            return StageResult(stage_name=self.name, success=False, message="experiment_dir not set in context")

        log = get_logger()
        echo = get_output_callback(context)
        git_cfg = config_manager.config.git
        clone_dir = context.experiment_dir / cfg.project_name
        echo(f"Cloning {cfg.project_name}")
        try:
            git_ops.clone_project(
                cfg.git_repo,
                clone_dir,
                branch=cfg.git_branch,
                depth=git_cfg.clone_depth,
                timeout=git_cfg.timeout,
                base_dir=context.experiment_dir,
            )
        except GitError as e:
            return StageResult(stage_name=self.name, success=False, message=str(e))

        build_dir = clone_dir / cfg.project_dir if cfg.project_dir else clone_dir
        if not build_dir.is_dir():
            log.error("Project dir not found in clone: %s", build_dir)
            return StageResult(
                stage_name=self.name,
                success=False,
                message=f"Project directory '{cfg.project_dir}' does not exist in {cfg.git_repo}",
                data={"clone_dir": clone_dir},
            )

        commit = git_ops.commit_id(clone_dir)
        log.info("Cloned commit: %s", commit or "(unknown)")
        return StageResult(
            stage_name=self.name,
            data={"clone_dir": clone_dir, "git_commit_id": commit},
        )
