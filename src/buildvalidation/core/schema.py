"""Pydantic models and data structures for the experiment."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


#: Clone directory name used when the repository argument has no usable basename.
DEFAULT_PROJECT_NAME = "project"


def project_name_from_repo(git_repo: str) -> str:
    """Derive the project name from a repository URL or path (basename without ``.git``)."""
    path = git_repo.replace("\\", "/").rstrip("/")
    # /srv/app/.git names the repository app
    if path.endswith("/.git"):
        path = path[: -len("/.git")].rstrip("/")
    name = path.rsplit("/", 1)[-1]
    # scp-like URLs: git@host:project.git
    name = name.rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if name in ("", ".", ".."):
        return DEFAULT_PROJECT_NAME
    return name


class ExperimentConfig(BaseModel):
    """Resolved configuration of one experiment run."""

    git_repo: str = ""
    git_branch: str = ""
    project_dir: str = ""
    tasks: str = ""
    extra_args: list[str] = Field(default_factory=list)
    gradle_enterprise_server: str | None = None
    interactive: bool = False
    debug: bool = False

    @property
    def project_name(self) -> str:
        return project_name_from_repo(self.git_repo) if self.git_repo else ""

    def task_list(self) -> list[str]:
        """Tasks (or goals) as separate command-line arguments."""
        return self.tasks.split()


class BuildScanInfo(BaseModel):
    """Identifiers of one published build scan."""

    run_num: int
    project_name: str = ""
    base_url: str
    scan_url: str
    scan_id: str


class CustomData(BaseModel):
    """Tags, values and links attached to build scans."""

    tags: list[str] = Field(default_factory=list)
    values: dict[str, str] = Field(default_factory=dict)
    links: dict[str, str] = Field(default_factory=dict)


class StageResult(BaseModel):
    """Result produced by an experiment stage."""

    stage_name: str
    success: bool = True
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class ExperimentContext(BaseModel):
    """Mutable context passed between experiment stages."""

    model_config = {"arbitrary_types_allowed": True}

    experiment: ExperimentConfig
    tool_name: str
    run_id: str = ""
    experiment_dir: Path | None = None
    clone_dir: Path | None = None
    build_cache_dir: Path | None = None
    scan_file: Path | None = None
    git_commit_id: str = ""
    scans: list[BuildScanInfo] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    stage_results: list[StageResult] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    @property
    def build_dir(self) -> Path | None:
        """Directory the build tool runs in: the clone, or the project dir inside it."""
        if self.clone_dir is None:
            return None
        if self.experiment.project_dir:
            return self.clone_dir / self.experiment.project_dir
        return self.clone_dir

    def update(self, result: StageResult) -> None:
        """Append a stage result and merge its data into context."""
        self.stage_results.append(result)
        if result.data:
            if "experiment_dir" in result.data:
                self.experiment_dir = result.data["experiment_dir"]
            if "scan_file" in result.data:
                self.scan_file = result.data["scan_file"]
            if "clone_dir" in result.data:
                self.clone_dir = result.data["clone_dir"]
            if "git_commit_id" in result.data:
                self.git_commit_id = result.data["git_commit_id"]
            if "build_cache_dir" in result.data:
                self.build_cache_dir = result.data["build_cache_dir"]
            if "scans" in result.data:
                self.scans = result.data["scans"]
            if "warnings" in result.data:
                self.warnings = result.data["warnings"]

    def finalize(self) -> ExperimentResult:
        """Build final experiment result from context."""
        return ExperimentResult(
            success=bool(self.stage_results) and all(r.success for r in self.stage_results),
            stage_results=self.stage_results,
            scans=self.scans,
            warnings=self.warnings,
        )


class ExperimentResult(BaseModel):
    """Final result of an experiment run."""

    success: bool = True
    stage_results: list[StageResult] = Field(default_factory=list)
    scans: list[BuildScanInfo] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def failed_stage(self) -> StageResult | None:
        """First failed stage result, if any."""
        return next((r for r in self.stage_results if not r.success), None)
