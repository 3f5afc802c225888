"""Format the experiment summary: experiment info, build scans and investigation quick links."""

from __future__ import annotations

import shlex

from buildvalidation.core.schema import BuildScanInfo, ExperimentContext
from buildvalidation.experiment.workspace import EXPERIMENT_NAME, EXPERIMENT_NO
from buildvalidation.protocols import BuildTool

#: Width of the label column (labels are left-aligned and padded).
LABEL_WIDTH = 25

NOT_CAPTURED = "<not captured>"


def _row(label: str, value: str) -> str:
    return f"{label:<{LABEL_WIDTH}}{value}"


def _heading(title: str) -> list[str]:
    return [title, "-" * len(title)]


def experiment_info_lines(context: ExperimentContext, tool: BuildTool) -> list[str]:
    """Configuration and identifiers of the run."""
    cfg = context.experiment
    unit_label = "Tasks:" if tool.work_unit == "task" else "Goals:"
    return _heading("Summary") + [
        _row("Project:", cfg.project_name),
        _row("Git repo:", cfg.git_repo),
        _row("Git branch:", cfg.git_branch or "<default branch>"),
        _row("Git commit id:", context.git_commit_id),
        _row("Project dir:", cfg.project_dir or "."),
        _row(unit_label, cfg.tasks),
        _row("Custom args:", shlex.join(cfg.extra_args)),
        _row("Experiment:", f"{EXPERIMENT_NO} {EXPERIMENT_NAME}"),
        _row("Experiment id:", tool.scan_tag),
        _row("Experiment run id:", context.run_id),
    ]


def _scan_for_run(scans: list[BuildScanInfo], run_num: int) -> BuildScanInfo | None:
    return next((s for s in scans if s.run_num == run_num), None)


def build_scan_lines(scans: list[BuildScanInfo]) -> list[str]:
    """One line per build run with its scan URL."""
    first = _scan_for_run(scans, 1)
    second = _scan_for_run(scans, 2)
    return [
        _row("Build scan first build:", first.scan_url if first else NOT_CAPTURED),
        _row("Build scan second build:", second.scan_url if second else NOT_CAPTURED),
    ]


def quick_link_lines(scans: list[BuildScanInfo], tool: BuildTool) -> list[str]:
    """Investigation links; empty unless scans of both builds were captured."""
    first = _scan_for_run(scans, 1)
    second = _scan_for_run(scans, 2)
    if len(scans) != 2 or first is None or second is None:
        return []
    links = tool.quick_links(first.base_url, first.scan_id, second.scan_id)
    return _heading("Investigation Quick Links") + [_row(label, url) for label, url in links]


def missing_scan_warnings(scans: list[BuildScanInfo]) -> list[str]:
    """Warnings for build runs that did not publish a build scan."""
    warnings = []
    for run_num, which in ((1, "first"), (2, "second")):
        if _scan_for_run(scans, run_num) is None:
            warnings.append(
                f"No build scan was captured for the {which} build. "
                "Make sure the Gradle Enterprise plugin/extension is applied and the server is reachable."
            )
    return warnings


def summary_lines(context: ExperimentContext, tool: BuildTool) -> list[str]:
    """Full summary block printed at the end of the experiment."""
    lines = experiment_info_lines(context, tool)
    lines.append("")
    lines += build_scan_lines(context.scans)
    quick_links = quick_link_lines(context.scans, tool)
    if quick_links:
        lines.append("")
        lines += quick_links
    return lines
