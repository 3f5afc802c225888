"""Summary stage: read the captured build scans back from scans.csv."""

from __future__ import annotations

from buildvalidation.core.exceptions import ScanDataError
from buildvalidation.core.schema import ExperimentContext, StageResult
from buildvalidation.experiment import summary
from buildvalidation.experiment.experiment_log import get_logger
from buildvalidation.experiment.scan_reader import read_scans


class SummaryStage:
    """Loads the scan records of both builds and flags builds without a scan."""

    name = "summary"

    def execute(self, context: ExperimentContext) -> StageResult:
        if context.scan_file is None:
            return StageResult(stage_name=self.name, success=False, message="scan_file not set in context")
        try:
            scans = read_scans(context.scan_file)
        except ScanDataError as e:
            return StageResult(stage_name=self.name, success=False, message=str(e))

        warnings = summary.missing_scan_warnings(scans)
        log = get_logger()
        for warning in warnings:
            log.warning("%s", warning)
        log.info("Captured %d build scan(s)", len(scans))
        return StageResult(
            stage_name=self.name,
            data={"scans": scans, "warnings": warnings},
        )
