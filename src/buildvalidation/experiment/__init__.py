"""Experiment building blocks: workspace, git, build runs, scan capture, summary, wizard."""

from buildvalidation.experiment.custom_data import collect_custom_data, to_system_properties
from buildvalidation.experiment.experiment_log import experiment_log_context, get_logger
from buildvalidation.experiment.scan_reader import find_scan_url, parse_scan_url, read_scans
from buildvalidation.experiment.wizard import Wizard

__all__ = [
    "Wizard",
    "collect_custom_data",
    "experiment_log_context",
    "find_scan_url",
    "get_logger",
    "parse_scan_url",
    "read_scans",
    "to_system_properties",
]
