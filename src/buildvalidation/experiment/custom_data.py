"""Custom build scan data: OS, CI and git metadata as scan tags, values and links."""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Mapping
from urllib.parse import quote_plus

from buildvalidation.core.schema import CustomData
from buildvalidation.experiment import git_ops

# Environment variables whose presence marks a CI build, with the link label for each.
CI_BUILD_URL_VARS = (
    ("BUILD_URL", "Jenkins build"),
    ("CI_BUILD_URL", "TeamCity build"),
    ("CIRCLE_BUILD_URL", "CircleCI build"),
    ("bamboo.resultsUrl", "Bamboo build"),
    ("bamboo_resultsUrl", "Bamboo build"),
)


def is_ci(env: Mapping[str, str]) -> bool:
    """True when any known CI server variable is set."""
    return any(env.get(var) for var, _ in CI_BUILD_URL_VARS)


def custom_value_search_url(server: str, search: Mapping[str, str]) -> str:
    """Scans-list URL on the server filtered by custom values."""
    query = "&".join(
        f"search.names={quote_plus(name)}&search.values={quote_plus(value)}" for name, value in search.items()
    )
    return f"{server.rstrip('/')}/scans?{query}"


def _add_search_link(data: CustomData, server: str | None, label: str, name: str, value: str) -> None:
    if server:
        data.links[label] = custom_value_search_url(server, {name: value})


def add_ci_metadata(data: CustomData, env: Mapping[str, str], server: str | None = None) -> None:
    """Add Jenkins, TeamCity, CircleCI and Bamboo links and values."""
    # Jenkins
    if env.get("BUILD_URL"):
        data.links["Jenkins build"] = env["BUILD_URL"]
    if env.get("BUILD_NUMBER"):
        data.values["CI build number"] = env["BUILD_NUMBER"]
    if env.get("JOB_NAME"):
        data.values["CI job"] = env["JOB_NAME"]
        _add_search_link(data, server, "CI job build scans", "CI job", env["JOB_NAME"])
    if env.get("STAGE_NAME"):
        data.values["CI stage"] = env["STAGE_NAME"]
        _add_search_link(data, server, "CI stage build scans", "CI stage", env["STAGE_NAME"])

    for var, label in CI_BUILD_URL_VARS[1:]:
        if env.get(var):
            data.links[label] = env[var]


def add_git_metadata(data: CustomData, repo_dir: Path, server: str | None = None) -> None:
    """Add commit id, branch and working-tree status of repo_dir."""
    commit = git_ops.commit_id(repo_dir)
    branch = git_ops.branch_name(repo_dir)
    status = git_ops.status_porcelain(repo_dir)

    if commit:
        data.values["Git commit id"] = commit
        _add_search_link(data, server, "Git commit id build scans", "Git commit id", commit)
    if branch:
        data.tags.append(branch)
        data.values["Git branch"] = branch
    if status:
        data.tags.append("Dirty")
        data.values["Git status"] = status


def collect_custom_data(
    env: Mapping[str, str],
    repo_dir: Path | None = None,
    server: str | None = None,
    os_name: str | None = None,
) -> CustomData:
    """Collect the tags, values and links to attach to the experiment's build scans."""
    data = CustomData()
    data.tags.append(os_name or platform.system())
    data.tags.append("CI" if is_ci(env) else "LOCAL")
    add_ci_metadata(data, env, server=server)
    if repo_dir is not None:
        add_git_metadata(data, repo_dir, server=server)
    return data


def to_system_properties(data: CustomData) -> list[str]:
    """Render custom data as ``-Dscan.tag.*``, ``-Dscan.value.*`` and ``-Dscan.link.*`` arguments."""
    props = [f"-Dscan.tag.{tag}" for tag in data.tags]
    props += [f"-Dscan.value.{name}={value}" for name, value in data.values.items()]
    props += [f"-Dscan.link.{name}={url}" for name, url in data.links.items()]
    return props
