"""Maven: command line, isolated local build cache, and dashboard links."""

from __future__ import annotations

from pathlib import Path

from buildvalidation.tools.common import find_executable, quick_link


class MavenTool:
    """Drives ``./mvnw`` (or ``mvn``) with the Gradle Enterprise Maven extension's cache properties."""

    name = "maven"
    display_name = "Maven"
    work_unit = "goal"
    scan_tag = "exp2-maven"

    def executable(self, build_dir: Path, use_wrapper: bool = True) -> str:
        return find_executable(build_dir, "mvnw", "mvn", use_wrapper=use_wrapper)

    def build_args(
        self,
        run_num: int,
        cache_dir: Path,
        tasks: list[str],
        system_properties: list[str],
        extra_args: list[str],
        server: str | None = None,
    ) -> list[str]:
        # Both runs are identical; the empty cache directory makes the first one a cold build.
        args = [
            "-Dscan",
            "-Dgradle.cache.local.enabled=true",
            f"-Dgradle.cache.local.directory={cache_dir}",
            "-Dgradle.cache.remote.enabled=false",
        ]
        if server:
            args.append(f"-Dgradle.enterprise.url={server}")
        args += system_properties
        args += extra_args
        args += ["clean", *tasks]
        return args

    def quick_links(self, base_url: str, first_scan_id: str, second_scan_id: str) -> list[tuple[str, str]]:
        return [
            ("Goal execution overview:", quick_link(base_url, f"/s/{second_scan_id}/performance/goal-execution")),
            ("Cache performance:", quick_link(base_url, f"/s/{second_scan_id}/performance/build-cache")),
            (
                "Executed goals timeline:",
                quick_link(base_url, f"/s/{second_scan_id}/timeline?outcome=SUCCESS,FAILED&sort=longest"),
            ),
            ("Goal inputs comparison:", quick_link(base_url, f"/c/{first_scan_id}/{second_scan_id}/goal-inputs")),
            (
                "Executed cacheable goals:",
                quick_link(
                    base_url,
                    f"/s/{second_scan_id}/timeline?cacheability=cacheable&outcome=SUCCESS,FAILED&sort=longest",
                ),
            ),
            (
                "Non-cacheable goals:",
                quick_link(
                    base_url,
                    f"/s/{second_scan_id}/timeline?cacheability=any_non-cacheable&outcome=SUCCESS,FAILED&sort=longest",
                ),
            ),
        ]
