"""Gradle: command line, isolated local build cache, and dashboard links."""

from __future__ import annotations

from pathlib import Path

from buildvalidation.tools.common import find_executable, quick_link

#: Init script that points the build at the experiment's local cache and disables the remote cache.
INIT_SCRIPT = Path(__file__).resolve().parent.parent / "resources" / "gradle" / "use-local-build-cache-only.gradle"

#: System properties read by the init script.
CACHE_DIR_PROPERTY = "build_validation.local_cache_dir"
SERVER_PROPERTY = "build_validation.server"


class GradleTool:
    """Drives ``./gradlew`` (or ``gradle``) for the local build caching experiment."""

    name = "gradle"
    display_name = "Gradle"
    work_unit = "task"
    scan_tag = "exp2-gradle"

    def executable(self, build_dir: Path, use_wrapper: bool = True) -> str:
        return find_executable(build_dir, "gradlew", "gradle", use_wrapper=use_wrapper)

    def build_args(
        self,
        run_num: int,
        cache_dir: Path,
        tasks: list[str],
        system_properties: list[str],
        extra_args: list[str],
        server: str | None = None,
    ) -> list[str]:
        """First run uses --rerun-tasks so every cacheable task stores its output in the empty cache."""
        args = ["--build-cache"]
        if run_num == 1:
            args.append("--rerun-tasks")
        args += [
            "--scan",
            "--init-script",
            str(INIT_SCRIPT),
            f"-D{CACHE_DIR_PROPERTY}={cache_dir}",
        ]
        if server:
            args.append(f"-D{SERVER_PROPERTY}={server}")
        args += system_properties
        args += extra_args
        args += ["clean", *tasks]
        return args

    def quick_links(self, base_url: str, first_scan_id: str, second_scan_id: str) -> list[tuple[str, str]]:
        return [
            ("Task execution overview:", quick_link(base_url, f"/s/{second_scan_id}/performance/execution")),
            ("Cache performance:", quick_link(base_url, f"/s/{second_scan_id}/performance/build-cache")),
            (
                "Executed tasks timeline:",
                quick_link(base_url, f"/s/{second_scan_id}/timeline?outcome=SUCCESS,FAILED&sort=longest"),
            ),
            ("Task inputs comparison:", quick_link(base_url, f"/c/{first_scan_id}/{second_scan_id}/task-inputs")),
            (
                "Executed cacheable tasks:",
                quick_link(
                    base_url,
                    f"/s/{second_scan_id}/timeline?cacheableFilter=cacheable&outcomeFilter=SUCCESS,FAILED&sorted=longest",
                ),
            ),
            (
                "Non-cacheable tasks:",
                quick_link(
                    base_url,
                    f"/s/{second_scan_id}/timeline?cacheableFilter=any_non-cacheable&outcomeFilter=SUCCESS,FAILED&sorted=longest",
                ),
            ),
        ]
