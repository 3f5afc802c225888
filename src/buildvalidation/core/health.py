"""Health checks for the tools an experiment needs: git, a JVM, and the Gradle Enterprise server setting."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from buildvalidation.core.config import ConfigManager


@dataclass
class HealthCheckResult:
    """Result of a single health check."""

    name: str
    ok: bool
    message: str = ""
    suggestion: str = ""


def _run_cmd(cmd: list[str], timeout: int = 10) -> tuple[bool, str]:
    """Run command, return (success, output_or_error)."""
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return False, "command not found"
    except subprocess.TimeoutExpired:
        return False, "timeout"
    # java -version prints to stderr
    output = (result.stdout or result.stderr or "").strip()
    if result.returncode == 0:
        return True, output
    return False, output or f"exit code {result.returncode}"


class HealthChecker:
    """Run health checks for git, java, and the server configuration."""

    def __init__(self, config: ConfigManager | None = None) -> None:
        self._config = config or ConfigManager()

    def check_git(self) -> HealthCheckResult:
        """Check that git is on PATH (needed to clone the project)."""
        ok, out = _run_cmd(["git", "--version"])
        if ok:
            return HealthCheckResult(name="git", ok=True, message=out)
        return HealthCheckResult(
            name="git",
            ok=False,
            message=f"git --version failed: {out}",
            suggestion="Install git and make sure it is on PATH.",
        )

    def check_java(self) -> HealthCheckResult:
        """Check that a JVM is available (Gradle and Maven both need one)."""
        ok, out = _run_cmd(["java", "-version"])
        if ok:
            return HealthCheckResult(name="java", ok=True, message=out.splitlines()[0] if out else "OK")
        return HealthCheckResult(
            name="java",
            ok=False,
            message=f"java -version failed: {out}",
            suggestion="Install a JDK and set JAVA_HOME, or add java to PATH.",
        )

    def check_server(self, server: str | None = None) -> HealthCheckResult:
        """Report the Gradle Enterprise server scans are published to. Never fails; the build may configure it."""
        server = server or self._config.config.gradle_enterprise_server
        if server:
            return HealthCheckResult(name="server", ok=True, message=f"Gradle Enterprise server: {server}")
        return HealthCheckResult(
            name="server",
            ok=True,
            message="No Gradle Enterprise server configured; the server configured in the build is used.",
            suggestion="Pass --gradle-enterprise-server or set GRADLE_ENTERPRISE_SERVER in .env to override it.",
        )

    def check_all(self, *, skip_java: bool = False, server: str | None = None) -> list[HealthCheckResult]:
        """Run all enabled checks."""
        results = [self.check_git()]
        if not skip_java:
            results.append(self.check_java())
        results.append(self.check_server(server))
        return results
