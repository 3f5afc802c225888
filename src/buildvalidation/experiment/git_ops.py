"""Git operations: clone the project under test and read its metadata."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from buildvalidation.core.exceptions import GitError
from buildvalidation.experiment.experiment_log import get_logger

#: Timeout (seconds) for git metadata queries.
METADATA_TIMEOUT = 30

#: Max characters of git stderr included in error messages.
MAX_ERROR_CHARS = 2000


def run_git(args: list[str], cwd: Path | None = None, timeout: int = METADATA_TIMEOUT) -> tuple[bool, str]:
    """Run git command; return (success, stdout or error output)."""
    try:
        r = subprocess.run(
            ["git"] + args,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return False, "git not found"
    except subprocess.TimeoutExpired:
        return False, f"timeout ({timeout}s)"
    if r.returncode != 0:
        return False, (r.stderr or r.stdout or f"exit {r.returncode}").strip()
    return True, (r.stdout or "").strip()


def clone_project(
    git_repo: str,
    dest: Path,
    branch: str = "",
    depth: int = 1,
    timeout: int = 600,
    base_dir: Path | None = None,
) -> Path:
    """Clone git_repo into dest, replacing any earlier clone. Raises GitError on failure.

    When base_dir is given, dest must resolve to a directory strictly below it;
    anything else is refused before the earlier clone is deleted.
    """
    log = get_logger()
    dest = Path(dest)
    if base_dir is not None:
        base = Path(base_dir).resolve()
        target = dest.resolve()
        if target == base or base not in target.parents:
            raise GitError(f"Refusing to clone into {dest}: not a directory below {base_dir}")
    if dest.exists():
        log.info("Removing previous clone: %s", dest)
        shutil.rmtree(dest)

    args = ["clone"]
    if depth > 0:
        args.append(f"--depth={depth}")
    if branch:
        args += ["--branch", branch]
    args += [git_repo, str(dest)]
    log.info("git %s", " ".join(args))

    ok, out = run_git(args, timeout=timeout)
    if not ok:
        log.error("Clone failed: %s", out)
        raise GitError(f"Unable to clone from {git_repo}: {out[:MAX_ERROR_CHARS]}")
    log.info("Cloned %s into %s", git_repo, dest)
    return dest


def commit_id(repo_dir: Path, length: int = 8) -> str:
    """Short commit id of HEAD, or an empty string if it cannot be read."""
    ok, out = run_git(["rev-parse", f"--short={length}", "--verify", "HEAD"], cwd=repo_dir)
    return out if ok else ""


def branch_name(repo_dir: Path) -> str:
    """Current branch name, or an empty string if it cannot be read."""
    ok, out = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo_dir)
    return out if ok else ""


def status_porcelain(repo_dir: Path) -> str:
    """Output of ``git status --porcelain`` (empty when the tree is clean or unreadable)."""
    ok, out = run_git(["status", "--porcelain"], cwd=repo_dir)
    return out if ok else ""
