"""Git working-tree checks around a cross-build.

The build applies and reverts patches in the source tree, so the tree must be
clean before the run and HEAD must be unchanged after it.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from armcross_tooling.errors import IntegrityError, PreconditionError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitHeadSnapshot:
    """HEAD commit id captured once at the start of a run."""

    commit: str


def _git(args: list[str], project_root: Path) -> str:
    cmd = ["git", *args]
    try:
        r = subprocess.run(cmd, cwd=str(project_root), capture_output=True, text=True)
    except OSError as e:
        msg = f"git not available: {e}"
        raise PreconditionError(msg) from e
    if r.returncode != 0:
        msg = f"git {' '.join(args)} failed in {project_root}: {(r.stderr or r.stdout).strip()}"
        raise PreconditionError(msg)
    return r.stdout


def current_head(project_root: Path) -> str:
    """`git rev-parse --verify HEAD`."""
    return _git(["rev-parse", "--verify", "HEAD"], project_root).strip()


def capture_head(project_root: Path) -> GitHeadSnapshot:
    snapshot = GitHeadSnapshot(current_head(project_root))
    log.debug("Captured git HEAD %s", snapshot.commit)
    return snapshot


def uncommitted_changes(project_root: Path) -> str:
    """Short status of the working tree; empty string when clean."""
    return _git(["status", "-s"], project_root).strip()


def git_status(project_root: Path) -> str:
    """Long-form `git status`, shown to the user when the tree is dirty."""
    return _git(["status"], project_root)


def check_head(snapshot: GitHeadSnapshot, project_root: Path) -> None:
    """Raise IntegrityError if HEAD moved since snapshot."""
    current = current_head(project_root)
    if current != snapshot.commit:
        msg = (
            "Some changes made to the code history were not completely reverted. "
            f"Intial Git HEAD: {snapshot.commit}, current Git HEAD: {current}"
        )
        raise IntegrityError(msg)
    log.debug("Git HEAD unchanged at %s", current)
