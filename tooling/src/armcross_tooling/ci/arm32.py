"""ARM32 emulator CI run: preconditions, guarded mount + containerized build, git HEAD check.

Order of a run:
  1. xenial/tizen short-circuit (exit 0, nothing touched)
  2. under TerminationGuard: HEAD snapshot, cleanup registered (HEAD check, then
     unmount), clean working tree, rootfs image present, mounts, rootfs +
     core-setup build; cleanup unmounts, then checks HEAD
"""

from __future__ import annotations

import logging
import sys

from armcross_tooling.config import UNSUPPORTED_CI_CODE_NAMES, CrossBuildConfig, select_image
from armcross_tooling.docker import run_cross_build
from armcross_tooling.emulator import (
    TerminationGuard,
    mount_emulator,
    unmount_emulator,
)
from armcross_tooling.errors import BuildInterrupted, CrossBuildError
from armcross_tooling.git_state import (
    capture_head,
    check_head,
    git_status,
    uncommitted_changes,
)
from armcross_tooling.helpers import path_exists

log = logging.getLogger(__name__)


def ci_supported(code_name: str) -> bool:
    """False for code names whose CI build is not enabled yet."""
    return code_name not in UNSUPPORTED_CI_CODE_NAMES


def _check_clean_tree(config: CrossBuildConfig) -> bool:
    if not uncommitted_changes(config.project_root):
        return True
    print(
        "ERROR: There are some uncommited changes. "
        "To avoid losing these changes commit them and try again.",
        file=sys.stderr,
    )
    print("", file=sys.stderr)
    print(git_status(config.project_root), file=sys.stderr)
    return False


def _check_rootfs(config: CrossBuildConfig) -> bool:
    if path_exists(config.rootfs_image):
        return True
    print(
        "ERROR: Path specified in --emulatorPath does not have the rootfs "
        f"({config.rootfs_image})",
        file=sys.stderr,
    )
    return False


def _guarded_build(config: CrossBuildConfig) -> bool:
    """Preconditions, mount and build, all under one TerminationGuard. False on a failed check."""
    with TerminationGuard() as guard:
        snapshot = capture_head(config.project_root)
        guard.callback(check_head, snapshot, config.project_root)
        guard.callback(unmount_emulator, config)
        if not _check_clean_tree(config) or not _check_rootfs(config):
            return False
        print(f"Git HEAD @ {snapshot.commit}")
        mount_emulator(config)
        print("Building core-setup...")
        run_cross_build(config)
        print("Cleaning environment...")
    return True


def run(config: CrossBuildConfig) -> int:
    """Run the full CI cross-build. Returns 0 or 1."""
    if not ci_supported(config.linux_code_name):
        log.info("CI build for %s is not enabled; nothing to do", config.linux_code_name)
        return 0
    try:
        select_image(config.arch, config.linux_code_name, config.image_table)
        if not _guarded_build(config):
            return 1
    except BuildInterrupted:
        return 1
    except CrossBuildError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    print("Build complete")
    return 0


def run_mount(config: CrossBuildConfig) -> int:
    """Bring the emulator mounts up and leave them up. Returns 0 or 1."""
    try:
        if not _check_rootfs(config):
            return 1
        mount_emulator(config)
    except CrossBuildError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        print(
            f"Partial mounts may remain under {config.rootfs_mount_path}; "
            "run `armcross unmount` with the same flags.",
            file=sys.stderr,
        )
        return 1
    print(f"Emulator mounted at {config.rootfs_mount_path}")
    return 0


def run_unmount(config: CrossBuildConfig) -> int:
    """Tear the emulator mounts down. Unmount failures are reported, not fatal. Returns 0."""
    unmount_emulator(config)
    return 0
