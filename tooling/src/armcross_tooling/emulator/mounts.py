"""Mount lifecycle for the ARM emulator chroot: rootfs image plus proc, dev, dev/pts, shm, sys.

Mount state is never cached: every ensure_* call asks `mountpoint -q` first, so
mount/unmount are idempotent and safe to retry after a crashed run.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from armcross_tooling.config import CrossBuildConfig
from armcross_tooling.errors import MountError
from armcross_tooling.helpers import format_command

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MountSpec:
    """One `sudo mount <options> <source> <target>` operation."""

    options: str
    source: str
    target: Path

    def command(self) -> list[str]:
        return ["sudo", "mount", *self.options.split(), self.source, str(self.target)]


def emulator_mount_specs(config: CrossBuildConfig) -> list[MountSpec]:
    """The six mounts in mount order. Targets are always children of the rootfs mount path."""
    root = config.rootfs_mount_path
    return [
        MountSpec("", str(config.rootfs_image), root),
        MountSpec("-t proc", "/proc", root / "proc"),
        MountSpec("-o bind", "/dev/", root / "dev"),
        MountSpec("-o bind", "/dev/pts", root / "dev" / "pts"),
        MountSpec("-t tmpfs", "shm", root / "run" / "shm"),
        MountSpec("-o bind", "/sys", root / "sys"),
    ]


def emulator_unmount_targets(config: CrossBuildConfig) -> list[Path]:
    """Targets in unmount order: children first (dev/pts before dev), rootfs last."""
    root = config.rootfs_mount_path
    return [
        root / "proc",
        root / "dev" / "pts",
        root / "dev",
        root / "run" / "shm",
        root / "sys",
        root,
    ]


def is_mounted(target: Path) -> bool:
    """Live check via `mountpoint -q -- target`."""
    r = subprocess.run(["mountpoint", "-q", "--", str(target)], capture_output=True)
    return r.returncode == 0


def ensure_mount(spec: MountSpec) -> bool:
    """Mount spec unless target is already a mountpoint. Returns True if a mount was made.

    Raises MountError when the mount command fails; there is no retry.
    """
    try:
        if is_mounted(spec.target):
            print(f"{spec.target} is already mounted.")
            return False
        cmd = spec.command()
        log.debug("+ %s", format_command(cmd))
        r = subprocess.run(cmd)
    except OSError as e:
        msg = f"Cannot mount {spec.source} on {spec.target}: {e}"
        raise MountError(msg) from e
    if r.returncode != 0:
        msg = f"Mounting {spec.source} on {spec.target} failed (exit {r.returncode})"
        raise MountError(msg)
    return True


def _report_open_files(target: Path) -> None:
    # Diagnostic only; never blocks the unmount.
    if not target.is_dir():
        return
    cmd = ["sudo", "lsof", "+D", str(target)]
    log.debug("+ %s", format_command(cmd))
    try:
        r = subprocess.run(cmd)
    except OSError as e:
        log.debug("lsof not available for %s: %s", target, e)
        return
    if r.returncode == 0:
        print("See above for lsof information. Continuing with the build.")


def ensure_unmount(target: Path) -> bool:
    """Unmount target if it is a mountpoint. Returns True if an unmount was made.

    Never raises: a failed unmount is reported and the run carries on, so cleanup
    cannot hide the build's own result.
    """
    _report_open_files(target)
    try:
        if not is_mounted(target):
            log.debug("%s is not mounted", target)
            return False
        cmd = ["sudo", "umount", str(target)]
        log.debug("+ %s", format_command(cmd))
        r = subprocess.run(cmd)
    except OSError as e:
        log.warning("Could not unmount %s: %s", target, e)
        print(f"WARNING: could not unmount {target}: {e}", file=sys.stderr)
        return False
    if r.returncode != 0:
        log.warning("umount %s exited with %d", target, r.returncode)
        print(f"WARNING: failed to unmount {target}", file=sys.stderr)
        return False
    return True


def mount_emulator(config: CrossBuildConfig) -> None:
    """Create the rootfs mount dir if needed, then mount root, proc, dev, dev/pts, shm, sys."""
    root = config.rootfs_mount_path
    if not root.is_dir():
        cmd = ["sudo", "mkdir", "-p", str(root)]
        log.debug("+ %s", format_command(cmd))
        try:
            r = subprocess.run(cmd)
        except OSError as e:
            msg = f"Cannot create mount path {root}: {e}"
            raise MountError(msg) from e
        if r.returncode != 0:
            msg = f"Cannot create mount path {root} (exit {r.returncode})"
            raise MountError(msg)
    for spec in emulator_mount_specs(config):
        ensure_mount(spec)


def unmount_emulator(config: CrossBuildConfig) -> None:
    """Unmount every emulator target, children before the rootfs. Never raises."""
    print("Unmounting emulator...")
    for target in emulator_unmount_targets(config):
        ensure_unmount(target)


@contextmanager
def emulator_mounts(config: CrossBuildConfig) -> Iterator[None]:
    """Mount the emulator for the duration of the block; unmount on any exit, even a failed mount."""
    try:
        mount_emulator(config)
        yield
    finally:
        unmount_emulator(config)
