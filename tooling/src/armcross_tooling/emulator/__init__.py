"""Emulator chroot: mount lifecycle and termination guard."""

from .guard import TerminationGuard
from .mounts import (
    MountSpec,
    emulator_mount_specs,
    emulator_mounts,
    emulator_unmount_targets,
    ensure_mount,
    ensure_unmount,
    is_mounted,
    mount_emulator,
    unmount_emulator,
)

__all__ = [
    "MountSpec",
    "TerminationGuard",
    "emulator_mount_specs",
    "emulator_mounts",
    "emulator_unmount_targets",
    "ensure_mount",
    "ensure_unmount",
    "is_mounted",
    "mount_emulator",
    "unmount_emulator",
]
