"""Docker helpers: run the rootfs and core-setup builds in the cross prereqs image."""

from armcross_tooling.config import select_image

from .cross_build import (
    build_core_setup,
    build_rootfs,
    core_setup_build_command,
    docker_command,
    rootfs_build_command,
)
from .cross_build import run as run_cross_build

__all__ = [
    "build_core_setup",
    "build_rootfs",
    "core_setup_build_command",
    "docker_command",
    "rootfs_build_command",
    "run_cross_build",
    "select_image",
]
