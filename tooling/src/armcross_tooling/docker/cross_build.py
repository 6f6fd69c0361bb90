"""Cross-build core-setup inside the prereqs Docker image: build the rootfs, then build.sh."""

from __future__ import annotations

import getpass
import logging
import subprocess
from pathlib import Path

from armcross_tooling.config import CrossBuildConfig
from armcross_tooling.errors import CrossBuildError
from armcross_tooling.helpers import format_command

log = logging.getLogger(__name__)

CONTAINER_WORKDIR = "/opt/core-setup"


def docker_command(config: CrossBuildConfig) -> list[str]:
    """`docker run` prefix: privileged, repo bind-mounted at CONTAINER_WORKDIR."""
    return [
        "sudo",
        "docker",
        "run",
        "--privileged",
        "-i",
        "--rm",
        "-v",
        f"{config.project_root}:{CONTAINER_WORKDIR}",
        "-w",
        CONTAINER_WORKDIR,
        config.docker_image,
    ]


def rootfs_build_command(config: CrossBuildConfig) -> list[str]:
    return ["./cross/build-rootfs.sh", config.arch, config.linux_code_name, "--skipunmount"]


def core_setup_build_command(config: CrossBuildConfig) -> list[str]:
    env_vars = ",".join(
        [
            "DISABLE_CROSSGEN=1",
            f"TARGETPLATFORM={config.arch}",
            f"TARGETRID={config.target_rid}",
            "CROSS=1",
        ]
    )
    return ["./build.sh", "--env-vars", env_vars]


def _run(cmd: list[str], cwd: Path, what: str) -> None:
    log.debug("+ %s", format_command(cmd))
    try:
        r = subprocess.run(cmd, cwd=str(cwd))
    except OSError as e:
        msg = f"{what} could not start: {e}"
        raise CrossBuildError(msg) from e
    if r.returncode != 0:
        msg = f"{what} failed (exit {r.returncode})"
        raise CrossBuildError(msg)


def build_rootfs(config: CrossBuildConfig) -> None:
    """Build cross/rootfs in the container, then hand it back to the invoking user."""
    print(f"Build RootFS for {config.arch} {config.linux_code_name}")
    _run(
        docker_command(config) + rootfs_build_command(config),
        config.project_root,
        "RootFS build",
    )
    _run(
        ["sudo", "chown", "-R", getpass.getuser(), "cross/rootfs"],
        config.project_root,
        "chown of cross/rootfs",
    )


def build_core_setup(config: CrossBuildConfig) -> None:
    _run(
        docker_command(config) + core_setup_build_command(config),
        config.project_root,
        "core-setup build",
    )


def run(config: CrossBuildConfig) -> None:
    """Rootfs then core-setup. Raises CrossBuildError on the first failing step."""
    build_rootfs(config)
    build_core_setup(config)
