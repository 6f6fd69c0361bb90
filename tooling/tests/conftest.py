"""Pytest fixtures for armcross tooling tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from armcross_tooling.config import ROOTFS_IMAGES, CrossBuildConfig


class FakeSystem:
    """Stand-in for subprocess.run: a mount table, git HEAD/status, and sudo/docker commands.

    Every call is recorded in .calls as the argv list.
    """

    def __init__(
        self,
        mounted: set[str] | None = None,
        heads: list[str] | None = None,
        status: str = "",
        fail_mount: set[str] | None = None,
        fail_umount: set[str] | None = None,
        open_files: bool = False,
        docker_rc: int = 0,
    ) -> None:
        self.mounted = set(mounted or ())
        self.heads = list(heads or ["a" * 40])
        self.status = status
        self.fail_mount = set(fail_mount or ())
        self.fail_umount = set(fail_umount or ())
        self.open_files = open_files
        self.docker_rc = docker_rc
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], *args: Any, **kwargs: Any) -> MagicMock:
        cmd = list(cmd)
        self.calls.append(cmd)
        if cmd[0] == "mountpoint":
            return MagicMock(returncode=0 if cmd[-1] in self.mounted else 1)
        if cmd[0] == "git":
            return self._git(cmd[1:])
        if cmd[0] != "sudo":
            return MagicMock(returncode=0, stdout="", stderr="")
        tool = cmd[1]
        if tool == "mount":
            if cmd[-1] in self.fail_mount:
                return MagicMock(returncode=32)
            self.mounted.add(cmd[-1])
            return MagicMock(returncode=0)
        if tool == "umount":
            if cmd[-1] in self.fail_umount:
                return MagicMock(returncode=32)
            self.mounted.discard(cmd[-1])
            return MagicMock(returncode=0)
        if tool == "lsof":
            return MagicMock(returncode=0 if self.open_files else 1)
        if tool == "mkdir":
            Path(cmd[-1]).mkdir(parents=True, exist_ok=True)
            return MagicMock(returncode=0)
        if tool == "docker":
            return MagicMock(returncode=self.docker_rc)
        return MagicMock(returncode=0)

    def _git(self, args: list[str]) -> MagicMock:
        if args[:1] == ["rev-parse"]:
            head = self.heads.pop(0) if len(self.heads) > 1 else self.heads[0]
            return MagicMock(returncode=0, stdout=head + "\n", stderr="")
        if args == ["status", "-s"]:
            return MagicMock(returncode=0, stdout=self.status, stderr="")
        if args == ["status"]:
            return MagicMock(returncode=0, stdout="On branch main\n" + self.status, stderr="")
        return MagicMock(returncode=1, stdout="", stderr="unexpected git call")

    def commands(self, *prefix: str) -> list[list[str]]:
        """Recorded calls starting with prefix."""
        n = len(prefix)
        return [c for c in self.calls if c[:n] == list(prefix)]

    def targets(self, *prefix: str) -> list[str]:
        """Last argv element of each recorded call starting with prefix."""
        return [c[-1] for c in self.commands(*prefix)]


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., CrossBuildConfig]:
    """Factory for CrossBuildConfig rooted in tmp_path; creates the rootfs image for the arch."""

    def _make(arch: str = "arm", create_rootfs: bool = True, **kwargs: Any) -> CrossBuildConfig:
        emulator = tmp_path / "emulator"
        if create_rootfs:
            (emulator / "platform").mkdir(parents=True, exist_ok=True)
            (emulator / "platform" / ROOTFS_IMAGES[arch]).write_text("")
        project_root = tmp_path / "core-setup"
        project_root.mkdir(exist_ok=True)
        kwargs.setdefault("linux_code_name", "tizen" if arch == "armel" else "trusty")
        return CrossBuildConfig(
            mount_path=tmp_path / "emulator-root",
            emulator_path=emulator,
            arch=arch,
            project_root=project_root,
            **kwargs,
        )

    return _make


@pytest.fixture
def fake_system() -> Callable[..., FakeSystem]:
    """Factory for FakeSystem; patch subprocess.run with the result."""
    return FakeSystem
