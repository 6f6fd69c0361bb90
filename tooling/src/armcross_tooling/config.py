"""Cross-build configuration: arch tables, docker image table, immutable run config.

The image table maps arch -> code name -> {image, runtime_os}. A YAML file passed
with --imageTable is merged over DEFAULT_IMAGE_TABLE, e.g.:

    arm:
      trusty:
        image: myregistry/prereqs:ubuntu1404
        runtime_os: ubuntu.14.04
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from armcross_tooling.errors import ValidationError

BUILD_CONFIGS = ("debug", "release")

# Code names the CI cannot build yet; the run exits 0 without doing anything.
UNSUPPORTED_CI_CODE_NAMES = frozenset({"xenial", "tizen"})

ROOTFS_IMAGES: dict[str, str] = {
    "arm": "rootfs-u1404.ext4",
    "armel": "rootfs-t30.ext4",
}

DEFAULT_CODE_NAMES: dict[str, str] = {
    "arm": "trusty",
    "armel": "tizen",
}

DEFAULT_IMAGE_TABLE: dict[str, dict[str, dict[str, str]]] = {
    "arm": {
        "trusty": {
            "image": "microsoft/dotnet-buildtools-prereqs:ubuntu1404_cross_prereqs_v1",
            "runtime_os": "ubuntu.14.04",
        },
        "xenial": {
            "image": "microsoft/dotnet-buildtools-prereqs:ubuntu1604_cross_prereqs_v1",
            "runtime_os": "ubuntu.16.04",
        },
    },
    "armel": {
        "tizen": {
            "image": "t2wish/dotnetcore:ubuntu1404_cross_prereqs_v2",
            "runtime_os": "tizen.4.0.0",
        },
    },
}


def resolve_image_table(
    overrides: dict[str, Any] | None,
) -> dict[str, dict[str, dict[str, str]]]:
    """Return DEFAULT_IMAGE_TABLE with overrides merged per (arch, code name)."""
    out = {
        arch: {name: dict(entry) for name, entry in names.items()}
        for arch, names in DEFAULT_IMAGE_TABLE.items()
    }
    if not overrides:
        return out
    for arch, names in overrides.items():
        if not isinstance(names, dict):
            msg = f"Image table entry for {arch!r} must be a mapping"
            raise ValidationError(msg)
        for name, entry in names.items():
            if not isinstance(entry, dict) or "image" not in entry or "runtime_os" not in entry:
                msg = f"Image table entry {arch}/{name} needs 'image' and 'runtime_os'"
                raise ValidationError(msg)
            out.setdefault(str(arch), {})[str(name)] = {
                "image": str(entry["image"]).strip(),
                "runtime_os": str(entry["runtime_os"]),
            }
    return out


def load_image_table(path: Path) -> dict[str, dict[str, dict[str, str]]]:
    """Load a YAML image table and merge it over the defaults."""
    import yaml

    if not path.is_file():
        msg = f"Image table not found: {path}"
        raise ValidationError(msg)
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        msg = f"Could not parse image table {path}: {e}"
        raise ValidationError(msg) from e
    if not isinstance(data, dict):
        msg = f"Image table {path} must be a mapping of arch -> code name"
        raise ValidationError(msg)
    return resolve_image_table(data)


@dataclass(frozen=True)
class CrossBuildConfig:
    """Everything a run needs, built once from argv and passed to every step."""

    mount_path: Path
    emulator_path: Path | None = None
    build_config: str = "release"
    arch: str = "arm"
    linux_code_name: str = "trusty"
    verbose: bool = False
    project_root: Path = field(default_factory=Path.cwd)
    image_table: dict[str, dict[str, dict[str, str]]] = field(
        default_factory=lambda: resolve_image_table(None), compare=False
    )

    def __post_init__(self) -> None:
        if self.build_config not in BUILD_CONFIGS:
            msg = "--buildConfig can be only Debug or Release"
            raise ValidationError(msg)
        if self.arch not in ROOTFS_IMAGES:
            msg = f"unknown buildArch {self.arch}"
            raise ValidationError(msg)

    @property
    def rootfs_image(self) -> Path:
        """<emulator_path>/platform/<rootfs image for arch>."""
        if self.emulator_path is None:
            msg = "--emulatorPath is required"
            raise ValidationError(msg)
        return self.emulator_path / "platform" / ROOTFS_IMAGES[self.arch]

    @property
    def rootfs_mount_path(self) -> Path:
        """Mount point of the rootfs: mount path suffixed with _<arch>."""
        return Path(f"{self.mount_path}_{self.arch}")

    @property
    def docker_image(self) -> str:
        return select_image(self.arch, self.linux_code_name, self.image_table)[0]

    @property
    def runtime_os(self) -> str:
        return select_image(self.arch, self.linux_code_name, self.image_table)[1]

    @property
    def target_rid(self) -> str:
        """Target runtime identifier passed to build.sh, e.g. ubuntu.14.04-arm."""
        return f"{self.runtime_os}-{self.arch}"


def select_image(
    arch: str,
    code_name: str,
    image_table: dict[str, dict[str, dict[str, str]]] | None = None,
) -> tuple[str, str]:
    """Return (docker_image, runtime_os) for arch/code name. Raises ValidationError if unsupported."""
    table = image_table if image_table is not None else DEFAULT_IMAGE_TABLE
    entry = table.get(arch, {}).get(code_name)
    if entry is None:
        msg = f"{code_name} is not a supported linux name for {arch}"
        raise ValidationError(msg)
    return entry["image"], entry["runtime_os"]
