"""`armcross build` (also installed as `arm32-ci`): ARM emulator cross-build of core-setup."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, NoReturn

from armcross_tooling.ci import ci_supported, run_arm32
from armcross_tooling.cli.parse_common import parse_flags, path_resolver
from armcross_tooling.config import (
    BUILD_CONFIGS,
    DEFAULT_CODE_NAMES,
    CrossBuildConfig,
    load_image_table,
    resolve_image_table,
)
from armcross_tooling.errors import ValidationError
from armcross_tooling.helpers import configure_logging

USAGE = """\
ARM Emulator Cross Build Script
This script cross builds core-setup source

Typical usage:
    core-setup source is at ~/core-setup
$ cd ~/core-setup
$ arm32-ci
    --emulatorPath=/opt/linux-arm-emulator
    --mountPath=/opt/linux-arm-emulator-root
    --buildConfig=Release
    --armel
    --verbose

Required Arguments:
    --emulatorPath=<path>              : Path of the emulator folder (without ending /)
                                         <path>/platform/rootfs-t30.ext4 should exist
    --mountPath=<path>                 : The desired path for mounting the emulator rootfs (without ending /)
                                         This path is created if not already present
    --buildConfig=<config>             : The value of config should be either Debug or Release
                                         Any other value is not accepted
Optional Arguments:
    --arm                              : Build as arm (default)
    --armel                            : Build as armel
    --linuxCodeName=<name>             : Code name for Linux: For arm, trusty (default) and xenial. For armel, tizen
    --imageTable=<path>                : YAML file overriding the docker image per arch and code name
    --projectRoot=<path>               : core-setup checkout to build (default: current directory)
    -v --verbose                       : Build made verbose
    -h --help                          : Prints this usage message and exits

Any other argument triggers an error and this usage message is displayed"""

FLAG_NAMES = {
    "emulator_path": "--emulatorPath",
    "mount_path": "--mountPath",
    "build_config": "--buildConfig",
}


def print_usage() -> None:
    print(USAGE, file=sys.stderr)


def fail_with_usage(error: Exception) -> NoReturn:
    """Print ERROR: <msg>, a blank line and the usage text; exit 1."""
    print(f"ERROR: {error}", file=sys.stderr)
    print("", file=sys.stderr)
    print_usage()
    sys.exit(1)


def build_config_value(s: str) -> str:
    """Case-insensitive Debug|Release -> debug|release."""
    value = s.lower()
    if value not in BUILD_CONFIGS:
        msg = "--buildConfig can be only Debug or Release"
        raise ValidationError(msg)
    return value


def parse_arm32_flags(argv: list[str]) -> dict[str, Any]:
    """Parse argv into a flag dict. Raises ValidationError on anything unrecognized.

    Keys: emulator_path, mount_path, build_config, linux_code_name, image_table,
    project_root, arch, verbose, help. arch is None unless --arm/--armel was given.
    """
    flags, rest = parse_flags(
        argv,
        ("emulator_path", "--emulatorPath", None, path_resolver),
        ("mount_path", "--mountPath", None, path_resolver),
        ("build_config", "--buildConfig", None, build_config_value),
        ("linux_code_name", "--linuxCodeName", None, None),
        ("image_table", "--imageTable", None, path_resolver),
        ("project_root", "--projectRoot", Path.cwd, path_resolver),
    )
    flags.update(arch=None, verbose=False, help=False)
    for arg in rest:
        if arg in ("-h", "--help"):
            flags["help"] = True
            break
        if arg in ("--arm", "--armel"):
            arch = arg[2:]
            if flags["arch"] not in (None, arch):
                msg = "--arm and --armel cannot be used together"
                raise ValidationError(msg)
            flags["arch"] = arch
        elif arg in ("-v", "--verbose"):
            flags["verbose"] = True
        else:
            msg = f"{arg} not a recognized argument"
            raise ValidationError(msg)
    return flags


def effective_code_name(flags: dict[str, Any]) -> str:
    """--linuxCodeName if given, else the arch default (trusty for arm, tizen for armel)."""
    return flags["linux_code_name"] or DEFAULT_CODE_NAMES[flags["arch"] or "arm"]


def config_from_flags(
    flags: dict[str, Any],
    required: tuple[str, ...] = ("emulator_path", "mount_path", "build_config"),
) -> CrossBuildConfig:
    """Build the immutable run config. Raises ValidationError for missing required flags."""
    for key in required:
        if flags.get(key) is None:
            msg = f"{FLAG_NAMES[key]} is required"
            raise ValidationError(msg)
    image_table = (
        load_image_table(flags["image_table"])
        if flags.get("image_table")
        else resolve_image_table(None)
    )
    return CrossBuildConfig(
        mount_path=flags["mount_path"],
        emulator_path=flags["emulator_path"],
        build_config=flags["build_config"] or "release",
        arch=flags["arch"] or "arm",
        linux_code_name=effective_code_name(flags),
        verbose=flags["verbose"],
        project_root=flags["project_root"],
        image_table=image_table,
    )


def run_arm32_argv(argv: list[str] | None = None) -> None:
    """Parse argv and run the ARM32 CI build. argv defaults to sys.argv[2:] when called from main."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    try:
        flags = parse_arm32_flags(argv)
    except ValidationError as e:
        fail_with_usage(e)
    if flags["help"]:
        print_usage()
        sys.exit(1)
    if not ci_supported(effective_code_name(flags)):
        # Not enabled for CI yet.
        sys.exit(0)

    try:
        config = config_from_flags(flags)
    except ValidationError as e:
        fail_with_usage(e)
    configure_logging(config.verbose)
    sys.exit(run_arm32(config))


def main() -> None:
    """`arm32-ci` entry point."""
    run_arm32_argv(sys.argv[1:])


if __name__ == "__main__":
    main()
