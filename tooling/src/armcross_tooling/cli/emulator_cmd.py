"""`armcross mount` / `armcross unmount`: bring the emulator chroot up or down without building."""

from __future__ import annotations

import sys

from armcross_tooling.ci import run_mount, run_unmount
from armcross_tooling.cli.arm32_cmd import (
    config_from_flags,
    fail_with_usage,
    parse_arm32_flags,
    print_usage,
)
from armcross_tooling.errors import ValidationError
from armcross_tooling.helpers import configure_logging

REQUIRED = {
    "mount": ("emulator_path", "mount_path"),
    "unmount": ("mount_path",),
}


def run_emulator_argv(cmd: str, argv: list[str] | None = None) -> None:
    """Parse flags for mount/unmount and run. argv defaults to sys.argv[2:] when called from main."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    try:
        flags = parse_arm32_flags(argv)
        if flags["help"]:
            print_usage()
            sys.exit(1)
        config = config_from_flags(flags, required=REQUIRED[cmd])
    except ValidationError as e:
        fail_with_usage(e)
    configure_logging(config.verbose)
    rc = run_mount(config) if cmd == "mount" else run_unmount(config)
    sys.exit(rc)
