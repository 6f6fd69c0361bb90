"""CI automation: the ARM32 emulator cross-build run and standalone mount/unmount."""

from .arm32 import ci_supported, run_mount, run_unmount
from .arm32 import run as run_arm32

__all__ = [
    "ci_supported",
    "run_arm32",
    "run_mount",
    "run_unmount",
]
