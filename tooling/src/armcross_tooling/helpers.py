"""Shared helpers for armcross_tooling (logging setup, command echo, paths)."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

LOG_FORMAT = "[%(levelname)s] %(message)s"

# --- Logging ---


def configure_logging(verbose: bool = False) -> None:
    """Root logging for CLI runs: DEBUG with --verbose (echoes every command), WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


# --- Commands ---


def format_command(cmd: list[str]) -> str:
    """Shell-quoted command line for debug echo (the `set -x` view of a run)."""
    return shlex.join(cmd)


# --- Path ---


def path_exists(p: Path) -> bool:
    """True for an existing file or directory."""
    return p.is_file() or p.is_dir()
