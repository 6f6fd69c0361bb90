"""Shared CLI argument parsing for --flag=value options (--emulatorPath=, --mountPath=, etc.)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any


def parse_flags(
    argv: list[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
) -> tuple[dict[str, Any], list[str]]:
    """Parse --flag=value options from argv in one pass.

    Each spec is (key, flag_str, default, converter).
    E.g. ("mount_path", "--mountPath", None, path_resolver).
    converter can be None for string values. An empty value (--flag=) keeps the default.
    Returns (dict of key -> value, remaining argv in order).
    """
    result: dict[str, Any] = {}
    for key, _flag, default, _converter in specs:
        result[key] = default() if callable(default) else default

    rest: list[str] = []
    for arg in argv:
        flag, sep, value = arg.partition("=")
        matched = False
        if sep:
            for key, flag_str, _default, converter in specs:
                if flag == flag_str:
                    if value:
                        result[key] = converter(value) if converter else value
                    matched = True
                    break
        if not matched:
            rest.append(arg)
    return result, rest


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --emulatorPath, --mountPath)."""
    return Path(s).expanduser().resolve()
