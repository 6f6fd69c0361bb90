"""Termination guard: cleanup that runs exactly once on return, error, SIGINT or SIGTERM."""

from __future__ import annotations

import logging
import signal
from contextlib import ExitStack
from types import FrameType
from typing import Any

from armcross_tooling.errors import BuildInterrupted

log = logging.getLogger(__name__)

GUARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationGuard(ExitStack):
    """ExitStack that turns SIGINT/SIGTERM into BuildInterrupted while active.

    Register cleanup with callback() / enter_context() as resources are acquired.
    Callbacks run LIFO, once, on every way out of the with block. Signals that
    arrive during cleanup are logged and ignored so cleanup can finish.
    """

    def __init__(self, signals: tuple[signal.Signals, ...] = GUARDED_SIGNALS) -> None:
        super().__init__()
        self._signals = signals
        self._previous: dict[int, Any] = {}

    def __enter__(self) -> TerminationGuard:
        super().__enter__()
        for sig in self._signals:
            self._previous[sig] = signal.signal(sig, self._interrupt)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        for sig in self._signals:
            signal.signal(sig, self._ignore)
        if isinstance(exc, BuildInterrupted):
            print(f"ERROR: {exc}")
        print("The script is exited. Cleaning environment..")
        try:
            return super().__exit__(exc_type, exc, tb)
        finally:
            self._restore()

    def _interrupt(self, signum: int, frame: FrameType | None) -> None:
        raise BuildInterrupted(signum)

    def _ignore(self, signum: int, frame: FrameType | None) -> None:
        log.warning("Signal %d received during cleanup; finishing cleanup first", signum)

    def _restore(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
