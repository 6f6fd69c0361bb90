"""Error types for the ARM emulator cross-build.

Validation and precondition errors stop the run before anything is mounted.
Mount and build errors abort the run. Integrity errors are raised by the
end-of-run git HEAD check and win over the run's own outcome.
Unmount failures are never raised; see emulator.mounts.ensure_unmount.
"""

from __future__ import annotations


class CrossBuildError(Exception):
    """Base class for fatal cross-build errors."""


class ValidationError(CrossBuildError):
    """Bad or unsupported input. Usage text follows only for flag errors caught by the CLI."""


class PreconditionError(CrossBuildError):
    """The environment is not fit for a build (dirty tree, missing rootfs)."""


class MountError(CrossBuildError):
    """A mount command failed. The chroot is inconsistent and must not be used."""


class IntegrityError(CrossBuildError):
    """Git HEAD moved between the start and the end of the run."""


class BuildInterrupted(CrossBuildError):
    """SIGINT or SIGTERM arrived while the termination guard was active."""

    def __init__(self, signum: int) -> None:
        self.signum = signum
        super().__init__("Ctrl-C handled. Script aborted before complete execution.")
