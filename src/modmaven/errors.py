"""Error kinds raised by the artifact pipeline.

Every error carries a `retryable` flag so callers can tell a transient
publishing failure from a request that will never succeed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .artifact import Artifact


class ModMavenError(Exception):
    retryable = False


class InvalidVersionError(ModMavenError, ValueError):
    """The version string does not match the mapping version grammar."""


class TaskNotResolvedError(ModMavenError, RuntimeError):
    """`Task.get()` was called before the task was executed."""


class UnsupportedModuleError(ModMavenError, LookupError):
    """No registered repository handles the requested module."""


class SourceNotFoundError(ModMavenError, FileNotFoundError):
    """Input files a repository publishes from are missing."""


class ArtifactGenerationError(ModMavenError):
    """Producing or publishing a single artifact failed.

    `stage` is ``"compute"`` when the artifact's task raised and ``"publish"``
    when copying or hashing into the output repository failed. The original
    exception is chained as ``__cause__``.
    """

    retryable = True

    def __init__(self, artifact: "Artifact", stage: str, cause: BaseException):
        self.artifact = artifact
        self.stage = stage
        self.cause = cause
        super().__init__(f"Failed to generate artifact: {artifact} ({stage}): {cause}")
