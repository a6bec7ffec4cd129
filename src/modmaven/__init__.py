"""Generate and cache derived modding artifacts and publish them into a local
Maven-style repository.

The pipeline is: a `Repo` decides which artifacts a module needs, wraps the
work for each in a memoized `Task`, and `Repo.output` publishes the results
with a hash sidecar next to every file.
"""

from .artifact import Artifact
from .cache import Cache
from .errors import (
    ArtifactGenerationError,
    InvalidVersionError,
    ModMavenError,
    SourceNotFoundError,
    TaskNotResolvedError,
    UnsupportedModuleError,
)
from .repo import OutputArtifact, PendingArtifact, Repo, repository
from .task import Task, TaskState
from .version import MappingVersion

__all__ = [
    "Artifact",
    "ArtifactGenerationError",
    "Cache",
    "InvalidVersionError",
    "MappingVersion",
    "ModMavenError",
    "OutputArtifact",
    "PendingArtifact",
    "Repo",
    "SourceNotFoundError",
    "Task",
    "TaskNotResolvedError",
    "TaskState",
    "UnsupportedModuleError",
    "repository",
]
