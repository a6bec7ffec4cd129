"""Repository base class: turns pending artifacts into published files.

A repository decides, for a module and version, which artifacts must exist
and wraps the work for each in a `Task`. `Repo.output` then resolves the tasks
in order and publishes the results into the output repository with a hash
sidecar next to every file.
"""

from __future__ import annotations

import fnmatch
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from . import cache as cache_mod
from .artifact import Artifact
from .cache import Cache
from .errors import ArtifactGenerationError
from .logging import NestedLogger, get_logger
from .pom import build_pom
from .task import Task
from .utils import hash_algorithm, slugify


@dataclass(frozen=True)
class PendingArtifact:
    message: str
    task: Task
    artifact: Artifact

    def get(self, log: Optional[NestedLogger] = None) -> Path:
        if self.task.resolved():
            return self.task.get()
        log = log or get_logger("modmaven.repo")
        log.info(self.message)
        with log.nested():
            return self.task.execute(log)


@dataclass(frozen=True)
class OutputArtifact:
    file: Path
    artifact: Artifact


def repository(*modules: str):
    """Class decorator registering the module patterns a repo handles.

    Patterns are ``group:name`` strings and may use shell-style wildcards.
    """

    def deco(cls):
        cls.modules = tuple(modules)
        cls._repo_spec = True
        return cls

    return deco


class Repo(ABC):
    modules: tuple = ()

    def __init__(
        self,
        cache: Cache,
        output: Path,
        params: Optional[dict] = None,
        log: Optional[NestedLogger] = None,
    ):
        self.cache = cache
        self.output_root = Path(output)
        self.params = params or {}
        self.log = log or get_logger(f"modmaven.repo.{type(self).__name__}")

    @classmethod
    def handles(cls, module: str, params: dict) -> bool:
        return any(fnmatch.fnmatchcase(module, pat) for pat in cls.modules)

    @abstractmethod
    def process(self, module: str, version: str) -> List[OutputArtifact]:
        """Build and publish every artifact for `module` at `version`."""

    @staticmethod
    def pending(message: str, task: Task, artifact: Artifact) -> PendingArtifact:
        return PendingArtifact(message, task, artifact)

    def output(self, *pending: PendingArtifact) -> List[OutputArtifact]:
        algorithm = hash_algorithm(self.params)
        outputs: List[OutputArtifact] = []
        for p in pending:
            try:
                source = p.get(self.log)
            except Exception as e:
                raise ArtifactGenerationError(p.artifact, "compute", e) from e

            target = self.output_root / p.artifact.path
            try:
                if not target.resolve().is_relative_to(self.output_root.resolve()):
                    raise ValueError(f"Artifact path escapes the output repository: {p.artifact.path}")
                self._publish(Path(source), target, algorithm)
            except Exception as e:
                raise ArtifactGenerationError(p.artifact, "publish", e) from e
            outputs.append(OutputArtifact(target, p.artifact))
        return outputs

    def _publish(self, source: Path, target: Path, algorithm: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists() and cache_mod.file_digest(target) == cache_mod.file_digest(source):
            self.log.debug("Up to date: %s", target)
        else:
            shutil.copyfile(source, target)
        cache_mod.update_hash(target, algorithm)

    def build_dir(self, artifact: Artifact) -> Path:
        """Scratch directory for intermediate files of one artifact."""
        return self.cache.build_root / slugify(artifact.module) / artifact.version

    def simple_pom(
        self,
        artifact: Artifact,
        description: Optional[str] = None,
        dependencies: Iterable[Artifact] = (),
    ) -> Task:
        pom_artifact = artifact.with_classifier(None).with_extension("pom")
        deps = tuple(dependencies)
        target = self.build_dir(pom_artifact) / pom_artifact.filename

        def write() -> Path:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(build_pom(pom_artifact, description, deps), encoding="utf-8")
            return target

        key = cache_mod.sha256_bytes(
            "|".join(["pom", pom_artifact.descriptor, description or ""] + [d.descriptor for d in deps]).encode("utf-8")
        )
        return Task.named(f"pom[{artifact.name}]", write, key=key, cache=self.cache)
