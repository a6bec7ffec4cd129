"""Publish prebuilt files from a local directory.

Configured per module::

    local:
      "com.example:toolkit":
        source_dir: prebuilt/toolkit
        description: Example toolkit

Files are read from ``source_dir/<version>/`` when that directory exists,
otherwise from ``source_dir``. ``toolkit.jar`` becomes the main artifact,
``toolkit-sources.jar`` or ``sources.jar`` the ``sources`` classifier. A POM
is generated unless one is supplied.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

from ..artifact import Artifact
from ..cache import compute_task_hash
from ..errors import SourceNotFoundError
from ..repo import OutputArtifact, Repo, repository
from ..task import Task
from ..utils import local_modules

# Checksum sidecars shipped next to prebuilt files
HASH_SUFFIXES = (".md5", ".sha1", ".sha256", ".sha512", ".hash")


@repository()
class LocalRepo(Repo):
    @classmethod
    def handles(cls, module: str, params: dict) -> bool:
        return module in local_modules(params)

    def source_dir(self, module: str, version: str) -> Path:
        conf = local_modules(self.params)[module]
        source = Path(conf["source_dir"])
        versioned = source / version
        if versioned.is_dir():
            return versioned
        if not source.is_dir():
            raise SourceNotFoundError(f"Source directory not found: {source}")
        return source

    def process(self, module: str, version: str) -> List[OutputArtifact]:
        group, name = module.split(":", 1)
        base = Artifact(group, name, version)
        source = self.source_dir(module, version)

        pending = []
        has_pom = False
        for f in sorted(source.iterdir()):
            if not f.is_file() or f.name.startswith(".") or not f.suffix or f.suffix in HASH_SUFFIXES:
                continue
            artifact = artifact_for(base, f)
            if artifact.extension == "pom" and artifact.classifier is None:
                has_pom = True
            pending.append(self.pending(f"Copy {f.name}", self.copy(f, artifact), artifact))

        if not pending:
            raise SourceNotFoundError(f"No files to publish in {source}")

        if not has_pom:
            description = local_modules(self.params)[module].get("description")
            pending.append(
                self.pending("Maven POM", self.simple_pom(base, description), base.with_extension("pom"))
            )
        return self.output(*pending)

    def copy(self, source: Path, artifact: Artifact) -> Task:
        target = self.build_dir(artifact) / artifact.filename

        def run():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
            return target

        return Task.named(
            f"copy[{artifact.descriptor}]",
            run,
            key=lambda: compute_task_hash(f"copy[{artifact.descriptor}]", [source]),
            cache=self.cache,
        )


def artifact_for(base: Artifact, file: Path) -> Artifact:
    stem, ext = file.name.rsplit(".", 1)
    if stem == base.name:
        classifier = None
    elif stem.startswith(base.name + "-"):
        classifier = stem[len(base.name) + 1:]
    else:
        classifier = stem
    return base.with_classifier(classifier).with_extension(ext)
