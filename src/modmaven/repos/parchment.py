"""Parchment mapping artifacts.

Publishes a mapping descriptor and a POM for ``net.minecraft:mappings_parchment``
under the canonical form of the requested mapping version.
"""

from __future__ import annotations

import json
from typing import List

from ..artifact import Artifact
from ..cache import sha256_bytes
from ..errors import InvalidVersionError
from ..repo import OutputArtifact, Repo, repository
from ..task import Task
from ..utils import default_minecraft, rejected_markers
from ..version import MappingVersion


@repository("net.minecraft:mappings_parchment")
class ParchmentRepo(Repo):
    def resolve_version(self, version: str) -> MappingVersion:
        parsed = MappingVersion.parse(version, rejected_markers(self.params))
        if parsed.mc_version is None:
            mc = default_minecraft(self.params)
            if mc is None:
                raise InvalidVersionError(f"No Minecraft version given for mappings: {version}")
            parsed = parsed.with_minecraft(mc)
        return parsed

    def process(self, module: str, version: str) -> List[OutputArtifact]:
        parsed = self.resolve_version(version)
        group, name = module.split(":", 1)
        base = Artifact(group, name, parsed.to_friendly())
        upstream = parsed.upstream_artifact()
        metadata = base.with_classifier("metadata").with_extension("json")

        return self.output(
            self.pending("Mappings metadata", self.metadata(metadata, parsed, upstream), metadata),
            self.pending(
                "Maven POM",
                self.simple_pom(base, f"Parchment mappings {parsed.to_friendly()}", [upstream]),
                base.with_extension("pom"),
            ),
        )

    def metadata(self, artifact: Artifact, parsed: MappingVersion, upstream: Artifact) -> Task:
        data = {
            "channel": "parchment",
            "version": parsed.to_friendly(),
            "timestamp": parsed.timestamp,
            "minecraft": parsed.mc_version,
            "mapping_minecraft": parsed.mapping_minecraft,
            "upstream": upstream.descriptor,
        }
        content = json.dumps(data, indent=2, sort_keys=True) + "\n"
        target = self.build_dir(artifact) / artifact.filename

        def write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            return target

        return Task.named(
            f"metadata[{artifact.name}]",
            write,
            key=sha256_bytes(content.encode("utf-8")),
            cache=self.cache,
        )
