from __future__ import annotations

"""Maven-style artifact coordinates and their repository paths."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Artifact:
    group: str
    name: str
    version: str
    classifier: Optional[str] = None
    extension: str = "jar"

    @classmethod
    def parse(cls, descriptor: str) -> "Artifact":
        """Parse ``group:name:version[:classifier][@extension]``."""
        extension = "jar"
        if "@" in descriptor:
            descriptor, extension = descriptor.rsplit("@", 1)
        parts = descriptor.split(":")
        if len(parts) not in (3, 4) or not all(parts):
            raise ValueError(f"Invalid artifact descriptor: {descriptor}")
        classifier = parts[3] if len(parts) == 4 else None
        return cls(parts[0], parts[1], parts[2], classifier, extension)

    @property
    def module(self) -> str:
        return f"{self.group}:{self.name}"

    @property
    def descriptor(self) -> str:
        out = f"{self.group}:{self.name}:{self.version}"
        if self.classifier:
            out += f":{self.classifier}"
        if self.extension != "jar":
            out += f"@{self.extension}"
        return out

    @property
    def folder(self) -> str:
        return f"{self.group.replace('.', '/')}/{self.name}/{self.version}"

    @property
    def filename(self) -> str:
        out = f"{self.name}-{self.version}"
        if self.classifier:
            out += f"-{self.classifier}"
        return f"{out}.{self.extension}"

    @property
    def path(self) -> str:
        """Repository-relative path, always with forward slashes."""
        return f"{self.folder}/{self.filename}"

    def with_version(self, version: str) -> "Artifact":
        return replace(self, version=version)

    def with_classifier(self, classifier: Optional[str]) -> "Artifact":
        return replace(self, classifier=classifier)

    def with_extension(self, extension: str) -> "Artifact":
        return replace(self, extension=extension)

    def __str__(self) -> str:
        return self.descriptor
