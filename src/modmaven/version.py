"""Parchment-style mapping version strings.

A mapping version names a mapping release by its date and, optionally, the
Minecraft version the mappings were made for and the Minecraft version they
are being used with:

    2022.08.07                  timestamp only, Minecraft filled in later
    2022.08.07-1.18.2           mappings for 1.18.2, used on 1.18.2
    1.18.2-2022.08.07-1.19.1    1.18.2 mappings used on 1.19.1

The target version may carry an MCPConfig timestamp suffix
(``1.20.1-20230612.114412``); it is ignored when the two Minecraft versions
are compared.

Nightly and snapshot builds are not supported and fail to parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .artifact import Artifact
from .errors import InvalidVersionError

TIMESTAMP = re.compile(r"\d{4}\.\d{2}\.\d{2}")
MCP_TIMESTAMP = re.compile(r"\d{8}\.\d{6}")
MC_VERSION = re.compile(r"[0-9A-Za-z][0-9A-Za-z._+-]*")

DEFAULT_REJECTED_MARKERS = ("nightly", "SNAPSHOT")

PARCHMENT_GROUP = "org.parchmentmc.data"
MC_GROUP = "net.minecraft"


def strip_mcp(version: Optional[str]) -> Optional[str]:
    """Drop a trailing ``-YYYYMMDD.HHMMSS`` MCPConfig timestamp, if present."""
    if version is None or "-" not in version:
        return version
    head, tail = version.rsplit("-", 1)
    if head and MCP_TIMESTAMP.fullmatch(tail):
        return head
    return version


@dataclass(frozen=True)
class MappingVersion:
    timestamp: str
    mc_version: Optional[str] = None
    # Only set when the version string spelled out the mappings' own Minecraft version
    map_mc_version: Optional[str] = None

    @classmethod
    def parse(
        cls, version: Optional[str], rejected_markers: Iterable[str] = DEFAULT_REJECTED_MARKERS
    ) -> "MappingVersion":
        """Decode a mapping version string.

        Raises InvalidVersionError if the string is empty, names a rejected
        build (any ``-`` separated segment equal to one of `rejected_markers`,
        case-insensitive), has no timestamp, has a timestamp that is not
        cleanly separated from the Minecraft versions around it, or has a
        Minecraft version containing anything but letters, digits and `._+-`.
        """
        if not version:
            raise InvalidVersionError("Mapping version must be present")

        markers = {m.lower() for m in rejected_markers}
        if any(segment.lower() in markers for segment in version.split("-")):
            raise InvalidVersionError(f"Snapshot mapping versions are not supported: {version}")

        match = TIMESTAMP.search(version)
        if match is None:
            raise InvalidVersionError(f"Mapping version does not contain a timestamp: {version}")

        start, end = match.span()
        timestamp = match.group()

        mc_version = None
        if end < len(version):
            if version[end] != "-" or end == len(version) - 1:
                raise InvalidVersionError(
                    f"Mapping version does not specify a Minecraft version: {version}"
                )
            mc_version = version[end + 1:]

        map_mc_version = None
        if start > 0:
            if version[start - 1] != "-" or start == 1:
                raise InvalidVersionError(
                    f"Mapping version does not specify the mappings' Minecraft version: {version}"
                )
            map_mc_version = version[: start - 1]

        for part in (mc_version, map_mc_version):
            if part is not None and not MC_VERSION.fullmatch(part):
                raise InvalidVersionError(f"Invalid Minecraft version '{part}' in mapping version: {version}")

        return cls(timestamp, mc_version, map_mc_version)

    @classmethod
    def try_parse(cls, version: Optional[str], **kwargs) -> Optional["MappingVersion"]:
        try:
            return cls.parse(version, **kwargs)
        except InvalidVersionError:
            return None

    @property
    def mapping_minecraft(self) -> Optional[str]:
        """Minecraft version the mappings were produced against, explicit or implied."""
        return self.map_mc_version or strip_mcp(self.mc_version)

    def with_minecraft(self, mc_version: str) -> "MappingVersion":
        """Retarget to `mc_version`.

        Mappings that never named a Minecraft version adopt the new one; mappings
        that did keep their original version as provenance.
        """
        if not MC_VERSION.fullmatch(mc_version or ""):
            raise InvalidVersionError(f"Invalid Minecraft version: {mc_version}")
        return MappingVersion(self.timestamp, mc_version, self.mapping_minecraft or mc_version)

    def to_friendly(self) -> str:
        if self.map_mc_version is None:
            if self.mc_version is None:
                return self.timestamp
            return f"{self.timestamp}-{self.mc_version}"

        if self.mc_version is None:
            return f"{self.map_mc_version}-{self.timestamp}"

        if self.map_mc_version == strip_mcp(self.mc_version):
            return f"{self.timestamp}-{self.mc_version}"

        return f"{self.map_mc_version}-{self.timestamp}-{self.mc_version}"

    def upstream_artifact(self) -> Artifact:
        """Coordinate of the published Parchment data archive."""
        mapping_mc = self.mapping_minecraft
        if mapping_mc is None:
            raise InvalidVersionError(f"Unknown Minecraft version for mappings: {self.timestamp}")
        return Artifact(PARCHMENT_GROUP, f"parchment-{mapping_mc}", self.timestamp, "checked", "zip")

    def mapping_artifact(self, mcp_version: str) -> Artifact:
        """Coordinate of the generated mapping zip for an MCPConfig version."""
        version = f"{mcp_version}-{self.timestamp}"
        mapping_mc = self.mapping_minecraft
        if mapping_mc is not None and strip_mcp(mcp_version) != mapping_mc:
            version += f"-{mapping_mc}"
        return Artifact(MC_GROUP, "mappings_parchment", version, extension="zip")

    def __str__(self) -> str:
        return self.to_friendly()


def parse(version: Optional[str], rejected_markers: Iterable[str] = DEFAULT_REJECTED_MARKERS) -> MappingVersion:
    return MappingVersion.parse(version, rejected_markers)
