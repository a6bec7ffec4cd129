"""Minimal Maven POM generation."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterable, Optional

from .artifact import Artifact

POM_NS = "http://maven.apache.org/POM/4.0.0"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"


def _set(parent: ET.Element, tag: str, text: str) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = text
    return el


def build_pom(
    artifact: Artifact,
    description: Optional[str] = None,
    dependencies: Iterable[Artifact] = (),
) -> str:
    project = ET.Element(
        "project",
        {
            "xmlns": POM_NS,
            "xmlns:xsi": XSI_NS,
            "xsi:schemaLocation": f"{POM_NS} http://maven.apache.org/xsd/maven-4.0.0.xsd",
        },
    )
    _set(project, "modelVersion", "4.0.0")
    _set(project, "groupId", artifact.group)
    _set(project, "artifactId", artifact.name)
    _set(project, "version", artifact.version)
    _set(project, "name", artifact.name)
    if description:
        _set(project, "description", description)

    deps = list(dependencies)
    if deps:
        container = ET.SubElement(project, "dependencies")
        for dep in deps:
            el = ET.SubElement(container, "dependency")
            _set(el, "groupId", dep.group)
            _set(el, "artifactId", dep.name)
            _set(el, "version", dep.version)
            if dep.classifier:
                _set(el, "classifier", dep.classifier)
            if dep.extension != "jar":
                _set(el, "type", dep.extension)
            _set(el, "scope", "compile")

    ET.indent(project)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(project, encoding="unicode") + "\n"
