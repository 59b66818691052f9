"""POM generation for resolved units.

Produces a minimal, deterministic Maven POM: coordinates, packaging, name,
description, optional project details, and the unit's dependencies
(required first, then optional ones marked ``<optional>true</optional>``).
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING

from p2bridge.core.metadata import ResolvedUnit

if TYPE_CHECKING:
    from p2bridge.config import ProjectDetails

logger = logging.getLogger(__name__)

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
POM_SCHEMA = "http://maven.apache.org/xsd/maven-4.0.0.xsd"
MODEL_VERSION = "4.0.0"

# Feature groups carry no binary and are published as POM-only modules.
FEATURE_GROUP_SUFFIX = ".feature.group"


def packaging_for(unit: ResolvedUnit) -> str:
    """Return the POM packaging for a unit: ``pom`` for feature groups, else ``jar``."""
    return "pom" if unit.id.endswith(FEATURE_GROUP_SUFFIX) else "jar"


def _text(parent: ET.Element, tag: str, value: str | None) -> None:
    if value is not None:
        ET.SubElement(parent, tag).text = value


class PomWriter:
    """Serialize one ResolvedUnit as a Maven POM document.

    Args:
        unit: The unit to describe; must have a coordinate.
        details: Optional project details (url, scm, organization).
        packaging: Packaging override; derived from the unit id by default.

    Raises:
        ValueError: If ``unit`` has no coordinate.
    """

    def __init__(
        self,
        unit: ResolvedUnit,
        details: ProjectDetails | None = None,
        packaging: str | None = None,
    ) -> None:
        if unit.maven is None:
            raise ValueError(f"{unit.id} has no maven coordinates")
        self._unit = unit
        self._details = details
        self._packaging = packaging or packaging_for(unit)

    @property
    def file_name(self) -> str:
        maven = self._unit.maven
        return f"{maven.artifact_id}-{maven.version}.pom"  # type: ignore[union-attr]

    def build(self) -> ET.Element:
        """Build the ``<project>`` element tree."""
        unit = self._unit
        maven = unit.maven
        project = ET.Element("project", {
            "xmlns": POM_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": f"{POM_NAMESPACE} {POM_SCHEMA}",
        })
        _text(project, "modelVersion", MODEL_VERSION)
        _text(project, "groupId", maven.group_id)  # type: ignore[union-attr]
        _text(project, "artifactId", maven.artifact_id)  # type: ignore[union-attr]
        _text(project, "version", maven.version)  # type: ignore[union-attr]
        _text(project, "packaging", self._packaging)
        _text(project, "name", unit.name)
        _text(project, "description", unit.description)
        self._build_details(project)
        self._build_dependencies(project)
        return project

    def _build_details(self, project: ET.Element) -> None:
        details = self._details
        if details is None:
            return
        _text(project, "url", details.url)
        organization = ET.SubElement(project, "organization")
        _text(organization, "name", details.name)
        _text(organization, "url", details.url)
        if details.scm:
            scm = ET.SubElement(project, "scm")
            _text(scm, "url", details.scm)
            _text(scm, "connection", f"scm:git:{details.scm}")
            _text(scm, "tag", self._unit.maven.version)  # type: ignore[union-attr]

    def _build_dependencies(self, project: ET.Element) -> None:
        unit = self._unit
        entries = [(dep, False) for dep in unit.dependencies]
        entries += [(dep, True) for dep in unit.optional_dependencies]
        if not entries:
            return
        dependencies = ET.SubElement(project, "dependencies")
        for dep, optional in entries:
            if dep.maven is None:
                logger.warning("Dependency %s of %s has no maven coordinates", dep.id, unit.id)
                continue
            element = ET.SubElement(dependencies, "dependency")
            _text(element, "groupId", dep.maven.group_id)
            _text(element, "artifactId", dep.maven.artifact_id)
            _text(element, "version", dep.maven.version)
            if optional:
                _text(element, "optional", "true")

    def to_xml(self) -> str:
        """Render the POM as an indented XML document."""
        project = self.build()
        ET.indent(project, space="  ")
        body = ET.tostring(project, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def write(self, directory: Path) -> Path:
        """Write the POM into ``directory`` and return its path."""
        path = directory / self.file_name
        path.write_text(self.to_xml(), encoding="utf-8")
        return path
