"""Parsers for p2 ``content.xml`` and ``artifacts.xml`` catalogs.

A p2 site publishes two catalogs:

- ``content.xml`` lists installable units with their properties, provided
  and required capabilities, and the keys of the artifacts they ship;
- ``artifacts.xml`` lists the downloadable artifacts with their checksums,
  size, and coordinate hints.

Localized property values (``%key``) are replaced with the default-locale
value stored under ``df_LT.key``. Blank values are treated as absent.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

from p2bridge.core.metadata import (
    Artifact,
    InstallableUnit,
    MavenCoordinates,
    ProvidedCapability,
    RequiredCapability,
    strip_snapshot,
)
from p2bridge.exceptions import CatalogError

if TYPE_CHECKING:
    from p2bridge.site.repository import Site

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNIT_NAME = "org.eclipse.equinox.p2.name"
UNIT_DESCRIPTION = "org.eclipse.equinox.p2.description"
FEATURE_CLASSIFIER = "org.eclipse.update.feature"
LOCALIZATION_PREFIX = "df_LT."
CHECKSUM_PREFIX = "download.checksum."
DOWNLOAD_SIZE = "download.size"

_MAVEN_KEYS = ("groupId", "artifactId", "version", "classifier", "type")


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def parse_properties(element: ET.Element) -> dict[str, str]:
    """Read ``<properties><property name= value=/></properties>`` of an element."""
    props = {
        prop.get("name", ""): prop.get("value", "")
        for prop in element.findall("./properties/property")
    }
    for key, value in list(props.items()):
        if value.startswith("%"):
            localized = props.get(LOCALIZATION_PREFIX + value[1:])
            if localized is not None:
                props[key] = localized
    return props


def get_property(props: dict[str, str], key: str, *alt_keys: str) -> str | None:
    """Return the first non-blank value among ``key`` and ``alt_keys``."""
    for name in (key, *alt_keys):
        value = props.get(name)
        if value is not None and value.strip():
            return value
    return None


def parse_maven(props: dict[str, str]) -> MavenCoordinates | None:
    """Build a coordinate hint from ``maven-*`` / ``maven-wrapped-*`` properties.

    Returns None unless both groupId and artifactId are present.
    """
    values = {
        key: get_property(props, f"maven-{key}", f"maven-wrapped-{key}")
        for key in _MAVEN_KEYS
    }
    if values["groupId"] is None or values["artifactId"] is None:
        return None
    return MavenCoordinates(
        group_id=values["groupId"],
        artifact_id=values["artifactId"],
        version=strip_snapshot(values["version"]),
        classifier=values["classifier"],
        type=values["type"],
    )


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


def parse_provided(element: ET.Element) -> tuple[ProvidedCapability, ...]:
    return tuple(
        ProvidedCapability(
            namespace=elem.get("namespace", ""),
            name=elem.get("name", ""),
            version=elem.get("version", ""),
        )
        for elem in element.findall("./provides/provided")
    )


def parse_required(element: ET.Element) -> tuple[RequiredCapability, ...]:
    return tuple(
        RequiredCapability(
            namespace=elem.get("namespace", ""),
            name=elem.get("name", ""),
            range=elem.get("range", ""),
            optional=elem.get("optional") == "true",
            greedy=elem.get("greedy") != "false",
        )
        for elem in element.findall("./requires/required")
    )


def parse_unit(element: ET.Element, site: Site) -> InstallableUnit:
    """Parse one ``<unit>`` element of ``content.xml``."""
    props = parse_properties(element)
    return InstallableUnit(
        id=element.get("id", ""),
        version=element.get("version", ""),
        name=get_property(props, UNIT_NAME),
        description=get_property(props, UNIT_DESCRIPTION),
        properties=props,
        provides=parse_provided(element),
        requires=parse_required(element),
        artifacts=tuple(parse_artifact(elem, site) for elem in element.findall("./artifacts/artifact")),
        maven=parse_maven(props),
        site=site,
    )


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


def parse_artifact(element: ET.Element, site: Site) -> Artifact:
    """Parse one ``<artifact>`` element.

    The download URL follows the classic update-site layout:
    ``<site>/features/`` for feature jars, ``<site>/plugins/`` otherwise.
    """
    props = parse_properties(element)
    artifact_id = element.get("id", "")
    version = element.get("version", "")
    classifier = element.get("classifier", "")

    checksums = {
        key[len(CHECKSUM_PREFIX):]: value
        for key, value in props.items()
        if key.startswith(CHECKSUM_PREFIX) and value.strip()
    }
    folder = "features" if classifier == FEATURE_CLASSIFIER else "plugins"
    file = f"{artifact_id}_{version}.jar"

    return Artifact(
        id=artifact_id,
        version=version,
        classifier=classifier,
        url=f"{site.url.rstrip('/')}/{folder}/{file}",
        file=f"{site.name}/{folder}/{file}",
        size=get_property(props, DOWNLOAD_SIZE) or "",
        checksums=checksums,
        maven=parse_maven(props),
        properties=props,
    )


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _parse_document(
    path: Path, tag: str, parser: Callable[[ET.Element], T]
) -> list[T]:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise CatalogError(f"Failed to parse {path}: {exc}") from exc
    except OSError as exc:
        raise CatalogError(f"Cannot read {path}: {exc}") from exc
    return [parser(elem) for elem in root.iter(tag)]


def parse_content(path: Path, site: Site) -> list[InstallableUnit]:
    """Parse every unit of a ``content.xml`` document."""
    units = _parse_document(path, "unit", lambda elem: parse_unit(elem, site))
    logger.debug("Parsed %d units from %s", len(units), path)
    return units


def parse_artifacts(path: Path, site: Site) -> list[Artifact]:
    """Parse every artifact of an ``artifacts.xml`` document."""
    artifacts = _parse_document(path, "artifact", lambda elem: parse_artifact(elem, site))
    logger.debug("Parsed %d artifacts from %s", len(artifacts), path)
    return artifacts
