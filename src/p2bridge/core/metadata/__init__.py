"""Data model shared by the catalog loader, the resolver, and the publisher.

All public names are re-exported here so callers can write
``from p2bridge.core.metadata import InstallableUnit``.
"""

from p2bridge.core.metadata.coordinates import MavenCoordinates, strip_snapshot
from p2bridge.core.metadata.resolved import ResolvedUnit
from p2bridge.core.metadata.units import (
    Artifact,
    InstallableUnit,
    ProvidedCapability,
    RequiredCapability,
)

__all__ = [
    "Artifact",
    "InstallableUnit",
    "MavenCoordinates",
    "ProvidedCapability",
    "RequiredCapability",
    "ResolvedUnit",
    "strip_snapshot",
]
