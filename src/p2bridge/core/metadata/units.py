"""Installable units, capabilities, and artifact descriptors of a p2 catalog.

These are pure data holders loaded once from a site's ``content.xml`` and
``artifacts.xml``. They are frozen: once a catalog is parsed, nothing in
the resolution run may change them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from p2bridge.core.metadata.coordinates import MavenCoordinates

if TYPE_CHECKING:
    from p2bridge.site.repository import Site


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProvidedCapability:
    """A capability offered by a unit, e.g. ``(osgi.bundle, org.slf4j.api)``."""

    namespace: str
    name: str
    version: str = ""

    def __str__(self) -> str:
        return f"{self.namespace},{self.name},{self.version}"


@dataclass(frozen=True)
class RequiredCapability:
    """A capability demanded by a unit.

    The version ``range`` is retained for display only; matching ignores it.

    Attributes:
        namespace: Capability namespace (e.g. "osgi.bundle").
        name: Capability name.
        range: Version range as written in the catalog.
        optional: Whether the requirement may be absent.
        greedy: p2 greedy flag, carried through unchanged.
    """

    namespace: str
    name: str
    range: str = ""
    optional: bool = field(default=False, compare=False)
    greedy: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        return f"{self.namespace},{self.name},{self.range}"


# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Artifact:
    """A downloadable binary described in a site's ``artifacts.xml``.

    Identity is (id, version, classifier).

    Attributes:
        id: Artifact id; matches a unit id, or ``<unit id>.source`` for sources.
        version: Artifact version.
        classifier: p2 classifier ("osgi.bundle", "org.eclipse.update.feature", ...).
        url: Remote download URL.
        file: Local path relative to the work directory.
        size: Expected size in bytes, as declared (may be empty).
        checksums: Mapping of algorithm name ("sha-512", ...) to hex digest.
        maven: Optional coordinate hint declared on the artifact.
        properties: Raw property bag.
    """

    id: str
    version: str
    classifier: str = ""
    url: str = field(default="", compare=False)
    file: str = field(default="", compare=False)
    size: str = field(default="", compare=False)
    checksums: dict[str, str] = field(default_factory=dict, compare=False)
    maven: MavenCoordinates | None = field(default=None, compare=False)
    properties: dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.id},{self.version}"


# ---------------------------------------------------------------------------
# InstallableUnit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InstallableUnit:
    """A component descriptor from a site's ``content.xml``.

    Identity is (id, version). ``site`` is a back-reference to the
    repository the unit was loaded from and takes no part in identity.
    """

    id: str
    version: str
    name: str | None = field(default=None, compare=False)
    description: str | None = field(default=None, compare=False)
    properties: dict[str, str] = field(default_factory=dict, compare=False, repr=False)
    provides: tuple[ProvidedCapability, ...] = field(default=(), compare=False, repr=False)
    requires: tuple[RequiredCapability, ...] = field(default=(), compare=False, repr=False)
    artifacts: tuple[Artifact, ...] = field(default=(), compare=False, repr=False)
    maven: MavenCoordinates | None = field(default=None, compare=False)
    site: Site | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.id},{self.version}"
