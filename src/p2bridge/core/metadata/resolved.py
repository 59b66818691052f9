"""ResolvedUnit: a node of the resolved artifact graph.

A ResolvedUnit is created once per source unit id within a resolution run.
Its dependency collections are ordered and reject duplicates by node
identity (id, version) while keeping first-insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from p2bridge.core.metadata.coordinates import MavenCoordinates
from p2bridge.core.metadata.units import Artifact


@dataclass(eq=False)
class ResolvedUnit:
    """A unit after resolution, ready for POM generation and deployment.

    Attributes:
        id: Source unit id.
        version: Source unit version.
        name: Display name from the catalog.
        description: Description from the catalog.
        maven: Derived coordinate, or None when no mapping applies.
        external: True when the coordinate already exists publicly; such
            nodes are leaves and are never expanded.
        artifact: Primary binary, if the catalog lists one.
        source_artifact: Companion ``.source`` binary, if any.
    """

    id: str
    version: str
    name: str | None = None
    description: str | None = None
    maven: MavenCoordinates | None = None
    external: bool = False
    artifact: Artifact | None = None
    source_artifact: Artifact | None = None
    _dependencies: dict[ResolvedUnit, None] = field(default_factory=dict, init=False, repr=False)
    _optional_dependencies: dict[ResolvedUnit, None] = field(default_factory=dict, init=False, repr=False)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ResolvedUnit):
            return NotImplemented
        return self.id == other.id and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.id, self.version))

    def __str__(self) -> str:
        return f"{self.id},{self.version}"

    @property
    def dependencies(self) -> list[ResolvedUnit]:
        """Required dependencies in first-insertion order."""
        return list(self._dependencies)

    @property
    def optional_dependencies(self) -> list[ResolvedUnit]:
        """Optional dependencies in first-insertion order."""
        return list(self._optional_dependencies)

    def add_dependency(self, unit: ResolvedUnit, optional: bool = False) -> bool:
        """Append a dependency unless an equal node is already present.

        Returns:
            True if the dependency was added.
        """
        target = self._optional_dependencies if optional else self._dependencies
        if unit in target:
            return False
        target[unit] = None
        return True
