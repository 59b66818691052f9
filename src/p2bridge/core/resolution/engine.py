"""Recursive resolution of p2 units into a Maven artifact graph.

Starting from the configured publish targets, the engine walks each unit's
required capabilities, finds the providing units across all sites, and
builds one ``ResolvedUnit`` per unit id. The walk is single-threaded: the
memo table is filled *before* recursing into a unit's requirements, which
is what makes requirement cycles terminate, and it is not safe to share
between threads.

Resolution of one unit:

1. return the memoized node if the id was seen before;
2. build a shell (id, version, name, description, derived coordinate);
3. abandon the unit if it matches an exclude rule (not memoized);
4. memoize the shell;
5. stop here if the coordinate is already public (external leaf);
6. attach the primary and ``.source`` artifacts;
7. resolve each requirement and record it as a required or optional
   dependency, skipping missing, excluded, platform, and self edges.

Missing transitive requirements only produce warnings. A publish target
that matches no unit at all is fatal (``UnitNotFoundError``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Protocol, Sequence

from p2bridge.core.metadata import Artifact, InstallableUnit, RequiredCapability, ResolvedUnit
from p2bridge.core.resolution.availability import AvailabilityCheck
from p2bridge.core.resolution.mapping import MappingRule, derive_coordinate
from p2bridge.core.resolution.policy import PolicyFilter, UnitRule
from p2bridge.exceptions import UnitNotFoundError

logger = logging.getLogger(__name__)

# Units that shadow a bundle with its sources, and the synthetic JRE unit,
# are never published as dependencies.
SOURCE_SUFFIX = ".source"
JRE_UNIT_ID = "a.jre.javase"

# Synthetic wrapper units that only exist to ship a feature jar.
FEATURE_JAR_SUFFIX = ".feature.jar"


class UnitLookup(Protocol):
    """Read-only view of units and artifacts across all configured sites."""

    def find_unit(self, unit_id: str) -> InstallableUnit | None: ...

    def find_provider(self, required: RequiredCapability) -> InstallableUnit | None: ...

    def find_artifact(self, artifact_id: str) -> Artifact | None: ...

    def match_units(self, pattern: re.Pattern[str]) -> list[InstallableUnit]: ...


@dataclass
class ResolutionResult:
    """Outcome of one resolution run.

    Attributes:
        resolved: Every node created during the run, keyed by unit id, in
            insertion order.
        roots: Resolved nodes of the publish targets (excluded targets are
            absent).
        publishable: Nodes to publish: not external, not feature-jar
            wrappers, and with a coordinate.
    """

    resolved: dict[str, ResolvedUnit] = field(default_factory=dict)
    roots: list[ResolvedUnit] = field(default_factory=list)
    publishable: list[ResolvedUnit] = field(default_factory=list)


class ResolutionEngine:
    """Builds the deduplicated, cycle-safe dependency graph.

    Args:
        lookup: Unit and artifact lookup spanning all sites.
        mappings: Ordered coordinate mapping rules.
        policy: Exclude / candidate policy filter.
        availability: External availability check.
    """

    def __init__(
        self,
        lookup: UnitLookup,
        mappings: Sequence[MappingRule],
        policy: PolicyFilter,
        availability: AvailabilityCheck,
    ) -> None:
        self._lookup = lookup
        self._mappings = tuple(mappings)
        self._policy = policy
        self._availability = availability

    # -- Top-level driver ----------------------------------------------------

    def run(
        self,
        targets: Iterable[UnitRule],
        group_override: str | None = None,
    ) -> ResolutionResult:
        """Resolve all publish targets with a fresh memo table.

        Args:
            targets: Publish targets, by id or by id pattern.
            group_override: If set, every publishable node's groupId is
                replaced with this value once the graph is complete.

        Returns:
            The populated ``ResolutionResult``.

        Raises:
            UnitNotFoundError: If a target matches no unit in any site.
        """
        units = self.find_targets(targets)
        memo: dict[str, ResolvedUnit] = {}
        roots: list[ResolvedUnit] = []
        for unit in units:
            node = self.resolve(unit, memo)
            if node is not None and node not in roots:
                roots.append(node)

        publishable = select_publishable(memo.values())
        if group_override:
            override_group(publishable, group_override)
        return ResolutionResult(resolved=memo, roots=roots, publishable=publishable)

    def find_targets(self, targets: Iterable[UnitRule]) -> list[InstallableUnit]:
        """Look up the units named by the publish targets.

        Raises:
            UnitNotFoundError: If a target matches no unit.
        """
        units: list[InstallableUnit] = []
        for target in targets:
            if target.id is not None:
                unit = self._lookup.find_unit(target.id)
                found = [unit] if unit is not None else []
            else:
                found = self._lookup.match_units(target.pattern)  # type: ignore[arg-type]
            if not found:
                raise UnitNotFoundError(str(target))
            for unit in found:
                if unit not in units:
                    units.append(unit)
        return units

    # -- Recursive step ------------------------------------------------------

    def resolve(
        self, unit: InstallableUnit, memo: dict[str, ResolvedUnit]
    ) -> ResolvedUnit | None:
        """Resolve ``unit`` and, transitively, its requirements.

        Args:
            unit: The unit to resolve.
            memo: Memo table of the current run, mutated in place.

        Returns:
            The resolved node, or None if the unit is excluded.
        """
        if unit.id in memo:
            return memo[unit.id]

        logger.info("Resolving %s", unit.id)

        artifact = self.find_artifact(unit)
        resolved = ResolvedUnit(
            id=unit.id,
            version=unit.version,
            name=unit.name,
            description=unit.description,
            maven=derive_coordinate(unit, self._mappings, artifact),
        )

        if self._policy.is_excluded(resolved):
            logger.info("Excluding %s", unit.id)
            return None

        # Memoize before recursing so cycles come back to this shell.
        memo[unit.id] = resolved

        if self._availability.is_external(resolved):
            resolved.external = True
            return resolved

        resolved.artifact = artifact
        resolved.source_artifact = self.find_artifact(unit, "source")

        for requirement in unit.requires:
            required = self._lookup.find_provider(requirement)
            if required is None:
                if not requirement.optional:
                    logger.warning("No dependency found for %s in %s", requirement, unit.id)
                continue

            if required.id.endswith(SOURCE_SUFFIX) or required.id == JRE_UNIT_ID:
                continue

            dependency = self.resolve(required, memo)
            if dependency is None:
                logger.warning("No dependency found for %s in %s", requirement, unit.id)
                continue

            if dependency is resolved or (
                dependency.maven is not None and dependency.maven == resolved.maven
            ):
                continue

            resolved.add_dependency(dependency, optional=requirement.optional)

        return resolved

    def find_artifact(self, unit: InstallableUnit, classifier: str | None = None) -> Artifact | None:
        """Find ``unit``'s artifact, or its ``<id>.<classifier>`` companion.

        Artifacts listed in the sites' artifact catalogs win; the keys
        embedded in the unit itself are the fallback.
        """
        artifact_id = unit.id if classifier is None else f"{unit.id}.{classifier}"
        found = self._lookup.find_artifact(artifact_id)
        if found is None:
            found = next((a for a in unit.artifacts if a.id == artifact_id), None)
        return found


def select_publishable(units: Iterable[ResolvedUnit]) -> list[ResolvedUnit]:
    """Filter resolved nodes down to the ones that get published.

    External nodes and feature-jar wrappers are dropped silently; nodes
    without a coordinate are dropped with a warning.
    """
    publishable: list[ResolvedUnit] = []
    for unit in units:
        if unit.external or unit.id.endswith(FEATURE_JAR_SUFFIX):
            continue
        if unit.maven is None or unit.maven.group_id is None:
            logger.warning("No maven coordinates found for %s", unit.id)
            continue
        publishable.append(unit)
    return publishable


def override_group(units: Iterable[ResolvedUnit], group_id: str) -> None:
    """Replace the groupId of every node's coordinate with ``group_id``."""
    for unit in units:
        if unit.maven is not None:
            unit.maven = replace(unit.maven, group_id=group_id)
