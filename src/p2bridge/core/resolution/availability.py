"""Decide whether a unit's coordinate is already available publicly.

External units are referenced by coordinate and never republished or
expanded. The decision, in order:

1. no coordinate -> not external;
2. unit matches the candidate override set -> not external;
3. lookups disabled (``resolve: false``) -> external, without any network
   call. This is the offline default: everything mappable is assumed to be
   published already unless lookups are switched on;
4. otherwise ask the coordinate resolver; a failing lookup counts as not
   external so the unit gets republished.
"""

from __future__ import annotations

import logging
from typing import Protocol

from p2bridge.core.metadata import ResolvedUnit
from p2bridge.core.resolution.policy import PolicyFilter

logger = logging.getLogger(__name__)


class CoordinateResolver(Protocol):
    """Anything that can tell whether a coordinate exists in a repository."""

    def exists(self, coordinate: str) -> bool:
        """Return True if ``coordinate`` can be resolved."""
        ...


class AvailabilityCheck:
    """External availability check, gated by policy and the ``resolve`` flag.

    Args:
        policy: Policy filter supplying the candidate override set.
        resolver: Coordinate resolver used when ``enabled`` is True.
        enabled: The global ``resolve`` flag.
    """

    def __init__(
        self,
        policy: PolicyFilter,
        resolver: CoordinateResolver | None = None,
        enabled: bool = False,
    ) -> None:
        if enabled and resolver is None:
            raise ValueError("A coordinate resolver is required when lookups are enabled")
        self._policy = policy
        self._resolver = resolver
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def is_external(self, unit: ResolvedUnit) -> bool:
        """Return True if ``unit`` should be treated as already published."""
        if unit.maven is None:
            return False
        if self._policy.is_candidate(unit):
            return False
        if not self._enabled:
            return True

        coordinate = str(unit.maven)
        try:
            found = self._resolver.exists(coordinate)  # type: ignore[union-attr]
        except Exception:
            logger.warning("Lookup failed for %s", coordinate, exc_info=True)
            return False
        logger.debug("%s %s", "Resolved" if found else "Missing", coordinate)
        return found
