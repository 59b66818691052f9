"""Allow/deny rule sets applied to resolved unit shells.

Two independent rule sets drive the resolver:

- **exclude**: a matching unit is abandoned and treated as absent.
- **candidates**: a matching unit is always resolved and republished
  locally, even when its coordinate already exists publicly.

A rule matches a unit by exact id, or by a regular expression that must
fully match the unit's rendered coordinate (``group:artifact:version``),
or its id when it has no coordinate yet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from p2bridge.core.metadata import MavenCoordinates, ResolvedUnit


@dataclass(frozen=True)
class UnitRule:
    """A single id-or-pattern rule.

    Attributes:
        id: Exact unit id to match, or None.
        pattern: Compiled pattern matched against the coordinate or id.
    """

    id: str | None = None
    pattern: re.Pattern[str] | None = None

    @classmethod
    def compile(cls, id: str | None = None, pattern: str | None = None) -> UnitRule:
        """Build a rule from configuration strings.

        Raises:
            ValueError: If neither ``id`` nor ``pattern`` is given.
            re.error: If ``pattern`` is not a valid regular expression.
        """
        if id is None and pattern is None:
            raise ValueError("A rule needs an 'id' or a 'pattern'")
        return cls(id, re.compile(pattern) if pattern is not None else None)

    def matches(self, unit_id: str, coordinate: MavenCoordinates | None = None) -> bool:
        """Return True if this rule selects the given unit."""
        if self.id is not None and self.id == unit_id:
            return True
        if self.pattern is not None:
            subject = str(coordinate) if coordinate is not None else unit_id
            return self.pattern.fullmatch(subject) is not None
        return False

    def __str__(self) -> str:
        return self.id if self.id is not None else f"/{self.pattern.pattern}/"  # type: ignore[union-attr]


class PolicyFilter:
    """Pure predicates over a ResolvedUnit shell (id + derived coordinate)."""

    def __init__(
        self,
        exclude: Iterable[UnitRule] = (),
        candidates: Iterable[UnitRule] = (),
    ) -> None:
        self._exclude = tuple(exclude)
        self._candidates = tuple(candidates)

    def is_excluded(self, unit: ResolvedUnit) -> bool:
        """True if ``unit`` matches any exclude rule."""
        return any(rule.matches(unit.id, unit.maven) for rule in self._exclude)

    def is_candidate(self, unit: ResolvedUnit) -> bool:
        """True if ``unit`` must be republished regardless of public availability."""
        return any(rule.matches(unit.id, unit.maven) for rule in self._candidates)
