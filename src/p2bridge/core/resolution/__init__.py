"""Resolution of p2 installable units into a Maven artifact graph.

Components, leaves first:

- ``matcher``      -- capability matching (namespace + name)
- ``mapping``      -- coordinate derivation from ordered mapping rules
- ``policy``       -- exclude / candidate rule sets
- ``availability`` -- external availability check
- ``engine``       -- the recursive, memoized graph builder

All public names are re-exported here.
"""

from p2bridge.core.resolution.availability import AvailabilityCheck, CoordinateResolver
from p2bridge.core.resolution.engine import (
    FEATURE_JAR_SUFFIX,
    JRE_UNIT_ID,
    SOURCE_SUFFIX,
    ResolutionEngine,
    ResolutionResult,
    UnitLookup,
    override_group,
    select_publishable,
)
from p2bridge.core.resolution.mapping import MappingRule, derive_coordinate
from p2bridge.core.resolution.matcher import capability_key, matches, satisfies
from p2bridge.core.resolution.policy import PolicyFilter, UnitRule

__all__ = [
    "AvailabilityCheck",
    "CoordinateResolver",
    "FEATURE_JAR_SUFFIX",
    "JRE_UNIT_ID",
    "MappingRule",
    "PolicyFilter",
    "ResolutionEngine",
    "ResolutionResult",
    "SOURCE_SUFFIX",
    "UnitLookup",
    "UnitRule",
    "capability_key",
    "derive_coordinate",
    "matches",
    "override_group",
    "satisfies",
    "select_publishable",
]
