"""Capability matching between provided and required capabilities.

A requirement is satisfied by a provided capability when namespace and name
are equal. Version ranges are deliberately not evaluated: p2 ranges cannot
be carried over losslessly to Maven's single-version dependency model, so
the first provider found by name wins.

``capability_key`` is the part of a capability that matching looks at;
lookup tables keyed by it only ever hold units that can match.
"""

from __future__ import annotations

from p2bridge.core.metadata import (
    InstallableUnit,
    ProvidedCapability,
    RequiredCapability,
)


def capability_key(capability: ProvidedCapability | RequiredCapability) -> tuple[str, str]:
    """Return the (namespace, name) pair a capability is matched on."""
    return capability.namespace, capability.name


def matches(provided: ProvidedCapability, required: RequiredCapability) -> bool:
    """Return True if ``provided`` satisfies ``required`` (namespace + name)."""
    return capability_key(provided) == capability_key(required)


def satisfies(unit: InstallableUnit, required: RequiredCapability) -> bool:
    """Return True if any capability provided by ``unit`` satisfies ``required``."""
    return any(matches(provided, required) for provided in unit.provides)
