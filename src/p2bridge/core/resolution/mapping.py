"""Coordinate derivation from ordered pattern -> template mapping rules.

A unit's Maven coordinate is seeded from its coordinate hint (or just its
version), then every rule whose pattern fully matches the *subject* string
overwrites the fields it declares. Rules are applied in declared order, so
for each field the last matching rule wins.

The subject is the hint rendered as ``group:artifact:version`` when a hint
exists, otherwise the unit id.

Templates use the Java-style replacement syntax of the configuration
format: ``$1`` / ``${name}`` refer to capture groups and a backslash
escapes the next character.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from p2bridge.core.metadata import Artifact, InstallableUnit, MavenCoordinates

_FIELDS = ("group_id", "artifact_id", "version")
_NAMED_REF_RE = re.compile(r"\{(?P<name>[A-Za-z][A-Za-z0-9]*)\}")


def _escape(ch: str) -> str:
    return "\\\\" if ch == "\\" else ch


def to_python_template(template: str, groups: int, names: Iterable[str] = ()) -> str:
    """Convert a ``$1``-style replacement template to ``Match.expand`` syntax.

    Numbered references consume as many digits as still name an existing
    group, so ``$10`` is group 10 only when the pattern has ten groups.

    Args:
        template: Replacement template as written in the configuration.
        groups: Number of capture groups in the rule's pattern.
        names: Names of the pattern's named groups.

    Returns:
        A template suitable for ``re.Match.expand``.

    Raises:
        ValueError: On a dangling ``$`` or a reference to a missing group,
            numbered or named.
    """
    out: list[str] = []
    i = 0
    while i < len(template):
        ch = template[i]
        if ch == "\\":
            if i + 1 >= len(template):
                raise ValueError(f"Trailing backslash in template {template!r}")
            out.append(_escape(template[i + 1]))
            i += 2
            continue
        if ch != "$":
            out.append(ch)
            i += 1
            continue

        named = _NAMED_REF_RE.match(template, i + 1)
        if named:
            if named.group("name") not in names:
                raise ValueError(
                    f"No group {named.group('name')!r} in pattern for template {template!r}"
                )
            out.append(f"\\g<{named.group('name')}>")
            i = named.end()
            continue

        j = i + 1
        if j >= len(template) or not template[j].isdigit():
            raise ValueError(f"Illegal group reference in template {template!r}")
        ref = int(template[j])
        j += 1
        while j < len(template) and template[j].isdigit() and ref * 10 + int(template[j]) <= groups:
            ref = ref * 10 + int(template[j])
            j += 1
        if ref > groups:
            raise ValueError(f"No group {ref} in pattern for template {template!r}")
        out.append(f"\\g<{ref}>")
        i = j
    return "".join(out)


@dataclass(frozen=True)
class MappingRule:
    """One ``pattern -> {groupId, artifactId, version}`` rule.

    Use ``MappingRule.compile`` to build a rule from configuration strings;
    the stored templates are already in ``Match.expand`` syntax.
    """

    pattern: re.Pattern[str]
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None

    @classmethod
    def compile(
        cls,
        pattern: str,
        group_id: str | None = None,
        artifact_id: str | None = None,
        version: str | None = None,
    ) -> MappingRule:
        """Compile a rule from its configuration form.

        Raises:
            re.error: If ``pattern`` is not a valid regular expression.
            ValueError: If a template references a group the pattern lacks.
        """
        regex = re.compile(pattern)

        def convert(template: str | None) -> str | None:
            if template is None:
                return None
            return to_python_template(template, regex.groups, regex.groupindex)

        return cls(regex, convert(group_id), convert(artifact_id), convert(version))

    def apply(self, subject: str) -> dict[str, str]:
        """Render this rule's templates against ``subject``.

        Returns:
            The fields this rule sets, or an empty dict when the pattern does
            not fully match.
        """
        match = self.pattern.fullmatch(subject)
        if match is None:
            return {}
        values: dict[str, str] = {}
        for name in _FIELDS:
            template = getattr(self, name)
            if template is not None:
                values[name] = match.expand(template)
        return values


def coordinate_hint(unit: InstallableUnit, artifact: Artifact | None = None) -> MavenCoordinates | None:
    """Pick the hint a coordinate is seeded from.

    The primary artifact's hint takes precedence over the unit's own.
    """
    if artifact is not None and artifact.maven is not None:
        return artifact.maven
    return unit.maven


def derive_coordinate(
    unit: InstallableUnit,
    rules: Iterable[MappingRule],
    artifact: Artifact | None = None,
) -> MavenCoordinates | None:
    """Derive the Maven coordinate of ``unit``.

    Args:
        unit: The source unit.
        rules: Mapping rules, applied in order.
        artifact: The unit's primary artifact, whose hint (if any) is used
            instead of the unit's.

    Returns:
        The derived coordinate, or None when no groupId could be derived.
    """
    hint = coordinate_hint(unit, artifact)
    if hint is not None:
        fields: dict[str, object] = {
            "group_id": hint.group_id,
            "artifact_id": hint.artifact_id,
            "version": hint.version,
            "classifier": hint.classifier,
            "type": hint.type,
            "properties": dict(hint.properties),
        }
        subject = str(hint)
    else:
        fields = {"group_id": None, "artifact_id": None, "version": unit.version}
        subject = unit.id

    for rule in rules:
        fields.update(rule.apply(subject))

    if fields["group_id"] is None:
        return None
    return MavenCoordinates(**fields)  # type: ignore[arg-type]
