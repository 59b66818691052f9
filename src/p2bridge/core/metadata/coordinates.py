"""Maven coordinates: the target identity of a republished unit.

A coordinate is the (groupId, artifactId, version[, classifier]) tuple that
names an artifact in a Maven repository. Packaging ``type`` and the free-form
property bag travel with the coordinate but are *not* part of its identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field

_SNAPSHOT_SUFFIX = "-SNAPSHOT"


@dataclass(frozen=True)
class MavenCoordinates:
    """An immutable Maven coordinate.

    Equality and hashing consider ``group_id``, ``artifact_id``, ``version``
    and ``classifier`` only.

    Attributes:
        group_id: Maven groupId (e.g. "org.slf4j").
        artifact_id: Maven artifactId (e.g. "slf4j-api").
        version: Version string, or None when unknown.
        classifier: Optional classifier (e.g. "sources").
        type: Optional packaging type (e.g. "jar").
        properties: Auxiliary properties carried along with the coordinate.
    """

    group_id: str | None
    artifact_id: str | None
    version: str | None = None
    classifier: str | None = None
    type: str | None = field(default=None, compare=False)
    properties: dict[str, str] = field(default_factory=dict, compare=False)

    def __str__(self) -> str:
        return f"{self.group_id or ''}:{self.artifact_id or ''}:{self.version or ''}"

    @property
    def path(self) -> str:
        """Repository-relative directory, e.g. ``org/slf4j/slf4j-api/1.7.36``."""
        return "/".join([
            (self.group_id or "").replace(".", "/"),
            self.artifact_id or "",
            self.version or "",
        ])

    def file_name(self, extension: str = "jar", classifier: str | None = None) -> str:
        """Return the repository file name for this coordinate."""
        suffix = f"-{classifier}" if classifier else ""
        return f"{self.artifact_id}-{self.version}{suffix}.{extension}"

    @classmethod
    def parse(cls, text: str) -> MavenCoordinates:
        """Parse ``group:artifact[:extension[:classifier]]:version``.

        Raises:
            ValueError: If the string has fewer than three or more than five
                colon-separated parts.
        """
        parts = text.split(":")
        if len(parts) == 3:
            group, artifact, version = parts
            return cls(group, artifact, version)
        if len(parts) == 4:
            group, artifact, extension, version = parts
            return cls(group, artifact, version, type=extension)
        if len(parts) == 5:
            group, artifact, extension, classifier, version = parts
            return cls(group, artifact, version, classifier=classifier or None, type=extension)
        raise ValueError(f"Invalid coordinate: {text!r}")


def strip_snapshot(version: str | None) -> str | None:
    """Drop a trailing ``-SNAPSHOT`` qualifier, if any."""
    if version is not None and version.endswith(_SNAPSHOT_SUFFIX):
        return version[: -len(_SNAPSHOT_SUFFIX)]
    return version
