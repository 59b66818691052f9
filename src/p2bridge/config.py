"""Configuration: one immutable value object passed to every component.

The configuration document is YAML (JSON is accepted too, being a YAML
subset)::

    sites:
      - name: birt
        url: https://download.eclipse.org/birt/updates/release/latest
    mappings:
      - pattern: 'org\\.eclipse\\.birt\\.(.+)'
        groupId: org.eclipse.birt
        artifactId: 'org.eclipse.birt.$1'
    exclude:
      - id: org.eclipse.birt.tests
    candidates:            # alias: nocheck
      - pattern: 'org\\.eclipse\\.birt:.*'
    publish:
      - id: org.eclipse.birt.runtime
    details:
      - group: org.eclipse.birt
        name: Eclipse BIRT
        url: https://eclipse.dev/birt
        scm: https://github.com/eclipse-birt/birt
    maven:
      group: org.example.birt
      resolve: true
      repoId: ossrh
      repoUrl: https://oss.example.org/repository/releases
    parallelism: 8

Keys may be written in camelCase or snake_case. Regular expressions are
compiled while loading, so a bad pattern fails early with ``ConfigError``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from p2bridge.core.resolution.mapping import MappingRule
from p2bridge.core.resolution.policy import UnitRule
from p2bridge.exceptions import ConfigError
from p2bridge.remote.resolver import MAVEN_CENTRAL

DEFAULT_PARALLELISM = 8

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SiteConfig:
    """A p2 update site to load units from."""

    name: str
    url: str


@dataclass(frozen=True)
class ProjectDetails:
    """Project information added to generated POMs.

    Selected for a unit when ``id`` equals the unit id or ``group`` equals
    the unit's groupId.
    """

    name: str
    id: str | None = None
    group: str | None = None
    url: str | None = None
    scm: str | None = None


@dataclass(frozen=True)
class MavenConfig:
    """Target repository, coordinate overrides, lookups, and signing.

    Attributes:
        group: Optional groupId forced onto every published unit.
        resolve: When False (default) every mappable unit is assumed to be
            published already; when True, Maven Central is queried.
        repo_id: Server / repository id looked up in ``settings.xml``.
        repo_url: Deploy URL; defaults to a file repository in the work dir.
        username: Deploy user (falls back to ``settings.xml``).
        password: Deploy password (falls back to ``settings.xml``).
        profile: ``settings.xml`` profile searched for ``repo_id`` first.
        gpg_key: Path to an armored secret key to import for signing.
        gpg_passphrase: Passphrase of the signing key.
        gpg_fingerprint: Key used for signing; enables signing when set.
        central: Base URL of the public repository used for lookups.
    """

    group: str | None = None
    resolve: bool = False
    repo_id: str | None = None
    repo_url: str | None = None
    username: str | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    profile: str | None = None
    gpg_key: str | None = None
    gpg_passphrase: str | None = field(default=None, repr=False)
    gpg_fingerprint: str | None = None
    central: str = MAVEN_CENTRAL

    @property
    def signing(self) -> bool:
        return bool(self.gpg_key or self.gpg_fingerprint)


@dataclass(frozen=True)
class Config:
    """The complete, immutable run configuration."""

    sites: tuple[SiteConfig, ...] = ()
    mappings: tuple[MappingRule, ...] = ()
    exclude: tuple[UnitRule, ...] = ()
    candidates: tuple[UnitRule, ...] = ()
    publish: tuple[UnitRule, ...] = ()
    details: tuple[ProjectDetails, ...] = ()
    maven: MavenConfig = field(default_factory=MavenConfig)
    parallelism: int = DEFAULT_PARALLELISM

    def find_details(self, unit_id: str, group_id: str | None) -> ProjectDetails | None:
        """Return the first details entry matching a unit id or groupId."""
        for details in self.details:
            if details.id == unit_id or (group_id is not None and details.group == group_id):
                return details
        return None

    # -- Loading --------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> Config:
        """Load a configuration file.

        Raises:
            ConfigError: If the file is missing, unparsable, or invalid.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid configuration {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {path} must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from an already parsed document.

        Raises:
            ConfigError: On structural errors or invalid patterns.
        """
        data = _normalize(data)
        try:
            sites = tuple(
                SiteConfig(name=str(entry["name"]), url=str(entry["url"]))
                for entry in _entries(data, "sites")
            )
            mappings = tuple(
                MappingRule.compile(
                    entry["pattern"],
                    group_id=entry.get("group_id"),
                    artifact_id=entry.get("artifact_id"),
                    version=entry.get("version"),
                )
                for entry in _entries(data, "mappings")
            )
            exclude = _rules(data, "exclude")
            candidates = _rules(data, "candidates") + _rules(data, "nocheck")
            publish = _rules(data, "publish")
            details = tuple(
                ProjectDetails(
                    name=str(entry["name"]),
                    id=entry.get("id"),
                    group=entry.get("group"),
                    url=entry.get("url"),
                    scm=entry.get("scm"),
                )
                for entry in _entries(data, "details")
            )
            maven_data = data.get("maven") or {}
            if not isinstance(maven_data, dict):
                raise ConfigError("'maven' must be a mapping")
            maven = MavenConfig(**{
                key: value for key, value in maven_data.items()
                if key in MavenConfig.__dataclass_fields__ and value is not None
            })
            parallelism = int(data.get("parallelism", DEFAULT_PARALLELISM))
        except KeyError as exc:
            raise ConfigError(f"Missing configuration key: {exc.args[0]}") from exc
        except re.error as exc:
            raise ConfigError(f"Invalid pattern {exc.pattern!r}: {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

        if parallelism < 1:
            raise ConfigError("'parallelism' must be at least 1")

        return cls(
            sites=sites,
            mappings=mappings,
            exclude=exclude,
            candidates=candidates,
            publish=publish,
            details=details,
            maven=maven,
            parallelism=parallelism,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _normalize(value: Any) -> Any:
    """Recursively convert mapping keys to snake_case."""
    if isinstance(value, dict):
        return {_snake(str(k)): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    entries = data.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ConfigError(f"'{key}' must be a list of mappings")
    return entries


def _rules(data: dict[str, Any], key: str) -> tuple[UnitRule, ...]:
    return tuple(
        UnitRule.compile(id=entry.get("id"), pattern=entry.get("pattern"))
        for entry in _entries(data, key)
    )
