"""Reader for Maven ``settings.xml`` files.

Only the parts needed for deployment are read: ``<servers>`` (credentials
by repository id), ``<profiles>`` with their ``<repositories>``, and the
active profiles (``<activeProfiles>`` plus ``activeByDefault`` profiles).

User settings (``~/.m2/settings.xml``) take precedence over the global
settings of the Maven installation (``$MAVEN_HOME/conf/settings.xml``).
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Server:
    id: str
    username: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class Repository:
    id: str
    url: str


@dataclass(frozen=True)
class Profile:
    id: str
    repositories: tuple[Repository, ...] = ()
    active_by_default: bool = False


def _local(tag: str) -> str:
    """Strip an XML namespace from a tag name."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element | None, tag: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == tag]


def _child(element: ET.Element | None, tag: str) -> ET.Element | None:
    found = _children(element, tag)
    return found[0] if found else None


def _child_text(element: ET.Element | None, tag: str) -> str | None:
    child = _child(element, tag)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def default_settings_paths() -> list[Path]:
    """Return the user and global settings paths, user first."""
    paths = [Path.home() / ".m2" / "settings.xml"]
    maven_home = os.environ.get("MAVEN_HOME") or os.environ.get("M2_HOME")
    if maven_home:
        paths.append(Path(maven_home) / "conf" / "settings.xml")
    return paths


@dataclass
class Settings:
    """Effective settings merged from one or more files."""

    servers: list[Server] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)
    active_profiles: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, paths: Iterable[Path] | None = None) -> Settings:
        """Merge every existing settings file, earlier files taking precedence.

        Unreadable or malformed files are skipped with a warning.
        """
        settings = cls()
        for path in paths if paths is not None else default_settings_paths():
            if not path.is_file():
                continue
            try:
                root = ET.parse(path).getroot()
            except (ET.ParseError, OSError) as exc:
                logger.warning("Ignoring settings file %s: %s", path, exc)
                continue
            settings._merge(root)
        return settings

    def _merge(self, root: ET.Element) -> None:
        known_servers = {s.id for s in self.servers}
        for elem in _children(_child(root, "servers"), "server"):
            server_id = _child_text(elem, "id")
            if server_id and server_id not in known_servers:
                known_servers.add(server_id)
                self.servers.append(Server(
                    id=server_id,
                    username=_child_text(elem, "username"),
                    password=_child_text(elem, "password"),
                ))

        known_profiles = {p.id for p in self.profiles}
        for elem in _children(_child(root, "profiles"), "profile"):
            profile_id = _child_text(elem, "id")
            if not profile_id or profile_id in known_profiles:
                continue
            known_profiles.add(profile_id)
            repositories = tuple(
                Repository(id=_child_text(repo, "id") or "", url=_child_text(repo, "url") or "")
                for repo in _children(_child(elem, "repositories"), "repository")
            )
            activation = _child(elem, "activation")
            self.profiles.append(Profile(
                id=profile_id,
                repositories=repositories,
                active_by_default=_child_text(activation, "activeByDefault") == "true",
            ))

        for elem in _children(_child(root, "activeProfiles"), "activeProfile"):
            name = (elem.text or "").strip()
            if name and name not in self.active_profiles:
                self.active_profiles.append(name)

    def find_server(self, server_id: str) -> Server | None:
        for server in self.servers:
            if server.id == server_id:
                return server
        return None

    def find_repository(self, repo_id: str, profile: str | None = None) -> Repository | None:
        """Find a repository by id, in ``profile`` first, then in active profiles."""
        if profile is not None:
            for candidate in self.profiles:
                if candidate.id == profile:
                    for repo in candidate.repositories:
                        if repo.id == repo_id:
                            return repo
        for candidate in self.profiles:
            if candidate.id in self.active_profiles or candidate.active_by_default:
                for repo in candidate.repositories:
                    if repo.id == repo_id:
                        return repo
        return None
