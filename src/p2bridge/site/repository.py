"""Metadata repositories (sites) and the lookup index spanning them.

A ``Site`` holds the units and artifacts parsed from one p2 update site.
Catalog files are cached under ``<base>/<site name>/``: an existing
``content.xml`` or ``artifacts.xml`` is reused instead of downloading.

``SiteIndex`` answers the resolver's questions across all sites, in the
configured order, always returning the first match.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Sequence

from p2bridge.core.metadata import Artifact, InstallableUnit, RequiredCapability
from p2bridge.core.resolution.matcher import capability_key, satisfies
from p2bridge.exceptions import CatalogError
from p2bridge.remote.http_client import download, extract
from p2bridge.site.catalog import parse_artifacts, parse_content

logger = logging.getLogger(__name__)

CONTENT = "content"
ARTIFACTS = "artifacts"


class Site:
    """One p2 metadata repository.

    Args:
        name: Site name; also the cache directory name.
        url: Site base URL.
    """

    def __init__(self, name: str, url: str) -> None:
        self._name = name
        self._url = url
        self._units: list[InstallableUnit] = []
        self._units_by_id: dict[str, InstallableUnit] = {}
        self._artifacts_by_id: dict[str, Artifact] = {}
        self._providers: dict[tuple[str, str], list[InstallableUnit]] = {}

    def __repr__(self) -> str:
        return f"Site(name={self._name!r}, url={self._url!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return self._url

    @property
    def units(self) -> list[InstallableUnit]:
        return list(self._units)

    # -- Loading --------------------------------------------------------------

    async def load(self, base: Path) -> None:
        """Fetch (if not cached) and parse this site's catalogs.

        Raises:
            DownloadError: If a catalog archive cannot be downloaded.
            CatalogError: If a catalog cannot be parsed.
        """
        logger.info("Loading site %s", self._name)
        path = base / self._name
        path.mkdir(parents=True, exist_ok=True)
        for catalog in (CONTENT, ARTIFACTS):
            await self._fetch_catalog(path, catalog)
        self.load_cached(path)

    async def _fetch_catalog(self, path: Path, catalog: str) -> None:
        xml = path / f"{catalog}.xml"
        if xml.exists():
            return
        jar = await download(f"{self._url.rstrip('/')}/{catalog}.jar", path / f"{catalog}.jar")
        extract(jar, path)
        if not xml.exists():
            raise CatalogError(f"{jar.name} of site {self._name} has no {xml.name}")

    def load_cached(self, path: Path) -> None:
        """Parse ``content.xml`` and ``artifacts.xml`` from ``path``."""
        self.set_catalog(
            parse_content(path / f"{CONTENT}.xml", self),
            parse_artifacts(path / f"{ARTIFACTS}.xml", self),
        )

    def set_catalog(
        self, units: Iterable[InstallableUnit], artifacts: Iterable[Artifact]
    ) -> None:
        """Replace the site's contents and rebuild its lookup tables."""
        self._units = list(units)
        self._units_by_id = {}
        self._artifacts_by_id = {}
        self._providers = {}
        for unit in self._units:
            self._units_by_id.setdefault(unit.id, unit)
            for provided in unit.provides:
                candidates = self._providers.setdefault(capability_key(provided), [])
                if not candidates or candidates[-1] is not unit:
                    candidates.append(unit)
        for artifact in artifacts:
            self._artifacts_by_id.setdefault(artifact.id, artifact)

    # -- Lookups --------------------------------------------------------------

    def find_unit(self, unit_id: str) -> InstallableUnit | None:
        """Return the first unit with id ``unit_id``."""
        return self._units_by_id.get(unit_id)

    def find_provider(self, required: RequiredCapability) -> InstallableUnit | None:
        """Return the first unit providing a capability that satisfies ``required``."""
        for unit in self._providers.get(capability_key(required), ()):
            if satisfies(unit, required):
                return unit
        return None

    def find_artifact(self, artifact_id: str) -> Artifact | None:
        """Return the first artifact with id ``artifact_id``."""
        return self._artifacts_by_id.get(artifact_id)


class SiteIndex:
    """Unit and artifact lookups across several sites, first match wins."""

    def __init__(self, sites: Sequence[Site]) -> None:
        self._sites = tuple(sites)

    @property
    def sites(self) -> tuple[Site, ...]:
        return self._sites

    def find_unit(self, unit_id: str) -> InstallableUnit | None:
        for site in self._sites:
            unit = site.find_unit(unit_id)
            if unit is not None:
                return unit
        return None

    def find_provider(self, required: RequiredCapability) -> InstallableUnit | None:
        for site in self._sites:
            unit = site.find_provider(required)
            if unit is not None:
                return unit
        return None

    def find_artifact(self, artifact_id: str) -> Artifact | None:
        for site in self._sites:
            artifact = site.find_artifact(artifact_id)
            if artifact is not None:
                return artifact
        return None

    def match_units(self, pattern: re.Pattern[str]) -> list[InstallableUnit]:
        """Return every unit whose id fully matches ``pattern``, first per id."""
        seen: set[str] = set()
        found: list[InstallableUnit] = []
        for site in self._sites:
            for unit in site.units:
                if unit.id not in seen and pattern.fullmatch(unit.id):
                    seen.add(unit.id)
                    found.append(unit)
        return found
