"""End-to-end orchestration: load sites, resolve, download, and deploy.

``Publisher.publish`` runs the whole pipeline:

1. load every configured site (bounded fan-out);
2. resolve the publish targets into the publishable unit set;
3. download all primary and sources artifacts, verifying checksums;
4. build a POM (and a javadoc placeholder when sources exist) for each
   unit and hand everything to the deployer.

Steps 1, 3 and 4 are parallel per item; the first failure aborts the batch.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Sequence

from p2bridge.config import Config
from p2bridge.core.metadata import Artifact, ResolvedUnit
from p2bridge.core.resolution import (
    AvailabilityCheck,
    CoordinateResolver,
    PolicyFilter,
    ResolutionEngine,
    ResolutionResult,
)
from p2bridge.publish.deploy import DeployFile, MavenDeployer
from p2bridge.publish.pom import PomWriter, packaging_for
from p2bridge.remote.http_client import download, verify
from p2bridge.remote.resolver import CentralResolver
from p2bridge.site import Site, SiteIndex
from p2bridge.tasks import run_parallel

logger = logging.getLogger(__name__)

JAVADOC_README = "Please refer to the corresponding source jar."


class Publisher:
    """Publish the configured p2 units to a Maven repository.

    Args:
        config: Run configuration.
        base: Work directory for caches and temporary files.
        resolver: Coordinate resolver; a ``CentralResolver`` is created on
            demand when lookups are enabled.
        deployer: Deployer; built from the configuration by default.
        sites: Sites to use instead of the configured ones.
    """

    def __init__(
        self,
        config: Config,
        base: Path,
        *,
        resolver: CoordinateResolver | None = None,
        deployer: MavenDeployer | None = None,
        sites: Sequence[Site] | None = None,
    ) -> None:
        self._config = config
        self._base = base
        self._resolver = resolver
        self._deployer = deployer
        if sites is None:
            sites = [Site(site.name, site.url) for site in config.sites]
        self._sites = list(sites)

    @property
    def sites(self) -> list[Site]:
        return list(self._sites)

    @property
    def deployer(self) -> MavenDeployer:
        if self._deployer is None:
            self._deployer = MavenDeployer.from_config(self._config.maven, self._base)
        return self._deployer

    # -- Resolution -------------------------------------------------------------

    async def load_sites(self) -> None:
        self._base.mkdir(parents=True, exist_ok=True)
        await run_parallel(
            self._sites, lambda site: site.load(self._base), limit=self._config.parallelism
        )

    def run_engine(self) -> ResolutionResult:
        """Resolve the publish targets against the loaded sites."""
        config = self._config
        policy = PolicyFilter(config.exclude, config.candidates)
        resolver = self._resolver
        owned = None
        if config.maven.resolve and resolver is None:
            resolver = owned = CentralResolver(config.maven.central)
        try:
            availability = AvailabilityCheck(policy, resolver, enabled=config.maven.resolve)
            engine = ResolutionEngine(SiteIndex(self._sites), config.mappings, policy, availability)
            return engine.run(config.publish, group_override=config.maven.group)
        finally:
            if owned is not None:
                owned.close()

    async def resolve(self) -> ResolutionResult:
        """Load all sites and resolve the publishable unit set."""
        await self.load_sites()
        return self.run_engine()

    # -- Publishing -------------------------------------------------------------

    async def publish(self, dry_run: bool = False) -> ResolutionResult:
        """Run the full pipeline.

        Args:
            dry_run: Stop after resolution.

        Returns:
            The resolution result that was (or would be) published.
        """
        result = await self.resolve()
        if dry_run:
            return result

        limit = self._config.parallelism
        artifacts = [
            artifact
            for unit in result.publishable
            for artifact in (unit.artifact, unit.source_artifact)
            if artifact is not None
        ]
        await run_parallel(artifacts, self.download, limit=limit)
        await run_parallel(result.publishable, self.publish_unit, limit=limit)
        return result

    async def download(self, artifact: Artifact | None) -> Path | None:
        """Download (or reuse) an artifact and verify its checksum."""
        if artifact is None or not artifact.file:
            return None
        file = await download(artifact.url, self._base / artifact.file)
        verify(file, artifact.checksums)
        return file

    async def publish_unit(self, unit: ResolvedUnit) -> list[str]:
        """Build the POM for ``unit`` and deploy it with its binaries."""
        if unit.maven is None or unit.maven.group_id is None:
            logger.warning("No maven coordinates found for %s", unit.id)
            return []

        logger.info("Publishing %s", unit.id)
        packaging = packaging_for(unit)
        jar = await self.download(unit.artifact)
        sources = await self.download(unit.source_artifact)

        details = self._config.find_details(unit.id, unit.maven.group_id)
        pom_file = PomWriter(unit, details, packaging).write(self._base)
        javadoc = self.javadoc(pom_file) if sources is not None else None

        files = [DeployFile(pom_file, "pom")]
        if packaging != "pom":
            if jar is not None:
                files.append(DeployFile(jar, "jar"))
            if sources is not None:
                files.append(DeployFile(sources, "jar", "sources"))
            if javadoc is not None:
                files.append(DeployFile(javadoc, "jar", "javadoc"))

        try:
            return await self.deployer.deploy(unit.maven, files)
        finally:
            pom_file.unlink(missing_ok=True)
            if javadoc is not None:
                javadoc.unlink(missing_ok=True)

    def javadoc(self, pom_file: Path) -> Path:
        """Create a placeholder javadoc jar next to ``pom_file``."""
        jar = pom_file.with_name(pom_file.name[: -len(".pom")] + "-javadoc.jar")
        with zipfile.ZipFile(jar, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\r\n\r\n")
            zf.writestr("README.txt", JAVADOC_README)
        return jar
