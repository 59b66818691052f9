"""Shared test helpers: in-memory catalogs and an on-disk demo site.

The demo site models a small update site::

    com.example.core 1.2.0
      requires osgi.bundle com.example.util
      requires java.package org.slf4j        (provided by org.slf4j.api)
      requires osgi.bundle com.example.extra (optional)
      requires osgi.bundle com.example.missing (not in the site)
    com.example.util 1.0.0
      requires java.package java.lang        (provided by a.jre.javase)
    com.example.extra 0.5.0
    org.slf4j.api 1.7.36                     (maven hint org.slf4j:slf4j-api:1.7.36)
    a.jre.javase 17.0.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from p2bridge.core.metadata import (
    Artifact,
    InstallableUnit,
    MavenCoordinates,
    ProvidedCapability,
    RequiredCapability,
)
from p2bridge.core.resolution import (
    AvailabilityCheck,
    MappingRule,
    PolicyFilter,
    ResolutionEngine,
    UnitRule,
)
from p2bridge.site import Site, SiteIndex

SITE_URL = "https://p2.example.org/demo"


# ---------------------------------------------------------------------------
# In-memory catalogs
# ---------------------------------------------------------------------------


def bundle(
    unit_id: str,
    version: str = "1.0.0",
    requires: Iterable[RequiredCapability] = (),
    provides: Iterable[ProvidedCapability] = (),
    maven: MavenCoordinates | None = None,
    name: str | None = None,
) -> InstallableUnit:
    """Build a unit providing ``osgi.bundle <unit_id>`` plus ``provides``."""
    provided = (ProvidedCapability("osgi.bundle", unit_id, version), *provides)
    return InstallableUnit(
        id=unit_id,
        version=version,
        name=name,
        provides=provided,
        requires=tuple(requires),
        maven=maven,
    )


def requirement(name: str, optional: bool = False, namespace: str = "osgi.bundle") -> RequiredCapability:
    return RequiredCapability(namespace, name, "0.0.0", optional=optional)


def artifact(artifact_id: str, version: str = "1.0.0", maven: MavenCoordinates | None = None) -> Artifact:
    return Artifact(
        id=artifact_id,
        version=version,
        classifier="osgi.bundle",
        url=f"{SITE_URL}/plugins/{artifact_id}_{version}.jar",
        file=f"demo/plugins/{artifact_id}_{version}.jar",
        maven=maven,
    )


def make_index(
    units: Iterable[InstallableUnit],
    artifacts: Iterable[Artifact] = (),
    name: str = "demo",
) -> SiteIndex:
    site = Site(name, SITE_URL)
    site.set_catalog(units, artifacts)
    return SiteIndex([site])


class StubResolver:
    """Coordinate resolver answering from a fixed set of known coordinates."""

    def __init__(self, known: Iterable[str] = (), error: Exception | None = None) -> None:
        self.known = set(known)
        self.error = error
        self.calls: list[str] = []

    def exists(self, coordinate: str) -> bool:
        self.calls.append(coordinate)
        if self.error is not None:
            raise self.error
        return coordinate in self.known


# Maps every unit id to org.test:<id>.
MAP_ALL = MappingRule.compile(r"(.+)", group_id="org.test", artifact_id="$1")


def make_engine(
    units: Iterable[InstallableUnit],
    artifacts: Iterable[Artifact] = (),
    mappings: Iterable[MappingRule] = (MAP_ALL,),
    exclude: Iterable[UnitRule] = (),
    candidates: Iterable[UnitRule] = (),
    resolver: StubResolver | None = None,
) -> ResolutionEngine:
    """Build an engine with lookups enabled against ``resolver``.

    With the default empty resolver nothing is external, so every mapped
    unit gets expanded.
    """
    policy = PolicyFilter(exclude, candidates)
    availability = AvailabilityCheck(policy, resolver or StubResolver(), enabled=True)
    return ResolutionEngine(make_index(units, artifacts), list(mappings), policy, availability)


# ---------------------------------------------------------------------------
# Demo site on disk
# ---------------------------------------------------------------------------


DEMO_CONTENT = """\
<?xml version='1.0' encoding='UTF-8'?>
<?metadataRepository version='1.1.0'?>
<repository name='Demo' type='org.eclipse.equinox.internal.p2.metadata.repository.LocalMetadataRepository' version='1'>
  <units size='5'>
    <unit id='com.example.core' version='1.2.0'>
      <properties size='3'>
        <property name='org.eclipse.equinox.p2.name' value='%bundleName'/>
        <property name='df_LT.bundleName' value='Example Core'/>
        <property name='org.eclipse.equinox.p2.description' value='Core bundle'/>
      </properties>
      <provides size='1'>
        <provided namespace='osgi.bundle' name='com.example.core' version='1.2.0'/>
      </provides>
      <requires size='4'>
        <required namespace='osgi.bundle' name='com.example.util' range='[1.0.0,2.0.0)'/>
        <required namespace='java.package' name='org.slf4j' range='1.7.0'/>
        <required namespace='osgi.bundle' name='com.example.extra' range='0.0.0' optional='true' greedy='false'/>
        <required namespace='osgi.bundle' name='com.example.missing' range='0.0.0'/>
      </requires>
      <artifacts size='1'>
        <artifact classifier='osgi.bundle' id='com.example.core' version='1.2.0'/>
      </artifacts>
    </unit>
    <unit id='com.example.util' version='1.0.0'>
      <provides size='1'>
        <provided namespace='osgi.bundle' name='com.example.util' version='1.0.0'/>
      </provides>
      <requires size='1'>
        <required namespace='java.package' name='java.lang' range='0.0.0'/>
      </requires>
    </unit>
    <unit id='com.example.extra' version='0.5.0'>
      <provides size='1'>
        <provided namespace='osgi.bundle' name='com.example.extra' version='0.5.0'/>
      </provides>
    </unit>
    <unit id='org.slf4j.api' version='1.7.36'>
      <properties size='3'>
        <property name='maven-groupId' value='org.slf4j'/>
        <property name='maven-artifactId' value='slf4j-api'/>
        <property name='maven-version' value='1.7.36'/>
      </properties>
      <provides size='2'>
        <provided namespace='osgi.bundle' name='org.slf4j.api' version='1.7.36'/>
        <provided namespace='java.package' name='org.slf4j' version='1.7.36'/>
      </provides>
    </unit>
    <unit id='a.jre.javase' version='17.0.0'>
      <provides size='1'>
        <provided namespace='java.package' name='java.lang' version='0.0.0'/>
      </provides>
    </unit>
  </units>
</repository>
"""

DEMO_ARTIFACTS = """\
<?xml version='1.0' encoding='UTF-8'?>
<?artifactRepository version='1.1.0'?>
<repository name='Demo' type='org.eclipse.equinox.p2.artifact.repository.simpleRepository' version='1'>
  <artifacts size='4'>
    <artifact classifier='osgi.bundle' id='com.example.core' version='1.2.0'>
      <properties size='1'>
        <property name='download.size' value='4'/>
      </properties>
    </artifact>
    <artifact classifier='osgi.bundle' id='com.example.core.source' version='1.2.0'/>
    <artifact classifier='osgi.bundle' id='com.example.util' version='1.0.0'/>
    <artifact classifier='osgi.bundle' id='org.slf4j.api' version='1.7.36'/>
  </artifacts>
</repository>
"""

DEMO_CONFIG = f"""\
sites:
  - name: demo
    url: {SITE_URL}
mappings:
  - pattern: 'com\\.example\\.(.+)'
    groupId: com.example
    artifactId: '$1'
candidates:
  - pattern: 'com\\.example:.*'
publish:
  - id: com.example.core
"""

DEMO_JARS = (
    "com.example.core_1.2.0.jar",
    "com.example.core.source_1.2.0.jar",
    "com.example.util_1.0.0.jar",
)


def write_demo_site(base: Path, with_jars: bool = False) -> Path:
    """Write the demo catalogs (and optionally its jars) under ``base/demo``."""
    site_dir = base / "demo"
    site_dir.mkdir(parents=True, exist_ok=True)
    (site_dir / "content.xml").write_text(DEMO_CONTENT, encoding="utf-8")
    (site_dir / "artifacts.xml").write_text(DEMO_ARTIFACTS, encoding="utf-8")
    if with_jars:
        plugins = site_dir / "plugins"
        plugins.mkdir(exist_ok=True)
        for name in DEMO_JARS:
            (plugins / name).write_bytes(f"jar:{name}".encode())
    return site_dir


def demo_site() -> Site:
    return Site("demo", SITE_URL)
