"""Publishing of resolved units to a Maven repository.

Public API::

    from p2bridge.publish import Publisher, PomWriter, MavenDeployer
"""

from __future__ import annotations

from p2bridge.publish.deploy import DeployFile, MavenDeployer
from p2bridge.publish.pom import PomWriter
from p2bridge.publish.publisher import Publisher

__all__ = [
    "DeployFile",
    "MavenDeployer",
    "PomWriter",
    "Publisher",
]
