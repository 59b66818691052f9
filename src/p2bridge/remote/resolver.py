"""Coordinate lookups against a public Maven repository.

``CentralResolver.exists`` answers "is this coordinate already published?"
for the external availability check. It issues a ``HEAD`` request for the
artifact file in Maven repository layout.
"""

from __future__ import annotations

import logging

import httpx

from p2bridge.core.metadata import MavenCoordinates
from p2bridge.remote.http_client import USER_AGENT

logger = logging.getLogger(__name__)

MAVEN_CENTRAL: str = "https://repo.maven.apache.org/maven2"

# Lookups are cheap HEAD requests; fail fast.
LOOKUP_TIMEOUT: float = 15.0


class CentralResolver:
    """Existence checks against a Maven repository (Maven Central by default).

    Args:
        base_url: Repository root URL.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str = MAVEN_CENTRAL,
        timeout: float = LOOKUP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> CentralResolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def url_for(self, coordinate: str) -> str:
        """Return the artifact URL for ``group:artifact[:ext[:classifier]]:version``."""
        maven = MavenCoordinates.parse(coordinate)
        name = maven.file_name(maven.type or "jar", maven.classifier)
        return f"{self._base_url}/{maven.path}/{name}"

    def exists(self, coordinate: str) -> bool:
        """Return True if the artifact for ``coordinate`` exists.

        Raises:
            httpx.HTTPError: On transport failures and unexpected statuses.
            ValueError: If ``coordinate`` is malformed.
        """
        url = self.url_for(coordinate)
        logger.debug("Resolving %s", url)
        resp = self._client.head(url)
        if resp.status_code == 404:
            return False
        resp.raise_for_status()
        return True
