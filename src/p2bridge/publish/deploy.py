"""Deployment of POMs and binaries into a Maven repository.

Files are laid out as ``<group path>/<artifactId>/<version>/<file>`` and
each is accompanied by ``.md5`` and ``.sha1`` checksum files (and ``.asc``
signatures when a signer is configured). ``file:`` repositories are written
directly to disk; ``http(s):`` repositories receive ``PUT`` requests.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from p2bridge.config import MavenConfig
from p2bridge.core.metadata import MavenCoordinates
from p2bridge.exceptions import DeployError
from p2bridge.publish.settings import Settings
from p2bridge.publish.signing import GpgSigner
from p2bridge.remote.http_client import DEFAULT_TIMEOUT, file_digest, new_client

logger = logging.getLogger(__name__)

# Checksum sidecar extension -> hashlib algorithm.
SIDECAR_ALGORITHMS: dict[str, str] = {"md5": "md5", "sha1": "sha1"}


@dataclass(frozen=True)
class DeployFile:
    """A file to deploy under a coordinate.

    Attributes:
        path: Local file.
        extension: Repository extension ("pom", "jar").
        classifier: Optional classifier ("sources", "javadoc").
    """

    path: Path
    extension: str
    classifier: str | None = None


class MavenDeployer:
    """Upload files to a Maven repository.

    Args:
        url: Repository URL (``file:`` or ``http(s):``).
        username: Basic-auth user for HTTP repositories.
        password: Basic-auth password for HTTP repositories.
        signer: Optional signer producing ``.asc`` files.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        url: str,
        username: str | None = None,
        password: str | None = None,
        signer: GpgSigner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._auth = (username, password) if username and password else None
        self._signer = signer
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    @classmethod
    def from_config(
        cls,
        maven: MavenConfig,
        base: Path,
        settings: Settings | None = None,
    ) -> MavenDeployer:
        """Build a deployer from configuration and ``settings.xml``.

        The repository URL is ``maven.repo_url``, else the URL of the
        settings repository with id ``maven.repo_id``, else a file
        repository at ``<base>/repo``. Credentials missing from the
        configuration are taken from the settings server with that id.
        """
        url = maven.repo_url
        username, password = maven.username, maven.password

        if maven.repo_id is not None:
            settings = settings if settings is not None else Settings.load()
            repo = settings.find_repository(maven.repo_id, maven.profile)
            if repo is not None and repo.url:
                url = repo.url
            if username is None or password is None:
                server = settings.find_server(maven.repo_id)
                if server is not None:
                    username, password = server.username, server.password

        if url is None:
            url = (base / "repo").resolve().as_uri()

        signer = None
        if maven.signing:
            signer = GpgSigner(
                key_file=maven.gpg_key,
                passphrase=maven.gpg_passphrase,
                fingerprint=maven.gpg_fingerprint,
            )
        return cls(url, username, password, signer)

    # -- Deployment -------------------------------------------------------------

    async def deploy(self, coordinate: MavenCoordinates, files: list[DeployFile]) -> list[str]:
        """Deploy ``files`` under ``coordinate``.

        Returns:
            Repository-relative paths of everything uploaded.

        Raises:
            DeployError: If signing or any upload fails.
        """
        uploads: list[tuple[Path, str]] = []
        uploaded: list[str] = []
        try:
            for item in files:
                name = coordinate.file_name(item.extension, item.classifier)
                uploads.append((item.path, f"{coordinate.path}/{name}"))
                if self._signer is not None:
                    signature = await asyncio.to_thread(self._signer.sign, item.path)
                    uploads.append((signature, f"{coordinate.path}/{name}.asc"))

            for path, remote in uploads:
                await self._upload(path, remote)
                uploaded.append(remote)
                for ext, algorithm in SIDECAR_ALGORITHMS.items():
                    await self._upload_bytes(file_digest(path, algorithm).encode(), f"{remote}.{ext}")
                    uploaded.append(f"{remote}.{ext}")
        finally:
            if self._signer is not None:
                for path, remote in uploads:
                    if remote.endswith(".asc"):
                        path.unlink(missing_ok=True)

        logger.debug("Published %d files for %s", len(uploaded), coordinate)
        return uploaded

    async def _upload(self, path: Path, remote: str) -> None:
        await self._upload_bytes(path.read_bytes(), remote, source=path)

    async def _upload_bytes(self, data: bytes, remote: str, source: Path | None = None) -> None:
        parsed = urlparse(self._url)
        if parsed.scheme == "file":
            target = Path(url2pathname(parsed.path)) / remote
            target.parent.mkdir(parents=True, exist_ok=True)
            if source is not None:
                shutil.copyfile(source, target)
            else:
                target.write_bytes(data)
            return

        url = f"{self._url}/{remote}"
        logger.debug("Uploading %s", url)
        try:
            async with new_client(DEFAULT_TIMEOUT, auth=self._auth, transport=self._transport) as client:
                resp = await client.put(url, content=data)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DeployError(f"HTTP {exc.response.status_code} uploading {url}") from exc
        except httpx.HTTPError as exc:
            raise DeployError(f"Failed to upload {url}: {exc}") from exc
