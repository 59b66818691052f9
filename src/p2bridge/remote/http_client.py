"""Shared HTTP and file helpers for catalog and artifact downloads.

Provides a thin wrapper around ``httpx.AsyncClient`` with standardised
timeouts, user-agent headers, redirects, and error handling, plus zip
extraction and checksum verification for downloaded files.

Raises ``DownloadError`` / ``ChecksumError`` (subclasses of
``P2BridgeError``) on unrecoverable failures.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
import zipfile
from pathlib import Path
from typing import Mapping

import httpx

from p2bridge.exceptions import ChecksumError, DownloadError

logger = logging.getLogger(__name__)

# Timeout for all HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 60.0

# User-Agent sent with every request.
USER_AGENT: str = "p2bridge/0.1"

# Catalog checksum property suffix -> hashlib algorithm, strongest first.
CHECKSUM_ALGORITHMS: dict[str, str] = {
    "sha-512": "sha512",
    "sha-256": "sha256",
    "sha-1": "sha1",
}

_CHUNK_SIZE = 1 << 16


def new_client(timeout: float = DEFAULT_TIMEOUT, **kwargs: object) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the standard headers and redirects."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        **kwargs,  # type: ignore[arg-type]
    )


async def download(
    url: str,
    file: Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """Download ``url`` to ``file`` unless the file already exists.

    The body is streamed to ``<file>.part`` and renamed once complete, so an
    interrupted download never leaves a truncated file behind.

    Args:
        url: The URL to fetch.
        file: Destination path; parent directories are created.
        timeout: Request timeout in seconds.

    Returns:
        ``file``.

    Raises:
        DownloadError: On HTTP errors, timeouts, or transport failures.
    """
    if file.exists():
        return file

    logger.debug("Downloading %s", url)
    file.parent.mkdir(parents=True, exist_ok=True)
    temp = file.with_name(file.name + ".part")
    try:
        async with new_client(timeout) as client:
            async with client.stream("GET", url) as resp:
                resp.raise_for_status()
                with temp.open("wb") as out:
                    async for chunk in resp.aiter_bytes(_CHUNK_SIZE):
                        out.write(chunk)
        temp.replace(file)
    except httpx.HTTPStatusError as exc:
        raise DownloadError(f"HTTP {exc.response.status_code} from {url}") from exc
    except httpx.HTTPError as exc:
        raise DownloadError(f"Failed to download {url}: {exc}") from exc
    finally:
        temp.unlink(missing_ok=True)
    return file


def extract(archive: Path, directory: Path) -> list[Path]:
    """Extract a zip/jar archive into ``directory``.

    Entries that would land outside ``directory`` are rejected.

    Returns:
        The extracted file paths.

    Raises:
        DownloadError: If the archive is corrupt or contains unsafe paths.
    """
    directory.mkdir(parents=True, exist_ok=True)
    root = directory.resolve()
    extracted: list[Path] = []
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                target = (directory / info.filename).resolve()
                if root != target and root not in target.parents:
                    raise DownloadError(f"Unsafe path {info.filename!r} in {archive}")
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, target.open("wb") as dst:
                    shutil.copyfileobj(src, dst, _CHUNK_SIZE)
                extracted.append(target)
    except zipfile.BadZipFile as exc:
        raise DownloadError(f"Corrupt archive {archive}: {exc}") from exc
    return extracted


def file_digest(file: Path, algorithm: str) -> str:
    """Return the hex digest of ``file`` for a hashlib algorithm name."""
    digest = hashlib.new(algorithm)
    with file.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify(file: Path, checksums: Mapping[str, str]) -> str | None:
    """Verify ``file`` against the strongest checksum the catalog provides.

    Args:
        file: The downloaded file.
        checksums: Catalog checksums keyed by ``sha-512`` / ``sha-256`` / ``sha-1``.

    Returns:
        The catalog algorithm that was checked, or None if no checksum is
        available.

    Raises:
        ChecksumError: If the digest does not match.
    """
    for key, algorithm in CHECKSUM_ALGORITHMS.items():
        expected = checksums.get(key)
        if not expected:
            continue
        actual = file_digest(file, algorithm)
        if actual.lower() != expected.lower():
            raise ChecksumError(
                f"Checksum mismatch for {file.name}: expected {key} {expected}, got {actual}"
            )
        return key
    logger.debug("No checksum available for %s", file)
    return None
