"""Detached GnuPG signatures for deployed files.

Repositories such as Maven Central require an ``.asc`` signature next to
every file. ``GpgSigner`` shells out to ``gpg``; the key is imported from
``key_file`` on first use when one is configured.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path

from p2bridge.exceptions import DeployError

logger = logging.getLogger(__name__)


class GpgSigner:
    """Sign files with ``gpg --armor --detach-sign``.

    Args:
        key_file: Armored secret key imported before the first signature.
        passphrase: Key passphrase, passed on stdin.
        fingerprint: Key to sign with (``--local-user``).
        executable: gpg binary name or path.
    """

    def __init__(
        self,
        key_file: str | None = None,
        passphrase: str | None = None,
        fingerprint: str | None = None,
        executable: str = "gpg",
    ) -> None:
        self._key_file = key_file
        self._passphrase = passphrase
        self._fingerprint = fingerprint
        self._executable = executable
        self._imported = key_file is None
        self._lock = threading.Lock()

    def _run(self, args: list[str], stdin: str | None = None) -> None:
        cmd = [self._executable, "--batch", "--yes", *args]
        try:
            subprocess.run(
                cmd, input=stdin, capture_output=True, text=True, check=True,
            )
        except FileNotFoundError as exc:
            raise DeployError(f"gpg executable not found: {self._executable}") from exc
        except subprocess.CalledProcessError as exc:
            raise DeployError(f"gpg failed: {exc.stderr.strip()}") from exc

    def _import_key(self) -> None:
        with self._lock:
            if self._imported:
                return
            logger.debug("Importing signing key %s", self._key_file)
            self._run(["--import", str(self._key_file)])
            self._imported = True

    def sign(self, file: Path) -> Path:
        """Create ``<file>.asc`` and return its path.

        Raises:
            DeployError: If gpg is missing or fails.
        """
        self._import_key()
        signature = file.with_name(file.name + ".asc")
        args = ["--armor", "--detach-sign", "--output", str(signature)]
        if self._fingerprint:
            args += ["--local-user", self._fingerprint]
        stdin = None
        if self._passphrase is not None:
            args += ["--pinentry-mode", "loopback", "--passphrase-fd", "0"]
            stdin = self._passphrase
        self._run([*args, str(file)], stdin=stdin)
        return signature
