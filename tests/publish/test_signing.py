"""Tests for GpgSigner with subprocess.run mocked."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from p2bridge.exceptions import DeployError
from p2bridge.publish.signing import GpgSigner


class TestGpgSigner:

    def test_sign_command(self, tmp_path: Path) -> None:
        file = tmp_path / "core-1.0.jar"
        with patch("p2bridge.publish.signing.subprocess.run") as run:
            signature = GpgSigner(fingerprint="ABCD").sign(file)
        assert signature == tmp_path / "core-1.0.jar.asc"
        cmd = run.call_args.args[0]
        assert cmd[:3] == ["gpg", "--batch", "--yes"]
        assert "--detach-sign" in cmd
        assert cmd[cmd.index("--local-user") + 1] == "ABCD"
        assert cmd[-1] == str(file)
        assert run.call_args.kwargs["input"] is None

    def test_passphrase_on_stdin(self, tmp_path: Path) -> None:
        with patch("p2bridge.publish.signing.subprocess.run") as run:
            GpgSigner(passphrase="s3cret").sign(tmp_path / "f")
        cmd = run.call_args.args[0]
        assert "--passphrase-fd" in cmd
        assert "s3cret" not in cmd
        assert run.call_args.kwargs["input"] == "s3cret"

    def test_key_imported_once(self, tmp_path: Path) -> None:
        signer = GpgSigner(key_file="key.asc")
        with patch("p2bridge.publish.signing.subprocess.run") as run:
            signer.sign(tmp_path / "a")
            signer.sign(tmp_path / "b")
        imports = [c for c in run.call_args_list if "--import" in c.args[0]]
        assert len(imports) == 1
        assert run.call_count == 3

    def test_missing_gpg(self, tmp_path: Path) -> None:
        with patch("p2bridge.publish.signing.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(DeployError, match="gpg executable not found"):
                GpgSigner().sign(tmp_path / "f")

    def test_gpg_failure(self, tmp_path: Path) -> None:
        error = subprocess.CalledProcessError(2, ["gpg"], stderr="no secret key\n")
        with patch("p2bridge.publish.signing.subprocess.run", side_effect=error):
            with pytest.raises(DeployError, match="no secret key"):
                GpgSigner().sign(tmp_path / "f")
