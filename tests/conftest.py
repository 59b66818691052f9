"""Shared fixtures for p2bridge tests."""

from __future__ import annotations

import pathlib

import pytest

from tests.helpers import DEMO_CONFIG, write_demo_site


@pytest.fixture
def demo_base(tmp_path: pathlib.Path) -> pathlib.Path:
    """Work directory with the demo site catalogs already cached."""
    base = tmp_path / "work"
    write_demo_site(base)
    return base


@pytest.fixture
def demo_config_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """The demo configuration written to disk."""
    path = tmp_path / "demo.yaml"
    path.write_text(DEMO_CONFIG, encoding="utf-8")
    return path
