"""p2bridge: Republish p2 update-site components as Maven artifacts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
