"""p2 metadata repositories (update sites).

Public API::

    from p2bridge.site import Site, SiteIndex
"""

from __future__ import annotations

from p2bridge.site.repository import Site, SiteIndex

__all__ = [
    "Site",
    "SiteIndex",
]
