"""Network collaborators: downloads, archive handling, and coordinate lookups.

``p2bridge.remote.http_client`` holds the httpx download helpers and
``p2bridge.remote.resolver`` the Maven Central existence check.
"""
