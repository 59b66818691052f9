"""p2bridge exception hierarchy.

All public exceptions inherit from P2BridgeError, giving callers a single
base class to catch when they want to handle any p2bridge-specific failure
without swallowing unrelated errors.
"""


class P2BridgeError(Exception):
    """Base exception for all p2bridge errors."""


class ConfigError(P2BridgeError):
    """Raised when the configuration cannot be loaded.

    Covers missing or unparsable files, unknown structure, and invalid
    regular expressions in mapping or policy rules.
    """


class CatalogError(P2BridgeError):
    """Raised when a p2 metadata catalog cannot be read.

    Covers malformed ``content.xml`` / ``artifacts.xml`` documents and
    catalog archives that lack the expected entry.
    """


class ResolutionError(P2BridgeError):
    """Raised when dependency resolution cannot proceed."""


class UnitNotFoundError(ResolutionError):
    """Raised when an explicitly requested publish target is not in any site.

    This is the only fatal resolution condition: missing *transitive*
    requirements are logged and skipped instead.
    """

    def __init__(self, target: str) -> None:
        super().__init__(f"No such unit found: {target}")
        self.target = target


class DownloadError(P2BridgeError):
    """Raised when a remote file cannot be downloaded."""


class ChecksumError(DownloadError):
    """Raised when a downloaded file does not match its catalog checksum."""


class DeployError(P2BridgeError):
    """Raised when uploading or signing artifacts for deployment fails."""
