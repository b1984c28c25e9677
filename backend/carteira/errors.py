"""Exception hierarchy shared by the import and calculation jobs."""

from __future__ import annotations


class CarteiraError(RuntimeError):
    """Base class for service errors."""


class ArchiveFetchError(CarteiraError):
    """Raised when a CVM archive cannot be downloaded for a fatal reason."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ArchiveFormatError(CarteiraError):
    """Raised when a downloaded archive is not a readable daily-report zip."""


class InvalidRecordError(ValueError):
    """Raised when a domain record violates one of its invariants."""


__all__ = ["CarteiraError", "ArchiveFetchError", "ArchiveFormatError", "InvalidRecordError"]
