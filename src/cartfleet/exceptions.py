"""Custom exception hierarchy for cartfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all cartfleet errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class StorageError(FleetError):
    """Key-value store read or write failure."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class SnapshotDecodeError(FleetError):
    """A stored collection snapshot could not be parsed.

    Loading normally reports this through :class:`cartfleet.storage.LoadResult`
    rather than raising; it is only raised by ``LoadResult.unwrap()``.
    """

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)
