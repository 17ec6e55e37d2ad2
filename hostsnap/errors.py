from __future__ import annotations

class SnapshotError(Exception):
    """Base class for pipeline-level failures."""

class ListerError(SnapshotError):
    """The connection listing command could not be run or failed."""

class FetchError(SnapshotError):
    """The event log source is unavailable or rejected the query."""

class WriteError(SnapshotError):
    """An output file could not be created or written."""
