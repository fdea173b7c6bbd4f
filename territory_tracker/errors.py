"""Central error types used across the application.

Geometry and validation functions never raise; these errors only guard the
ingestion boundary and session lifecycle.
"""

from __future__ import annotations


class TrackFormatError(ValueError):
    """Raised when track input is malformed (missing columns, non-finite values)."""


class SessionClosedError(RuntimeError):
    """Raised when a fix is added to a run session that has already finished."""


__all__ = [
    "TrackFormatError",
    "SessionClosedError",
]
