"""Exception types raised by hjson-sync."""

from __future__ import annotations


class HjsonSyncError(Exception):
    """Base class for hjson-sync errors."""


class ManifestFormatError(HjsonSyncError):
    """Raised when package.hjson cannot be parsed or rewritten."""
