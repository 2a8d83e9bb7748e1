"""
Exception hierarchy for 2D25D.

Malformed input, geometric degeneracy and configuration problems each have
their own branch so callers can isolate a failing wall without catching
unrelated errors.
"""

from typing import Any, Dict, Optional


class AxonError(Exception):
    """Base exception for all 2D25D errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MalformedInputError(AxonError, ValueError):
    """Raised when a stage receives input it cannot be built from."""
    pass


class GeometryError(AxonError):
    """Raised when input is well-formed but the resulting geometry is degenerate."""
    pass


class ZeroAreaFootprintError(GeometryError):
    """Raised when a footprint polygon has (near) zero signed area."""
    pass


class SelfIntersectionError(GeometryError):
    """Raised when a footprint polygon crosses itself."""
    pass


class DegenerateJoinError(GeometryError):
    """Raised when a corner join cannot be computed (e.g. a 180 degree reversal)."""
    pass


class ConfigurationError(AxonError):
    """Raised when configuration is invalid or missing."""
    pass
