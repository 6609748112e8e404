"""Domain error hierarchy."""

from __future__ import annotations


class OverlayError(Exception):
    """Base class for overlay processing errors."""


class InvalidOverlayDataError(OverlayError, TypeError):
    """Raised when a value or patch does not fit the overlay data model."""
