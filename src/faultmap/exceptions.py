"""Custom exceptions for heightmap generation."""


class HeightMapError(Exception):
    """Base exception for heightmap errors."""

    pass


class InvalidParameterError(HeightMapError):
    """Raised when a generation parameter violates its constraints."""

    pass
