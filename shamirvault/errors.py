"""Exceptions raised by the secret-sharing core and its edge codecs."""

from __future__ import annotations


class SharingError(Exception):
    """Base class for every failure raised by shamirvault."""


class InvalidParameters(SharingError, ValueError):
    """Raised when a degree, party count, secret or coordinate is out of range."""


class InsufficientShares(SharingError):
    """Raised when fewer than ``degree + 1`` shares are supplied."""

    def __init__(self, required: int, got: int) -> None:
        super().__init__(f"Need at least {required} shares, got {got}")
        self.required = required
        self.got = got


class DuplicateCoordinate(SharingError):
    """Raised when two supplied shares have the same x coordinate."""

    def __init__(self, x: int) -> None:
        super().__init__(f"Duplicate share coordinate x={x}")
        self.x = x


class ModularInverseUndefined(SharingError, ZeroDivisionError):
    """Raised when a value has no inverse modulo the field prime."""

    def __init__(self, value: int, modulus: int) -> None:
        super().__init__(f"{value} has no inverse modulo the field prime")
        self.value = value
        self.modulus = modulus


class ParseError(SharingError, ValueError):
    """Raised when text crossing the edge cannot be parsed into integers."""

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(message)
        self.text = text


class SessionNotFound(SharingError, LookupError):
    """Raised when no shares are stored for a public key."""

    def __init__(self, public_key: str) -> None:
        super().__init__(f"No shares stored for {public_key}")
        self.public_key = public_key
