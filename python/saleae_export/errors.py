"""Exceptions raised while decoding or projecting Saleae exports."""

from __future__ import annotations


class ExportError(Exception):
    """Base error for everything raised by saleae_export."""


# ---- Structural / decode errors ----
class FormatError(ExportError, ValueError):
    """Raised when a byte stream is not a valid Saleae binary export."""


class BadMagic(FormatError):
    """The file does not start with the ``<SALEAE>`` signature."""

    def __init__(self, magic: bytes):
        super().__init__(f"Bad magic: {magic!r}")
        self.magic = magic


class UnsupportedVersion(FormatError):
    """The header carries a version other than the supported one."""

    def __init__(self, version: int):
        super().__init__(f"Unsupported version: {version}")
        self.version = version


class UnknownVariant(FormatError):
    """The payload tag is neither digital (0) nor analog (1)."""

    def __init__(self, tag: int):
        super().__init__(f"Unknown data variant tag: {tag}")
        self.tag = tag


class TruncatedData(FormatError):
    """The stream ended before a field or array was fully read."""

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"Truncated data: expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


# ---- Programmer errors ----
class VariantMismatch(ExportError, TypeError):
    """Raised when assuming the wrong capture kind for an export."""
