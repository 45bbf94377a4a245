"""Saleae Logic 2 binary export file read/write.

File format:
  [magic: "<SALEAE>" 8 bytes]
  [version: int32 LE]          only 0 is supported
  [variant tag + payload]      see data.py

The whole payload is read into memory in one front-to-back pass.  Errors
are never logged here: structural problems raise FormatError subclasses,
I/O problems surface as OSError straight from the stream.
"""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .data import AnalogData, Data, DataKind, DigitalData, read_exact, read_data, write_data
from .errors import BadMagic, UnsupportedVersion, VariantMismatch

logger = logging.getLogger(__name__)

MAGIC = b"<SALEAE>"
VERSION = 0
MAGIC_SIZE = len(MAGIC)  # 8
VERSION_FMT = "<i"
VERSION_SIZE = struct.calcsize(VERSION_FMT)  # 4
FILE_HEADER_SIZE = MAGIC_SIZE + VERSION_SIZE  # 12

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


@dataclass(frozen=True)
class SaleaeExport:
    """A decoded binary export: format version plus one capture payload."""

    version: int
    file_data: Data

    def __post_init__(self):
        if not _I32_MIN <= self.version <= _I32_MAX:
            raise ValueError(f"version out of int32 range: {self.version}")

    @property
    def kind(self) -> DataKind:
        return self.file_data.KIND

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def assume_digital(self) -> DigitalData:
        """Return the digital payload.

        Raises VariantMismatch if the capture is analog.
        """
        if isinstance(self.file_data, DigitalData):
            return self.file_data
        raise VariantMismatch("Expected data to be digital, found analog")

    def assume_analog(self) -> AnalogData:
        """Return the analog payload.

        Raises VariantMismatch if the capture is digital.
        """
        if isinstance(self.file_data, AnalogData):
            return self.file_data
        raise VariantMismatch("Expected data to be analog, found digital")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, path: str | Path) -> SaleaeExport:
        """Read an export from disk."""
        with open(path, "rb") as f:
            export = cls.read(f)
        logger.debug("read %s export from %s", export.kind.name.lower(), path)
        return export

    @classmethod
    def read(cls, f: BinaryIO) -> SaleaeExport:
        """Read an export from a binary stream positioned at the header."""
        magic = read_exact(f, MAGIC_SIZE)
        if magic != MAGIC:
            raise BadMagic(magic)

        version = struct.unpack(VERSION_FMT, read_exact(f, VERSION_SIZE))[0]
        if version != VERSION:
            raise UnsupportedVersion(version)

        return cls(version=version, file_data=read_data(f))

    @classmethod
    def read_from_bytes(cls, data: bytes) -> SaleaeExport:
        """Parse an export from an in-memory buffer."""
        return cls.read(io.BytesIO(data))

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> None:
        """Write the export to *path*, creating or truncating it."""
        with open(path, "wb") as f:
            self.write_to(f)
        logger.debug("wrote %s export to %s", self.kind.name.lower(), path)

    def write_to(self, f: BinaryIO) -> None:
        """Write the export to a binary stream.

        The stored version is written as-is; it is not re-validated.
        """
        f.write(MAGIC)
        f.write(struct.pack(VERSION_FMT, self.version))
        write_data(f, self.file_data)

    def to_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()


# ---------------------------------------------------------------------------
# Function-style aliases
# ---------------------------------------------------------------------------

def load(path: str | Path) -> SaleaeExport:
    return SaleaeExport.open(path)


def loads(data: bytes) -> SaleaeExport:
    return SaleaeExport.read_from_bytes(data)


def dump(export: SaleaeExport, path: str | Path) -> None:
    export.save(path)


def dumps(export: SaleaeExport) -> bytes:
    return export.to_bytes()
