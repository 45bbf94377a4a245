"""saleae_export - Saleae Logic 2 binary export reader/writer."""

from .errors import (
    ExportError, FormatError, BadMagic, UnsupportedVersion, UnknownVariant,
    TruncatedData, VariantMismatch,
)
from .data import DataKind, Level, DigitalData, AnalogData, read_data, write_data
from .storage import SaleaeExport, load, loads, dump, dumps
from .capture import (
    digital_edges, digital_intervals, digital_steps, analog_series, series,
    digital_from_arrays, analog_from_arrays,
)

__all__ = [
    "ExportError", "FormatError", "BadMagic", "UnsupportedVersion",
    "UnknownVariant", "TruncatedData", "VariantMismatch",
    "DataKind", "Level", "DigitalData", "AnalogData", "read_data", "write_data",
    "SaleaeExport", "load", "loads", "dump", "dumps",
    "digital_edges", "digital_intervals", "digital_steps", "analog_series",
    "series", "digital_from_arrays", "analog_from_arrays",
]
