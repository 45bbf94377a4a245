"""Capture payloads and the digital/analog variant codec.

Payload format (follows the 12-byte file header, see storage.py):
  [tag: uint32 LE]              0 = digital, 1 = analog

  digital:
    [initial_state: uint32]     0 = low, anything else = high
    [begin_time: float64]
    [end_time: float64]
    [transition_count: uint64]
    [transition_times: float64 × transition_count]

  analog:
    [begin_time: float64]
    [sample_rate: uint64]       Hz
    [downsample: uint64]
    [sample_count: uint64]
    [samples: float64 × sample_count]

Counts are never stored on the payload objects; they are taken from the
sequence length when writing.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, ClassVar, Iterable, Iterator, Union

from .errors import TruncatedData, UnknownVariant

logger = logging.getLogger(__name__)

# Wire format constants (all little-endian, no padding)
TAG_FMT = "<I"
TAG_SIZE = struct.calcsize(TAG_FMT)  # 4

DIGITAL_HEADER_FMT = "<IddQ"
DIGITAL_HEADER_SIZE = struct.calcsize(DIGITAL_HEADER_FMT)  # 28

ANALOG_HEADER_FMT = "<dQQQ"
ANALOG_HEADER_SIZE = struct.calcsize(ANALOG_HEADER_FMT)  # 32

F64_SIZE = 8
U64_MAX = (1 << 64) - 1

# Max float64 elements pulled from the stream per read
_ARRAY_CHUNK = 1 << 16


class DataKind(IntEnum):
    DIGITAL = 0
    ANALOG = 1


class Level(IntEnum):
    """Logic level of a digital channel.  ``bool(Level.HIGH)`` is True."""

    LOW = 0
    HIGH = 1

    @classmethod
    def from_wire(cls, raw: int) -> Level:
        """Map a raw uint32 to a level.  Any non-zero value reads as HIGH."""
        return cls.HIGH if raw else cls.LOW


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def read_exact(f: BinaryIO, n: int) -> bytes:
    """Read exactly *n* bytes or raise TruncatedData."""
    buf = bytearray()
    while len(buf) < n:
        chunk = f.read(n - len(buf))
        if not chunk:
            raise TruncatedData(n, len(buf))
        buf.extend(chunk)
    return bytes(buf)


def _read_f64_array(f: BinaryIO, count: int) -> tuple[float, ...]:
    """Read *count* little-endian float64 values in bounded chunks."""
    values: list[float] = []
    remaining = count
    while remaining:
        n = min(remaining, _ARRAY_CHUNK)
        try:
            raw = read_exact(f, n * F64_SIZE)
        except TruncatedData as e:
            consumed = (count - remaining) * F64_SIZE
            raise TruncatedData(count * F64_SIZE, consumed + e.received) from None
        values.extend(struct.unpack(f"<{n}d", raw))
        remaining -= n
    return tuple(values)


def _write_f64_array(f: BinaryIO, values: tuple[float, ...]) -> None:
    for start in range(0, len(values), _ARRAY_CHUNK):
        chunk = values[start:start + _ARRAY_CHUNK]
        f.write(struct.pack(f"<{len(chunk)}d", *chunk))


def _as_floats(values: Iterable[float]) -> tuple[float, ...]:
    return tuple(map(float, values))


def _check_u64(name: str, value: int) -> int:
    value = int(value)
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} out of uint64 range: {value}")
    return value


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DigitalData:
    """Edge-encoded digital channel.

    The signal starts at ``initial_state`` and toggles at every entry of
    ``transition_times``.  Times share the base of ``begin_time`` and
    ``end_time`` (seconds).
    """

    KIND: ClassVar[DataKind] = DataKind.DIGITAL

    initial_state: Level
    begin_time: float
    end_time: float
    transition_times: tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "initial_state", Level(self.initial_state))
        object.__setattr__(self, "begin_time", float(self.begin_time))
        object.__setattr__(self, "end_time", float(self.end_time))
        object.__setattr__(self, "transition_times",
                           _as_floats(self.transition_times))

    def iter_samples(self) -> Iterator[tuple[bool, float]]:
        """Yield ``(is_high, duration)`` for each transition, in order.

        The level starts at ``initial_state`` and flips on every entry;
        the duration is the gap to the previous transition time (the
        first one is measured from 0.0).  Each call starts a new pass.
        """
        initial = bool(self.initial_state)
        previous = 0.0
        for i, t in enumerate(self.transition_times):
            yield initial ^ bool(i & 1), t - previous
            previous = t

    @classmethod
    def read(cls, f: BinaryIO) -> DigitalData:
        """Read a digital payload (after the tag) from *f*."""
        raw_state, begin_time, end_time, count = struct.unpack(
            DIGITAL_HEADER_FMT, read_exact(f, DIGITAL_HEADER_SIZE))
        logger.debug("digital payload: state=%d transitions=%d",
                     raw_state, count)
        return cls(
            initial_state=Level.from_wire(raw_state),
            begin_time=begin_time,
            end_time=end_time,
            transition_times=_read_f64_array(f, count),
        )

    def write(self, f: BinaryIO) -> None:
        """Write this payload (without the tag) to *f*."""
        f.write(struct.pack(
            DIGITAL_HEADER_FMT,
            1 if self.initial_state else 0,
            self.begin_time, self.end_time,
            len(self.transition_times),
        ))
        _write_f64_array(f, self.transition_times)


@dataclass(frozen=True)
class AnalogData:
    """Uniformly sampled analog channel (voltages)."""

    KIND: ClassVar[DataKind] = DataKind.ANALOG

    begin_time: float
    sample_rate: int
    downsample: int
    samples: tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "begin_time", float(self.begin_time))
        object.__setattr__(self, "sample_rate",
                           _check_u64("sample_rate", self.sample_rate))
        object.__setattr__(self, "downsample",
                           _check_u64("downsample", self.downsample))
        object.__setattr__(self, "samples", _as_floats(self.samples))

    @classmethod
    def read(cls, f: BinaryIO) -> AnalogData:
        """Read an analog payload (after the tag) from *f*."""
        begin_time, sample_rate, downsample, count = struct.unpack(
            ANALOG_HEADER_FMT, read_exact(f, ANALOG_HEADER_SIZE))
        logger.debug("analog payload: rate=%d downsample=%d samples=%d",
                     sample_rate, downsample, count)
        return cls(
            begin_time=begin_time,
            sample_rate=sample_rate,
            downsample=downsample,
            samples=_read_f64_array(f, count),
        )

    def write(self, f: BinaryIO) -> None:
        """Write this payload (without the tag) to *f*."""
        f.write(struct.pack(
            ANALOG_HEADER_FMT,
            self.begin_time, self.sample_rate, self.downsample,
            len(self.samples),
        ))
        _write_f64_array(f, self.samples)


Data = Union[DigitalData, AnalogData]

_DATA_TYPES: dict[DataKind, type] = {
    DataKind.DIGITAL: DigitalData,
    DataKind.ANALOG: AnalogData,
}


# ---------------------------------------------------------------------------
# Variant codec
# ---------------------------------------------------------------------------

def read_data(f: BinaryIO) -> Data:
    """Read the variant tag and the matching payload from *f*."""
    tag = struct.unpack(TAG_FMT, read_exact(f, TAG_SIZE))[0]
    try:
        kind = DataKind(tag)
    except ValueError:
        raise UnknownVariant(tag) from None
    return _DATA_TYPES[kind].read(f)


def write_data(f: BinaryIO, data: Data) -> None:
    """Write the variant tag followed by *data*'s payload to *f*."""
    cls = _DATA_TYPES.get(getattr(data, "KIND", None))
    if cls is None or type(data) is not cls:
        raise TypeError(f"Not a capture payload: {type(data).__name__}")
    f.write(struct.pack(TAG_FMT, data.KIND))
    data.write(f)
