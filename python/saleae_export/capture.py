"""numpy views of decoded capture payloads.

digital_* — edge times, (level, duration) intervals and stair-plot arrays.
analog_series — sample timestamps derived from rate and downsample factor.
series — picks the right view for either kind.
"""

from __future__ import annotations

import numpy as np

from .data import AnalogData, Data, DigitalData, Level
from .storage import SaleaeExport


def _levels(initial: bool, n: int) -> np.ndarray:
    levels = (np.arange(n) & 1).astype(bool)
    return ~levels if initial else levels


def digital_edges(data: DigitalData) -> tuple[np.ndarray, np.ndarray]:
    """Return (times, levels): each transition time and the level held up to it."""
    times = np.asarray(data.transition_times, dtype=np.float64)
    return times, _levels(bool(data.initial_state), len(times))


def digital_intervals(data: DigitalData) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised ``iter_samples``: (levels, durations) arrays."""
    times, levels = digital_edges(data)
    return levels, np.diff(times, prepend=0.0)


def digital_steps(data: DigitalData) -> tuple[np.ndarray, np.ndarray]:
    """Stair-plot arrays spanning begin_time .. end_time.

    ``y[i]`` holds from ``x[i]`` until ``x[i + 1]``; the first point is the
    initial state at begin_time and the last repeats the final level at
    end_time.
    """
    initial = bool(data.initial_state)
    times = np.asarray(data.transition_times, dtype=np.float64)
    n = len(times)

    x = np.empty(n + 2, dtype=np.float64)
    x[0] = data.begin_time
    x[1:n + 1] = times
    x[-1] = data.end_time

    # Level after transition i is the initial state flipped (i + 1) times
    y = np.empty(n + 2, dtype=np.float64)
    y[0] = float(initial)
    y[1:n + 1] = _levels(not initial, n)
    y[-1] = y[-2]
    return x, y


def analog_series(data: AnalogData) -> tuple[np.ndarray, np.ndarray]:
    """Return (times, values) with ``t[i] = begin + i * downsample / rate``."""
    if data.sample_rate == 0:
        raise ValueError("sample_rate is 0, cannot derive sample times")
    values = np.asarray(data.samples, dtype=np.float64)
    period = data.downsample / data.sample_rate
    times = data.begin_time + np.arange(len(values), dtype=np.float64) * period
    return times, values


def series(source: SaleaeExport | Data) -> tuple[np.ndarray, np.ndarray]:
    """Plottable (x, y) arrays for an export or a bare payload."""
    data = source.file_data if isinstance(source, SaleaeExport) else source
    if isinstance(data, DigitalData):
        return digital_steps(data)
    if isinstance(data, AnalogData):
        return analog_series(data)
    raise TypeError(f"Not a capture payload: {type(data).__name__}")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def digital_from_arrays(initial_state: bool | Level, transition_times,
                        begin_time: float | None = None,
                        end_time: float | None = None) -> DigitalData:
    """Build a DigitalData from an array of transition times.

    begin/end default to the first/last transition (0.0 when empty).
    """
    times = np.asarray(transition_times, dtype=np.float64).ravel()
    if begin_time is None:
        begin_time = float(times[0]) if len(times) else 0.0
    if end_time is None:
        end_time = float(times[-1]) if len(times) else 0.0
    return DigitalData(
        initial_state=Level.HIGH if initial_state else Level.LOW,
        begin_time=begin_time,
        end_time=end_time,
        transition_times=times.tolist(),
    )


def analog_from_arrays(samples, sample_rate: int, downsample: int = 1,
                       begin_time: float = 0.0) -> AnalogData:
    """Build an AnalogData from an array of samples."""
    values = np.asarray(samples, dtype=np.float64).ravel()
    return AnalogData(
        begin_time=begin_time,
        sample_rate=sample_rate,
        downsample=downsample,
        samples=values.tolist(),
    )
