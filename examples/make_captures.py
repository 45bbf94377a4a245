#!/usr/bin/env python3
"""Generate synthetic digital and analog exports for viewer testing.

Writes /tmp/digital_0.bin (a 1 kHz square wave with a glitch) and
/tmp/analog_0.bin (a noisy 50 Hz sine sampled at 10 kHz).

Usage:
    python examples/make_captures.py

Then:
    saleae-export info /tmp/digital_0.bin
    saleae-export-viewer /tmp/analog_0.bin
"""

import numpy as np

from saleae_export import SaleaeExport, analog_from_arrays, digital_from_arrays

# --- Digital: square wave, 500 us half period, one short glitch ---

half_period = 500e-6
edges = np.arange(1, 41) * half_period
edges = np.sort(np.concatenate([edges, [10.2e-3, 10.21e-3]]))

digital = digital_from_arrays(False, edges, begin_time=0.0, end_time=21e-3)
SaleaeExport(0, digital).save("/tmp/digital_0.bin")
print(f"wrote /tmp/digital_0.bin ({len(digital.transition_times)} transitions)")

# --- Analog: 50 Hz sine with noise ---

rate = 10_000
t = np.arange(2_000) / rate
rng = np.random.default_rng(0)
volts = 1.65 + 1.5 * np.sin(2 * np.pi * 50 * t) + rng.normal(0, 0.02, t.size)

analog = analog_from_arrays(volts, sample_rate=rate)
SaleaeExport(0, analog).save("/tmp/analog_0.bin")
print(f"wrote /tmp/analog_0.bin ({len(analog.samples)} samples)")
