#!/usr/bin/env python3
"""Print the (level, duration) intervals of a digital export.

    python examples/print_samples.py digital_0.bin
"""

import sys

from saleae_export import SaleaeExport

data = SaleaeExport.open(sys.argv[1]).assume_digital()

for is_high, time_len in data.iter_samples():
    print(f"bit state: {is_high} | time: {time_len}")
