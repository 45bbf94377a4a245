"""saleae-export command-line tool."""

from __future__ import annotations

import argparse
import csv
import logging
import os
import sys

import numpy as np

from .capture import analog_series, digital_steps
from .data import AnalogData, Data, DigitalData
from .errors import FormatError
from .storage import SaleaeExport

logger = logging.getLogger(__name__)

EXIT_IO_ERROR = 1
EXIT_FORMAT_ERROR = 2


def _format_duration(s: float) -> str:
    """Format a duration in seconds as a human-readable string."""
    a = abs(s)
    if a < 1e-6:
        return f"{s * 1e9:.1f}ns"
    if a < 1e-3:
        return f"{s * 1e6:.1f}us"
    if a < 1:
        return f"{s * 1e3:.1f}ms"
    if a < 60:
        return f"{s:.2f}s"
    if a < 3600:
        return f"{s / 60:.1f}m"
    return f"{s / 3600:.1f}h"


def _format_rate(hz: int) -> str:
    if hz >= 1_000_000:
        return f"{hz / 1_000_000:g} MHz"
    if hz >= 1_000:
        return f"{hz / 1_000:g} kHz"
    return f"{hz} Hz"


def _xy(data: Data) -> tuple[np.ndarray, np.ndarray]:
    """Time/value arrays; analog captures with no rate fall back to indices."""
    if isinstance(data, AnalogData) and data.sample_rate == 0:
        logger.warning("sample_rate is 0, using sample index as time")
        values = np.asarray(data.samples, dtype=np.float64)
        return np.arange(len(values), dtype=np.float64), values
    if isinstance(data, DigitalData):
        return digital_steps(data)
    return analog_series(data)


def _print_digital_info(data: DigitalData) -> None:
    x, y = digital_steps(data)
    spans = np.diff(x)
    high = float(np.sum(spans[y[:-1] > 0]))
    low = float(np.sum(spans[y[:-1] == 0]))

    print(f"Initial:     {data.initial_state.name}")
    print(f"Transitions: {len(data.transition_times):,}")
    print(f"Time high:   {_format_duration(high)}")
    print(f"Time low:    {_format_duration(low)}")


def _print_analog_info(data: AnalogData) -> None:
    n = len(data.samples)
    print(f"Sample rate: {_format_rate(data.sample_rate)}")
    print(f"Downsample:  {data.downsample}")
    print(f"Samples:     {n:,}")
    if n:
        values = np.asarray(data.samples, dtype=np.float64)
        print(f"Min:         {values.min():.6g} V")
        print(f"Max:         {values.max():.6g} V")
        print(f"Mean:        {values.mean():.6g} V")


def cmd_info(args: argparse.Namespace) -> None:
    """Print summary info about an export file."""
    file_size = os.path.getsize(args.file)
    export = SaleaeExport.open(args.file)
    data = export.file_data

    print(f"File:        {args.file}")
    print(f"Size:        {file_size:,} bytes")
    print(f"Version:     {export.version}")
    print(f"Kind:        {export.kind.name.lower()}")

    if isinstance(data, DigitalData):
        print(f"Time range:  {data.begin_time:.6f}s — {data.end_time:.6f}s")
        print(f"Duration:    {_format_duration(data.end_time - data.begin_time)}")
        _print_digital_info(data)
    else:
        x, _ = _xy(data)
        if len(x):
            print(f"Time range:  {x[0]:.6f}s — {x[-1]:.6f}s")
        else:
            print("Time range:  (empty)")
        _print_analog_info(data)


def cmd_dump(args: argparse.Namespace) -> None:
    """Dump intervals (digital) or samples (analog) to stdout."""
    data = SaleaeExport.open(args.file).file_data
    limit = args.limit

    if isinstance(data, DigitalData):
        for i, (is_high, duration) in enumerate(data.iter_samples()):
            if limit is not None and i >= limit:
                break
            print(f"{'HIGH' if is_high else 'LOW':4s} {duration:.9g}")
        return

    times, values = _xy(data)
    if limit is not None:
        times, values = times[:limit], values[:limit]
    for t, v in zip(times, values):
        print(f"{t:.9f} {v:.9g}")


def cmd_csv(args: argparse.Namespace) -> None:
    """Write time,value rows as CSV."""
    data = SaleaeExport.open(args.file).file_data
    times, values = _xy(data)

    out = open(args.output, "w", newline="") if args.output else sys.stdout
    try:
        writer = csv.writer(out)
        writer.writerow(["time", "value"])
        for t, v in zip(times.tolist(), values.tolist()):
            writer.writerow([repr(t), repr(v)])
    finally:
        if out is not sys.stdout:
            out.close()
    logger.debug("wrote %d csv rows", len(times))


def cmd_rewrite(args: argparse.Namespace) -> None:
    """Decode a file and encode it again to a new path."""
    export = SaleaeExport.open(args.file)
    export.save(args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saleae-export",
        description="Inspect and convert Saleae Logic 2 binary exports")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # info
    p_info = sub.add_parser("info", help="Show summary info about an export")
    p_info.add_argument("file", help="Path to a digital_N.bin / analog_N.bin file")

    # dump
    p_dump = sub.add_parser("dump", help="Dump intervals or samples")
    p_dump.add_argument("file", help="Path to a digital_N.bin / analog_N.bin file")
    p_dump.add_argument("--limit", type=int, default=None,
                        help="Stop after N lines")

    # csv
    p_csv = sub.add_parser("csv", help="Convert to time,value CSV")
    p_csv.add_argument("file", help="Path to a digital_N.bin / analog_N.bin file")
    p_csv.add_argument("-o", "--output", help="Output path (default: stdout)")

    # rewrite
    p_rw = sub.add_parser("rewrite", help="Decode and re-encode an export")
    p_rw.add_argument("file", help="Path to a digital_N.bin / analog_N.bin file")
    p_rw.add_argument("output", help="Destination path")

    return parser


_COMMANDS = {
    "info": cmd_info,
    "dump": cmd_dump,
    "csv": cmd_csv,
    "rewrite": cmd_rewrite,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        handler(args)
    except FormatError as e:
        print(f"error: {args.file}: not a valid Saleae export: {e}",
              file=sys.stderr)
        return EXIT_FORMAT_ERROR
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
