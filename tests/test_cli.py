"""Test the saleae-export command-line tool.

Run from the repo root:
    python3 tests/test_cli.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import contextlib
import csv
import io
import struct
import tempfile

from saleae_export.cli import EXIT_FORMAT_ERROR, EXIT_IO_ERROR, main
from saleae_export.data import AnalogData, DigitalData, Level
from saleae_export.storage import SaleaeExport


def run(argv):
    """Run main(argv), returning (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


def write_export(tmpdir, name, data):
    path = os.path.join(tmpdir, name)
    SaleaeExport(0, data).save(path)
    return path


def digital_data():
    return DigitalData(Level.LOW, 0.0, 4.0, [1.0, 3.0, 3.5])


def analog_data():
    return AnalogData(begin_time=0.0, sample_rate=1000, downsample=1,
                      samples=[0.1, 0.2, 0.15])


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_info_digital():
    print("test_info_digital...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "digital_0.bin", digital_data())
        code, out, _ = run(["info", path])

    assert code == 0
    assert "Kind:        digital" in out
    assert "Initial:     LOW" in out
    assert "Transitions: 3" in out
    # high from 1.0 to 3.0 and 3.5 to 4.0
    assert "Time high:   2.50s" in out
    assert "Time low:    1.50s" in out

    print(" OK")


def test_info_analog():
    print("test_info_analog...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "analog_0.bin", analog_data())
        code, out, _ = run(["info", path])

    assert code == 0
    assert "Kind:        analog" in out
    assert "Sample rate: 1 kHz" in out
    assert "Samples:     3" in out
    assert "Max:         0.2 V" in out

    print(" OK")


def test_dump_digital():
    print("test_dump_digital...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "digital_0.bin", digital_data())
        code, out, _ = run(["dump", path])
        assert code == 0
        assert out.splitlines() == ["LOW  1", "HIGH 2", "LOW  0.5"]

        code, out, _ = run(["dump", "--limit", "1", path])
        assert out.splitlines() == ["LOW  1"]

    print(" OK")


def test_dump_analog():
    print("test_dump_analog...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "analog_0.bin", analog_data())
        code, out, _ = run(["dump", path])

    assert code == 0
    lines = out.splitlines()
    assert lines == ["0.000000000 0.1", "0.001000000 0.2", "0.002000000 0.15"]

    print(" OK")


def test_csv_output_file():
    print("test_csv_output_file...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "analog_0.bin", analog_data())
        csv_path = os.path.join(tmpdir, "out.csv")
        code, out, _ = run(["csv", path, "-o", csv_path])
        assert code == 0
        assert out == ""

        with open(csv_path, newline="") as f:
            rows = list(csv.reader(f))

    assert rows[0] == ["time", "value"]
    assert [float(r[1]) for r in rows[1:]] == [0.1, 0.2, 0.15]

    print(" OK")


def test_csv_zero_rate_uses_index():
    print("test_csv_zero_rate_uses_index...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_export(tmpdir, "analog_0.bin",
                            AnalogData(0.0, 0, 1, [1.0, 2.0]))
        code, out, _ = run(["csv", path])

    assert code == 0
    rows = list(csv.reader(io.StringIO(out)))
    assert rows[1:] == [["0.0", "1.0"], ["1.0", "2.0"]]

    print(" OK")


def test_rewrite_normalises_level():
    """Re-encoding a file with a lenient level writes exactly 1."""
    print("test_rewrite_normalises_level...", end="")

    raw = (b"<SALEAE>" + struct.pack("<iIIddQ", 0, 0, 5, 0.0, 1.0, 1)
           + struct.pack("<d", 0.5))

    with tempfile.TemporaryDirectory() as tmpdir:
        src = os.path.join(tmpdir, "digital_0.bin")
        dst = os.path.join(tmpdir, "digital_0.out.bin")
        with open(src, "wb") as f:
            f.write(raw)

        code, _, _ = run(["rewrite", src, dst])
        assert code == 0

        with open(dst, "rb") as f:
            out = f.read()

    assert len(out) == len(raw)
    assert struct.unpack_from("<I", out, 16)[0] == 1
    assert out[20:] == raw[20:]

    print(" OK")


def test_format_error_exit_code():
    print("test_format_error_exit_code...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "bogus.bin")
        with open(path, "wb") as f:
            f.write(b"not a saleae export")
        code, _, err = run(["info", path])

    assert code == EXIT_FORMAT_ERROR
    assert "not a valid Saleae export" in err

    print(" OK")


def test_io_error_exit_code():
    print("test_io_error_exit_code...", end="")

    with tempfile.TemporaryDirectory() as tmpdir:
        code, _, err = run(["dump", os.path.join(tmpdir, "missing.bin")])

    assert code == EXIT_IO_ERROR
    assert err.startswith("error: ")

    print(" OK")


def test_no_command_prints_help():
    print("test_no_command_prints_help...", end="")

    code, out, _ = run([])
    assert code == 0
    assert "usage: saleae-export" in out

    print(" OK")


if __name__ == "__main__":
    print("saleae_export cli tests")
    print("=======================\n")

    test_info_digital()
    test_info_analog()
    test_dump_digital()
    test_dump_analog()
    test_csv_output_file()
    test_csv_zero_rate_uses_index()
    test_rewrite_normalises_level()
    test_format_error_exit_code()
    test_io_error_exit_code()
    test_no_command_prints_help()

    print("\nAll tests passed.")
