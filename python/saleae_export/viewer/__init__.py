"""Saleae export viewer — DearPyGui-based capture plotter."""

from __future__ import annotations

import argparse
import sys


def launch() -> None:
    """Entry point for ``saleae-export-viewer`` console script."""
    parser = argparse.ArgumentParser(
        prog="saleae-export-viewer",
        description="Plot a Saleae Logic 2 binary export",
    )
    parser.add_argument("file", nargs="?", default=None,
                        help="Path to a digital_N.bin / analog_N.bin file to open")
    args = parser.parse_args()

    try:
        import dearpygui.dearpygui  # noqa: F401
    except ImportError:
        print("Error: dearpygui is required for the viewer.\n"
              "Install with: pip install 'saleae-export[viewer]'",
              file=sys.stderr)
        sys.exit(1)

    from .app import ViewerApp

    app = ViewerApp()
    app.setup()

    if args.file:
        app.open_file(args.file)

    app.run()
