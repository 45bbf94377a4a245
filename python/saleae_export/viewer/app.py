"""DearPyGui application shell — one plot window, menu bar, main loop."""

from __future__ import annotations

import logging
from pathlib import Path

import dearpygui.dearpygui as dpg

from ..capture import series
from ..data import DigitalData
from ..errors import FormatError
from ..storage import SaleaeExport

logger = logging.getLogger(__name__)

_LEVEL_TICKS = (("LOW", 0.0), ("HIGH", 1.0))


class ViewerApp:
    """Top-level viewer application."""

    def __init__(self) -> None:
        self._export: SaleaeExport | None = None
        self._series_tag: int | str | None = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def setup(self) -> None:
        logging.basicConfig(level=logging.INFO,
                            format="%(name)s: %(message)s")

        dpg.create_context()
        dpg.create_viewport(title="Saleae export viewer", width=1280, height=720)

        self._build_layout()
        self._build_file_dialog()

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("plot_window", True)

    def _build_layout(self) -> None:
        with dpg.viewport_menu_bar():
            with dpg.menu(label="File"):
                dpg.add_menu_item(label="Open File...",
                                  callback=lambda: dpg.show_item("file_dialog"))
                dpg.add_separator()
                dpg.add_menu_item(label="Quit",
                                  callback=lambda: dpg.stop_dearpygui())

            dpg.add_text("Status: No file loaded.", tag="status_bar")

        with dpg.window(label="Capture", tag="plot_window"):
            with dpg.plot(label="##capture", tag="plot", height=-1, width=-1,
                          anti_aliased=True):
                dpg.add_plot_legend()
                dpg.add_plot_axis(dpg.mvXAxis, label="Time (s)", tag="x_axis")
                dpg.add_plot_axis(dpg.mvYAxis, label="Value", tag="y_axis")

    def _build_file_dialog(self) -> None:
        with dpg.file_dialog(directory_selector=False, show=False,
                             callback=self._on_file_selected,
                             tag="file_dialog", width=600, height=400):
            dpg.add_file_extension(".bin", color=(0, 255, 0, 255))
            dpg.add_file_extension(".*")

    def _on_file_selected(self, sender, app_data) -> None:
        path = app_data.get("file_path_name")
        if path:
            self.open_file(path)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def open_file(self, path: str) -> None:
        """Load an export and replace the plotted series."""
        try:
            export = SaleaeExport.open(path)
        except (OSError, FormatError) as e:
            self._set_status(f"Error opening file: {e}")
            return
        self._export = export
        self._show(Path(path).name, export)

    def _show(self, label: str, export: SaleaeExport) -> None:
        if self._series_tag is not None and dpg.does_item_exist(self._series_tag):
            dpg.delete_item(self._series_tag)

        data = export.file_data
        try:
            x, y = series(export)
        except ValueError as e:
            self._set_status(f"Cannot plot {label}: {e}")
            return

        if isinstance(data, DigitalData):
            self._series_tag = dpg.add_stair_series(
                x.tolist(), y.tolist(), label=label, parent="y_axis")
            dpg.set_axis_ticks("y_axis", _LEVEL_TICKS)
            dpg.set_axis_limits("y_axis", -0.25, 1.25)
            detail = f"{len(data.transition_times):,} transitions"
        else:
            self._series_tag = dpg.add_line_series(
                x.tolist(), y.tolist(), label=label, parent="y_axis")
            dpg.reset_axis_ticks("y_axis")
            dpg.set_axis_limits_auto("y_axis")
            dpg.fit_axis_data("y_axis")
            detail = f"{len(data.samples):,} samples @ {data.sample_rate} Hz"

        dpg.fit_axis_data("x_axis")
        logger.info("loaded %s (%s)", label, detail)
        self._set_status(f"{label}: {export.kind.name.lower()}, {detail}")

    # ------------------------------------------------------------------
    # Status bar
    # ------------------------------------------------------------------

    def _set_status(self, text: str) -> None:
        if dpg.does_item_exist("status_bar"):
            dpg.set_value("status_bar", f"Status: {text}")

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        dpg.start_dearpygui()
        dpg.destroy_context()
