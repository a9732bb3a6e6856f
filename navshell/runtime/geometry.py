"""Conversion between terminal cells and the pixel space of the core.

Breakpoints, nav widths and scroll distances are pixel values. The terminal
host pretends every cell is ``cell_width_px`` by ``cell_height_px`` so those
values keep their meaning: at the default 10x20 cells, a 100-column terminal
is 1000px wide and lands in the tablet range.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CELL_WIDTH_PX = 10
DEFAULT_CELL_HEIGHT_PX = 20


@dataclass(frozen=True)
class CellGeometry:
    cell_width_px: int = DEFAULT_CELL_WIDTH_PX
    cell_height_px: int = DEFAULT_CELL_HEIGHT_PX

    def viewport_px(self, columns: int, rows: int) -> tuple[int, int]:
        return columns * self.cell_width_px, rows * self.cell_height_px

    def pointer_px(self, col: int, row: int) -> tuple[float, float]:
        """Pixel position of the centre of 1-based cell ``(col, row)``."""
        return (col - 0.5) * self.cell_width_px, (row - 0.5) * self.cell_height_px

    def width_cells(self, width_px: float) -> int:
        return int(round(width_px / self.cell_width_px))

    def rows_px(self, rows: int) -> int:
        return rows * self.cell_height_px

    def px_rows(self, height_px: float) -> int:
        return int(height_px // self.cell_height_px)


def parse_cell_size(value: str) -> CellGeometry:
    """Parse ``WxH`` (e.g. ``10x20``) into a ``CellGeometry``."""
    width, height = parse_dimensions(value)
    return CellGeometry(cell_width_px=width, cell_height_px=height)


def parse_dimensions(value: str) -> tuple[int, int]:
    """Parse ``WxH`` into two positive integers."""
    parts = value.lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"expected WIDTHxHEIGHT, got {value!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ValueError(f"expected WIDTHxHEIGHT, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"dimensions must be positive, got {value!r}")
    return width, height
