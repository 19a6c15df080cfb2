"""Marker palette shared by the live aerial view, the report cards and the PDF."""
from typing import Tuple

MARKER_COLORS = [
    "#34d399",  # emerald-400
    "#fbbf24",  # amber-400
    "#60a5fa",  # blue-400
    "#f87171",  # red-400
    "#a78bfa",  # violet-400
    "#f472b6",  # pink-400
]


def color_for_index(index: int) -> str:
    """Hex color for the placement at `index` (cycles through the palette)."""
    return MARKER_COLORS[index % len(MARKER_COLORS)]


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
