"""Spacing and margin constants shared by every form widget."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class LayoutConfig:
    main_layout_spacing: int = 6
    main_layout_margins: Tuple[int, int, int, int] = (4, 4, 4, 4)
    content_layout_spacing: int = 10
    content_layout_margins: Tuple[int, int, int, int] = (2, 2, 2, 2)
    field_spacing: int = 3
    field_margins: Tuple[int, int, int, int] = (0, 0, 0, 0)
    nested_indent: int = 14
    row_spacing: int = 4
    error_color: str = "#d32f2f"
    description_color: str = "#71717a"


CURRENT_LAYOUT = LayoutConfig()
