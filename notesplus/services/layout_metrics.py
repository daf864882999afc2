from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutMetrics:
    """Pixel heights for line rows.

    The rendered widget only knows its natural height after a layout pass, so
    multi-line content also gets an estimate from its line count to keep the
    row from collapsing in the meantime.
    """

    min_height: int = 28
    line_height: int = 20
    render_padding: int = 20
    edit_padding: int = 12

    def rendered_height(self, natural_height: int, line_count: int = 1) -> int:
        height = max(self.min_height, natural_height)
        if line_count > 1:
            height = max(height, line_count * self.line_height + self.render_padding)
        return height

    def editing_height(self, multi_line: bool, line_count: int = 1) -> int:
        if not multi_line:
            return self.min_height
        return max(self.min_height, line_count * self.line_height + self.edit_padding)
