from __future__ import annotations

import math


class Pager:
    """Page/selection tracker over a flat list of ``length`` rows.

    Selection moves clamp at the edges of the current page; crossing to another
    page is only done through ``change_page``.
    """

    def __init__(self, page_size: int, length: int = 0) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.current_page = 0
        self.selected_index = 0
        self.length = 0
        self.reclamp(length)

    @property
    def last_page(self) -> int:
        return max(0, math.ceil(self.length / self.page_size) - 1)

    @property
    def total_pages(self) -> int:
        return self.last_page + 1

    @property
    def rows_on_page(self) -> int:
        start = self.current_page * self.page_size
        return max(0, min(self.page_size, self.length - start))

    @property
    def has_selection(self) -> bool:
        return self.length > 0

    def page_bounds(self) -> tuple[int, int]:
        """Half-open [start, end) slice of the current page."""
        start = self.current_page * self.page_size
        return start, start + self.rows_on_page

    def absolute_index(self) -> int | None:
        if not self.has_selection:
            return None
        return self.current_page * self.page_size + self.selected_index

    def move_selection(self, delta: int) -> bool:
        if not self.has_selection or delta == 0:
            return False
        target = self.selected_index + delta
        target = max(0, min(target, self.rows_on_page - 1))
        if target == self.selected_index:
            return False
        self.selected_index = target
        return True

    def change_page(self, delta: int) -> bool:
        if delta == 0:
            return False
        step = 1 if delta > 0 else -1
        target = max(0, min(self.current_page + step, self.last_page))
        if target == self.current_page:
            return False
        self.current_page = target
        self.selected_index = 0
        return True

    def reclamp(self, new_length: int) -> None:
        self.length = max(0, new_length)
        if self.current_page > self.last_page:
            self.current_page = self.last_page
            self.selected_index = 0
        if not self.has_selection or self.selected_index >= self.rows_on_page:
            self.selected_index = 0
