class Paginator:
    """Page window over the display rows. Filtering resizes it, sorting does not."""

    def __init__(self, total_rows: int, page_size: int = 1000):
        self.page_size = max(1, page_size)
        self.page_index = 0
        self.total_rows = max(0, total_rows)
        self._clamp()

    def _clamp(self):
        max_page = self.page_count - 1
        self.page_index = max(0, min(self.page_index, max_page))

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self._clamp()

    def reset(self, total_rows: int):
        self.page_index = 0
        self.update_total_rows(total_rows)

    def next_page(self) -> bool:
        if self.page_end < self.total_rows:
            self.page_index += 1
            return True
        return False

    def prev_page(self) -> bool:
        if self.page_index > 0:
            self.page_index -= 1
            return True
        return False

    def ensure_row_visible(self, row: int):
        if self.total_rows == 0:
            self.page_index = 0
            return
        row = max(0, min(row, self.total_rows - 1))
        self.page_index = row // self.page_size

    def page_slice(self, rows):
        return rows[self.page_start : self.page_end]

    def label(self) -> str:
        last = max(self.page_start, self.page_end - 1)
        return f"Page {self.page_index + 1}/{self.page_count} rows {self.page_start}-{last} of {self.total_rows}"

    @property
    def page_start(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.total_rows, self.page_start + self.page_size)

    @property
    def page_count(self) -> int:
        if self.total_rows == 0:
            return 1
        return (self.total_rows - 1) // self.page_size + 1
