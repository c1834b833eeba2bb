import curses


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_HEADER_SORTED = 2
    MAX_COL_WIDTH = 40
    ARROW_UP = "^"
    ARROW_DOWN = "v"

    def __init__(self, headers=None, rows=None, max_col_width=None):
        if max_col_width:
            self.MAX_COL_WIDTH = max_col_width
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_HEADER_SORTED, curses.COLOR_BLACK, curses.COLOR_CYAN)
        except curses.error:
            pass

        self.headers: list[str] = []
        self.rows: list[list[str]] = []
        self.columns: list[int] = []  # visible table column indices, in order
        self.sort_column = None
        self.sort_ascending = True

        self.curr_row = 0
        self.curr_col = 0  # position within self.columns
        self.row_offset = 0
        self.col_offset = 0

        self.set_view(headers or [], rows or [], None)

    # ---------- data ----------
    def set_view(self, headers, rows, columns, sort_column=None, sort_ascending=True):
        """Point the grid at full-width display rows and the visible column mask."""
        current = self.current_column()
        self.headers = list(headers)
        self.rows = rows
        self.columns = list(range(len(self.headers))) if columns is None else list(columns)
        self.sort_column = sort_column
        self.sort_ascending = sort_ascending

        if current in self.columns:
            self.curr_col = self.columns.index(current)
        self.curr_col = max(0, min(self.curr_col, len(self.columns) - 1))
        self.curr_row = max(0, min(self.curr_row, len(self.rows) - 1))
        self.col_offset = max(0, min(self.col_offset, max(0, len(self.columns) - 1)))

    def current_column(self):
        """Table column index under the cursor, or None when nothing is visible."""
        if 0 <= self.curr_col < len(self.columns):
            return self.columns[self.curr_col]
        return None

    @staticmethod
    def cell_text(row, col_idx) -> str:
        if 0 <= col_idx < len(row):
            value = row[col_idx]
            return "" if value is None else str(value)
        return ""

    def header_label(self, col_idx) -> str:
        name = self.headers[col_idx] if col_idx < len(self.headers) else ""
        if col_idx == self.sort_column:
            arrow = self.ARROW_UP if self.sort_ascending else self.ARROW_DOWN
            return f"{name} {arrow}"
        return name

    def get_col_width(self, col_idx, rows=None):
        rows = self.rows if rows is None else rows
        max_len = len(self.header_label(col_idx))
        for row in rows:
            max_len = max(max_len, len(self.cell_text(row, col_idx)))
        return min(self.MAX_COL_WIDTH, max_len + 2)

    def visible_count(self, widths, avail_w) -> int:
        count = 0
        used = 0
        for cw in widths[self.col_offset :]:
            if used + cw + 1 > avail_w:
                break
            used += cw + 1
            count += 1
        return max(1, count)

    # ---------- navigation ----------
    def move_left(self):
        self.curr_col = max(0, self.curr_col - 1)

    def move_right(self):
        self.curr_col = max(0, min(len(self.columns) - 1, self.curr_col + 1))

    def move_down(self, page_end=None):
        last = len(self.rows) - 1 if page_end is None else page_end - 1
        self.curr_row = max(0, min(last, self.curr_row + 1))

    def move_up(self, page_start=0):
        self.curr_row = max(page_start, self.curr_row - 1)

    def adjust_col_viewport(self, widths, avail_w):
        if not self.columns:
            self.col_offset = 0
            return
        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        while self.col_offset < self.curr_col and self.curr_col >= self.col_offset + self.visible_count(widths, avail_w):
            self.col_offset += 1
        self.col_offset = max(0, min(self.col_offset, len(self.columns) - 1))

    # ---------- rendering ----------
    def draw(self, win, page_start=0, page_end=None):
        win.erase()
        try:
            win.bkgd(" ", curses.color_pair(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()

        if page_end is None:
            page_end = len(self.rows)
        page_rows = self.rows[page_start:page_end]

        if not self.columns:
            message = "No columns visible (:show all)" if self.headers else "No data"
            try:
                win.addnstr(1, 1, message, max(1, w - 2))
            except curses.error:
                pass
            win.refresh()
            return

        row_w = max(3, len(str(max(page_end - 1, 0))) + 1)
        avail_w = max(1, w - (row_w + 1))
        widths = [self.get_col_width(c, page_rows) for c in self.columns]
        self.adjust_col_viewport(widths, avail_w)
        shown = range(self.col_offset, self.col_offset + self.visible_count(widths, avail_w))
        shown = [pos for pos in shown if pos < len(self.columns)]

        # header
        x = row_w + 1
        for pos in shown:
            col_idx = self.columns[pos]
            eff_cw = min(widths[pos], max(1, w - x - 1))
            attr = curses.A_BOLD
            if col_idx == self.sort_column:
                attr |= curses.color_pair(self.PAIR_HEADER_SORTED)
            try:
                win.addnstr(0, x, self.header_label(col_idx)[:eff_cw].rjust(eff_cw), eff_cw, attr)
            except curses.error:
                pass
            x += eff_cw + 1

        # keep cursor row within the drawn window
        body_h = max(1, h - 1)
        local_curr = max(0, self.curr_row - page_start)
        if local_curr < self.row_offset:
            self.row_offset = local_curr
        elif local_curr >= self.row_offset + body_h:
            self.row_offset = local_curr - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, len(page_rows) - 1)))

        for line, local_r in enumerate(range(self.row_offset, min(len(page_rows), self.row_offset + body_h))):
            y = line + 1
            abs_r = page_start + local_r
            row = page_rows[local_r]
            try:
                win.addnstr(y, 0, str(abs_r).rjust(row_w), row_w)
            except curses.error:
                pass
            x = row_w + 1
            for pos in shown:
                col_idx = self.columns[pos]
                eff_cw = min(widths[pos], max(1, w - x - 1))
                text = self.cell_text(row, col_idx).replace("\n", " ")
                attr = curses.color_pair(self.PAIR_CELL_TEXT)
                if abs_r == self.curr_row and pos == self.curr_col:
                    attr |= curses.A_REVERSE
                try:
                    win.addnstr(y, x, text[:eff_cw].rjust(eff_cw), eff_cw, attr)
                except curses.error:
                    pass
                x += eff_cw + 1

        win.refresh()
