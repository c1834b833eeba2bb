import curses
from typing import List, Optional, Tuple


HELP_LINES = [
    "Keys",
    "  h j k l / arrows   move",
    "  n / p              next / previous page",
    "  s                  sort by cursor column (again to reverse)",
    "  S                  clear sort",
    "  c                  clear filters",
    "  x                  hide cursor column",
    "  a                  show all columns",
    "  :                  command bar",
    "  ?                  this help",
    "  q / Ctrl+C         quit",
    "",
    "Commands",
    "  filter <column> <operator> <value>",
    "      operators: contains equals startsWith endsWith greaterThan lessThan",
    "      aliases:   ~ = ^ $ > <",
    "  clear                         remove all filters",
    "  sort <column> / unsort",
    "  show <column>|all / hide <column>|all",
    "  export <csv|json|excel> [path]",
    "  query <sql>",
    "  open <path>",
    "",
    "Columns may be given by header name or by 0-based index.",
]

ERROR_TITLE = "Table Viewer Error"
ERROR_HINT = "Please try opening a different CSV file."

CLOSE_KEYS = (27, ord("q"), ord("?"), 10, 13, curses.KEY_ENTER)


class OverlayView:
    """Scrollable text panel drawn over the grid: help, query output or a load error.

    Help fills the table area without a border. The other modes get a boxed
    window centred vertically and sized to their content.
    """

    def __init__(self, layout):
        self.layout = layout
        self.visible = False
        self.mode: Optional[str] = None
        self.lines: List[str] = []
        self.scroll = 0
        self.win = None

    def open_help(self):
        self._open("help", HELP_LINES)

    def open_output(self, lines: List[str]):
        self._open("output", lines)

    def open_error(self, message: str):
        self._open("error", [ERROR_TITLE, "", *str(message).splitlines(), "", ERROR_HINT])

    def _geometry(self) -> Tuple[int, int]:
        """Height and top row of the overlay window for the current mode."""
        if self.mode == "help":
            return max(3, self.layout.table_h), 0
        limit = max(3, min(self.layout.H // 2, self.layout.H - 2))
        height = max(3, min(len(self.lines) + 2, limit))
        return height, max(0, (self.layout.table_h - height) // 2)

    def _open(self, mode: str, lines):
        self.mode = mode
        self.lines = list(lines or [])
        self.scroll = 0
        height, top = self._geometry()
        self.win = curses.newwin(height, self.layout.W, top, 0)
        self.win.leaveok(True)
        self.visible = True

    def close(self):
        self.visible = False
        self.mode = None
        self.lines = []
        self.scroll = 0
        self.win = None

    @property
    def boxed(self) -> bool:
        return self.mode != "help"

    def _content_rows(self) -> int:
        if self.win is None:
            return 0
        h, _ = self.win.getmaxyx()
        return max(0, h - 2) if self.boxed else h

    def handle_key(self, ch):
        if not self.visible or self.win is None or ch == -1:
            return
        if ch in CLOSE_KEYS:
            self.close()
            return

        rows = self._content_rows()
        bottom = max(0, len(self.lines) - rows)
        half = max(1, rows // 2)
        steps = {
            curses.KEY_NPAGE: self.scroll + half,
            curses.KEY_PPAGE: self.scroll - half,
            curses.KEY_HOME: 0,
            curses.KEY_END: bottom,
            ord("j"): self.scroll + 1,
            curses.KEY_DOWN: self.scroll + 1,
            ord("k"): self.scroll - 1,
            curses.KEY_UP: self.scroll - 1,
        }
        if ch in steps:
            self.scroll = max(0, min(bottom, steps[ch]))

    def draw(self):
        if not self.visible or self.win is None:
            return

        win = self.win
        win.erase()
        _, w = win.getmaxyx()
        if self.boxed:
            win.box()
            top, left, width = 1, 1, w - 2
        else:
            top, left, width = 0, 0, w - 1

        shown = self.lines[self.scroll : self.scroll + self._content_rows()]
        for offset, line in enumerate(shown):
            bold = self.mode == "error" and self.scroll + offset == 0
            try:
                win.addnstr(top + offset, left, line, max(1, width), curses.A_BOLD if bold else 0)
            except curses.error:
                pass

        win.refresh()
