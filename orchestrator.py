import curses
import logging
import time

from command_pane import CommandPane
from grid_pane import GridPane
from overlay import OverlayView
from pagination import Paginator
from screen_layout import ScreenLayout
from status_bar import render_status
from view_requests import (
    ClearFilters,
    ClearSort,
    ExecuteQuery,
    GetDisplayRows,
    OpenFile,
    RequestError,
    SetAllColumnsVisible,
    SetColumnVisibility,
    SetSort,
    parse_command,
)


logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, session, config=None):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.config = dict(config or {})
        self.session = session
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane(max_col_width=self.config.get("MAX_COL_WIDTH"))
        self.paginator = Paginator(0, page_size=self.config.get("PAGE_SIZE", 1000))
        self.command = CommandPane()
        self.overlay = OverlayView(self.layout)

        self.focus = 0  # 0=grid, 1=cmd, 2=overlay
        self.status_msg = None
        self.status_msg_until = 0
        self.exit_requested = False

        self.rows = []
        self.sync_view(reset=True)
        if self.session.has_error():
            self.overlay.open_error(self.session.error)
            self.focus = 2

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def sync_view(self, reset=False):
        """Pull display rows and visibility out of the session into the grid."""
        engine = self.session.engine
        self.rows = engine.get_display_rows()
        if reset:
            self.grid.curr_row = 0
            self.grid.curr_col = 0
            self.paginator.reset(len(self.rows))
        else:
            self.paginator.update_total_rows(len(self.rows))
        self.grid.set_view(
            self.session.headers,
            self.rows,
            engine.visible_columns(),
            sort_column=engine.sort_spec.column_index,
            sort_ascending=engine.sort_spec.ascending,
        )
        self.paginator.ensure_row_visible(self.grid.curr_row)
        self.command.set_column_names(self.session.headers)

    def submit(self, request, reset=False):
        response = self.session.handle(request)
        self.sync_view(reset=reset)
        if response.message:
            self._set_status(response.message, 3 if response.ok else 4)
        return response

    def status_context(self):
        engine = self.session.engine
        spec = engine.sort_spec
        sort_label = None
        if spec.active:
            name = self.session.headers[spec.column_index]
            sort_label = f"{name} {'asc' if spec.ascending else 'desc'}"
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "file_path": self.session.file_path,
            "row_count": engine.row_count,
            "total_rows": engine.table.row_count,
            "filter_count": len(engine.active_filters),
            "sort_label": sort_label,
            "hidden_count": engine.table.column_count - len(engine.visible_columns()),
            "page_label": self.paginator.label(),
        }

    # ---------------- UI ----------------

    def redraw(self):
        try:
            curses.curs_set(1 if (self.focus == 1 and self.command.active) else 0)
        except curses.error:
            pass

        self.grid.draw(
            self.layout.table_win,
            page_start=self.paginator.page_start,
            page_end=self.paginator.page_end,
        )

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self.status_context(), w), max(1, w - 1), curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

        if self.focus == 1 and self.command.active:
            self.command.draw(self.layout.cmd_win, active=True)
        else:
            self.layout.cmd_win.erase()
            self.layout.cmd_win.refresh()

        if self.overlay.visible:
            self.overlay.draw()

    # ---------------- commands ----------------

    def execute_command(self, text):
        text = (text or "").strip()
        self.command.reset()
        self.focus = 0
        if not text:
            self._set_status("No command to execute", 3)
            return None

        self.command.remember(text)
        try:
            request = parse_command(text)
        except RequestError as exc:
            self._set_status(str(exc), 4)
            return None

        response = self.submit(request, reset=isinstance(request, OpenFile))
        if isinstance(request, OpenFile) and self.session.has_error():
            self.overlay.open_error(self.session.error)
            self.focus = 2
        elif isinstance(request, ExecuteQuery):
            self.overlay.open_output([f"query: {request.query}", "", response.message])
            self.focus = 2
        elif isinstance(request, GetDisplayRows):
            self._set_status(self.session.row_count_message(), 3)
        return response

    def handle_grid_key(self, ch):
        if ch in (ord("h"), curses.KEY_LEFT):
            self.grid.move_left()
        elif ch in (ord("l"), curses.KEY_RIGHT):
            self.grid.move_right()
        elif ch in (ord("j"), curses.KEY_DOWN):
            self.grid.move_down(page_end=self.paginator.page_end)
        elif ch in (ord("k"), curses.KEY_UP):
            self.grid.move_up(page_start=self.paginator.page_start)
        elif ch in (ord("n"), curses.KEY_NPAGE):
            if self.paginator.next_page():
                self.grid.curr_row = self.paginator.page_start
                self.grid.row_offset = 0
        elif ch in (ord("p"), curses.KEY_PPAGE):
            if self.paginator.prev_page():
                self.grid.curr_row = self.paginator.page_start
                self.grid.row_offset = 0
        elif ch == ord("s"):
            column = self.grid.current_column()
            if column is not None:
                self.submit(SetSort(column))
        elif ch == ord("S"):
            self.submit(ClearSort())
        elif ch == ord("c"):
            self.submit(ClearFilters())
        elif ch == ord("x"):
            column = self.grid.current_column()
            if column is not None:
                self.submit(SetColumnVisibility(column, False))
        elif ch == ord("a"):
            self.submit(SetAllColumnsVisible(True))
        elif ch == ord(":"):
            self.command.activate()
            self.focus = 1
        elif ch == ord("?"):
            self.overlay.open_help()
            self.focus = 2
        elif ch == ord("q"):
            self.exit_requested = True

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while not self.exit_requested:
            ch = self.stdscr.getch()

            if ch == 3:  # Ctrl+C
                break

            if ch == curses.KEY_RESIZE:
                self.layout.resize()
                if self.overlay.visible:
                    self.overlay.close()
                    self.focus = 0
                self.redraw()
                continue

            if ch == -1:
                self.redraw()
                continue

            if self.overlay.visible:
                self.overlay.handle_key(ch)
                if not self.overlay.visible:
                    self.focus = 0
            elif self.focus == 1:
                result = self.command.handle_key(ch)
                if result == "submit":
                    self.execute_command(self.command.get_buffer())
                elif result == "cancel":
                    self.focus = 0
            else:
                self.handle_grid_key(ch)

            self.redraw()
