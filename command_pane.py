import curses
from typing import List, NamedTuple, Optional

from view_requests import COMMAND_WORDS


CTRL_A, CTRL_E, CTRL_N, CTRL_P, CTRL_U, CTRL_W = 1, 5, 14, 16, 21, 23
TAB, ESC = 9, 27
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
GHOST_PAIR = 9


class Completion(NamedTuple):
    """Replace ``text[start:end]`` with ``word``; ``tail`` is what the ghost shows."""

    word: str
    tail: str
    start: int
    end: int


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def word_start(text: str, pos: int) -> int:
    while pos > 0 and not is_word_char(text[pos - 1]):
        pos -= 1
    while pos > 0 and is_word_char(text[pos - 1]):
        pos -= 1
    return pos


def word_end(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and not is_word_char(text[pos]):
        pos += 1
    while pos < n and is_word_char(text[pos]):
        pos += 1
    return pos


class CommandPane:
    """The ``:`` line. Emacs-style editing, session history and Tab completion."""

    MAX_HISTORY = 100

    def __init__(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.active = False
        self.history: List[str] = []
        self.history_idx: Optional[int] = None
        self.column_names: List[str] = []
        self.meta_pending = False
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(GHOST_PAIR, curses.COLOR_WHITE, -1)
            self.ghost_attr = curses.color_pair(GHOST_PAIR) | curses.A_DIM
        except curses.error:
            self.ghost_attr = curses.A_DIM

        self._motions = {
            curses.KEY_LEFT: lambda: max(0, self.cursor - 1),
            curses.KEY_RIGHT: lambda: min(len(self.buffer), self.cursor + 1),
            curses.KEY_HOME: lambda: 0,
            CTRL_A: lambda: 0,
            curses.KEY_END: lambda: len(self.buffer),
            CTRL_E: lambda: len(self.buffer),
        }

    # ---------- state ----------
    def reset(self):
        self.active = False
        self.meta_pending = False
        self._replace("")

    def activate(self):
        self.active = True
        self.history_idx = None
        self.cursor = max(0, min(self.cursor, len(self.buffer)))

    def get_buffer(self):
        return self.buffer

    def set_buffer(self, text):
        self._replace(text or "")

    def _replace(self, text, cursor=None):
        self.buffer = text
        self.cursor = len(text) if cursor is None else cursor
        self.hscroll = 0
        self.history_idx = None

    def _edit(self, text, cursor):
        """Change the buffer in place; leaves history navigation."""
        self.buffer = text
        self.cursor = cursor
        self.history_idx = None

    def set_column_names(self, names):
        self.column_names = [str(n) for n in (names or [])]

    # ---------- history ----------
    def remember(self, entry):
        entry = (entry or "").strip()
        if not entry or (self.history and self.history[-1] == entry):
            return
        self.history.append(entry)
        del self.history[: -self.MAX_HISTORY]

    def history_back(self):
        if not self.history:
            return
        idx = len(self.history) - 1 if self.history_idx is None else max(0, self.history_idx - 1)
        self._replace(self.history[idx])
        self.history_idx = idx

    def history_forward(self):
        if self.history_idx is None:
            return
        idx = self.history_idx + 1
        if idx >= len(self.history):
            self._replace("")
            return
        self._replace(self.history[idx])
        self.history_idx = idx

    # ---------- completion ----------
    def _get_suggestion(self) -> Optional[Completion]:
        """Complete the last word: a command word in first position, else a column name."""
        if self.cursor != len(self.buffer):
            return None
        token = self.buffer.split(" ")[-1]
        start = len(self.buffer) - len(token)
        if not token:
            return None

        pool = self.column_names if self.buffer[:start].strip() else COMMAND_WORDS
        lowered = token.lower()
        matches = sorted(
            (c for c in pool if c != token and c.lower().startswith(lowered)),
            key=lambda c: (len(c), c),
        )
        if not matches:
            return None
        return Completion(matches[0], matches[0][len(token) :], start, len(self.buffer))

    def _apply_suggestion(self, completion: Completion):
        text = self.buffer[: completion.start] + completion.word + self.buffer[completion.end :]
        self._edit(text, completion.start + len(completion.word))

    # ---------- keys ----------
    def _handle_meta(self, ch):
        self.meta_pending = False
        if ch in (ord("f"), ord("F")):
            self.cursor = word_end(self.buffer, self.cursor)
            return None
        if ch in (ord("b"), ord("B")):
            self.cursor = word_start(self.buffer, self.cursor)
            return None
        self.reset()
        return "cancel"

    def handle_key(self, ch):
        """Feed one key. Returns "submit", "cancel" or None."""
        if not self.active:
            return None
        if self.meta_pending:
            return self._handle_meta(ch)

        if ch in ENTER_KEYS:
            return "submit"
        if ch == ESC:
            self.meta_pending = True
        elif ch in (CTRL_P, curses.KEY_UP):
            self.history_back()
        elif ch in (CTRL_N, curses.KEY_DOWN):
            self.history_forward()
        elif ch == TAB:
            completion = self._get_suggestion()
            if completion:
                self._apply_suggestion(completion)
        elif ch == CTRL_W:
            start = word_start(self.buffer, self.cursor)
            if start < self.cursor:
                self._edit(self.buffer[:start] + self.buffer[self.cursor :], start)
        elif ch == CTRL_U:
            if self.cursor > 0:
                self._edit(self.buffer[self.cursor :], 0)
        elif ch in BACKSPACE_KEYS:
            if not self.buffer:
                self.reset()
                return "cancel"
            if self.cursor > 0:
                self._edit(self.buffer[: self.cursor - 1] + self.buffer[self.cursor :], self.cursor - 1)
        elif ch in self._motions:
            self.cursor = self._motions[ch]()
        elif 32 <= ch <= 126:
            self._edit(self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :], self.cursor + 1)
        return None

    # ---------- rendering ----------
    def draw(self, win, active=False):
        win.erase()
        _, w = win.getmaxyx()
        prompt = ":"
        text_w = max(1, w - len(prompt) - 1)

        # keep the cursor inside the visible slice
        self.hscroll = min(self.hscroll, self.cursor)
        self.hscroll = max(self.hscroll, self.cursor - text_w)
        cursor_col = self.cursor - self.hscroll

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), self.buffer[self.hscroll : self.hscroll + text_w], text_w)
        except curses.error:
            pass

        completion = self._get_suggestion() if self.active else None
        if completion and completion.tail and cursor_col < text_w:
            room = text_w - cursor_col
            try:
                win.addnstr(0, len(prompt) + cursor_col, completion.tail[:room], room, self.ghost_attr)
            except curses.error:
                pass

        if active and self.active:
            try:
                win.move(0, max(0, min(len(prompt) + cursor_col, w - 1)))
            except curses.error:
                pass

        win.refresh()
