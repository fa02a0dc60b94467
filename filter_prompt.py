import curses
from typing import Callable, Optional

from table_state import PredicateKind


class FilterPrompt:
    """One-line filter editor on the status row.

    Every edit re-applies the filter, so the table follows the text as it
    is typed. Tab switches Equals/Contains, Ctrl+N / Ctrl+P move to the
    next / previous column.
    """

    KEY_TAB = 9
    KEY_CTRL_N = 14
    KEY_CTRL_P = 16

    def __init__(self, state, set_status_cb: Callable[[str, int], None]):
        self.state = state
        self._set_status = set_status_cb

        self.active = False
        self.column: Optional[int] = None
        self.kind = PredicateKind.EQUALS
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    # ---------- public API ----------
    def start(self, col_idx: int):
        if not self.state.is_loaded:
            self._set_status("No table loaded", 3)
            return

        spec = self.state.filter_spec
        self.active = True
        if spec is not None:
            self.column = spec.column_index
            self.kind = spec.kind
            self.buffer = spec.pattern
        else:
            self.column = col_idx
            self.buffer = ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            self._reset()
            return

        if ch == 27:  # Esc
            self.state.clear_filter()
            self._set_status("Filter cleared", 3)
            self._reset()
            return

        if ch == self.KEY_TAB:
            self.kind = (
                PredicateKind.CONTAINS
                if self.kind is PredicateKind.EQUALS
                else PredicateKind.EQUALS
            )
            self._apply()
            return

        if ch in (self.KEY_CTRL_N, self.KEY_CTRL_P):
            ncols = len(self.state.column_names)
            if ncols:
                step = 1 if ch == self.KEY_CTRL_N else -1
                self.column = ((self.column or 0) + step) % ncols
                self._apply()
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                self._apply()
            return

        if ch == curses.KEY_DC:
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
                self._apply()
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return

        if ch == curses.KEY_HOME:
            self.cursor = 0
            return

        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            self._apply()
            return

    def draw(self, win):
        if not self.active:
            return

        prompt = self.prompt_text()
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]

        try:
            win.addnstr(0, 0, prompt, w - 1)
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, min(w - 1, len(prompt) + (self.cursor - self.hscroll)))
        except curses.error:
            pass
        win.refresh()

    def prompt_text(self) -> str:
        names = self.state.column_names
        if self.column is not None and 0 <= self.column < len(names):
            name = names[self.column]
        else:
            name = "?"
        return f"Filter {name} [{self.kind}]: "

    # ---------- internals ----------
    def _apply(self):
        if self.column is None:
            return
        self.state.apply_filter(self.column, self.kind, self.buffer)

    def _reset(self):
        self.active = False
        self.column = None
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
