import curses
from typing import List


class OverlayView:
    """Full-screen, scrollable help text drawn over the table."""

    def __init__(self, layout):
        self.layout = layout
        self.visible = False
        self.lines: List[str] = []
        self.scroll = 0
        self.win = None

    def open_help(self, lines: List[str]):
        self.lines = list(lines or [])
        self.scroll = 0
        self.win = curses.newwin(max(3, self.layout.H), self.layout.W, 0, 0)
        self.win.leaveok(True)
        self.visible = True

    def close(self):
        self.visible = False
        self.lines = []
        self.scroll = 0
        self.win = None

    def handle_key(self, ch):
        if not self.visible or self.win is None:
            return
        if ch == -1:
            return

        h, _ = self.win.getmaxyx()
        max_scroll = max(0, len(self.lines) - h)
        half_page = max(1, h // 2)

        if ch in (27, ord("q"), 10, 13, curses.KEY_ENTER, ord("?")):
            self.close()
            return

        if ch == curses.KEY_NPAGE:
            self.scroll = min(max_scroll, self.scroll + half_page)
        elif ch == curses.KEY_PPAGE:
            self.scroll = max(0, self.scroll - half_page)
        elif ch == curses.KEY_HOME:
            self.scroll = 0
        elif ch == curses.KEY_END:
            self.scroll = max_scroll
        elif ch in (ord("j"), curses.KEY_DOWN):
            self.scroll = min(max_scroll, self.scroll + 1)
        elif ch in (ord("k"), curses.KEY_UP):
            self.scroll = max(0, self.scroll - 1)

    def draw(self):
        if not self.visible or not self.win:
            return

        win = self.win
        win.erase()
        h, w = win.getmaxyx()

        for idx, line in enumerate(self.lines[self.scroll : self.scroll + h]):
            try:
                win.addnstr(idx, 0, line.ljust(w - 1), w - 1)
            except curses.error:
                pass

        win.refresh()
