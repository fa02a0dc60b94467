import curses
import glob
import os
import shlex
from typing import Callable, Optional


def expand_paths(text: str) -> list[str]:
    """Split prompt input into paths, expanding ``~`` and glob patterns.

    Patterns that match nothing are kept as typed so the caller can report
    them.
    """
    paths: list[str] = []
    for token in shlex.split(text):
        token = os.path.expanduser(token)
        if glob.has_magic(token):
            matches = sorted(glob.glob(token))
            if matches:
                paths.extend(matches)
                continue
        paths.append(token)
    return paths


class OpenPrompt:
    def __init__(self, state, set_status_cb: Callable[[str, int], None]):
        self.state = state
        self._set_status = set_status_cb

        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def start(self, initial: Optional[str] = None):
        self.active = True
        self.buffer = initial or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            self._submit()
            return

        if ch == 27:  # Esc
            self._reset()
            self._set_status("Open canceled", 3)
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
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
            return

    def draw(self, win):
        prompt = "Open: "
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()

    def _submit(self):
        try:
            paths = expand_paths(self.buffer)
        except ValueError as e:
            # unbalanced quotes
            self._set_status(f"Open failed: {e}", 4)
            return

        self._reset()
        result = self.state.select_sources(paths)
        if result.cancelled:
            self._set_status("Open canceled", 3)
        elif result.ok:
            count = len(self.state.sources)
            self._set_status(f"Loaded {count} file{'s' if count != 1 else ''}", 3)

    def _reset(self):
        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
