import curses
import logging
import time

from filter_prompt import FilterPrompt
from grid_pane import GridPane
from open_prompt import OpenPrompt
from overlay import OverlayView
from pagination import Paginator
from screen_layout import ScreenLayout
from shortcut_help_handler import ShortcutHelpHandler
from status_bar import render_status

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, table_state, pending_paths=None, config=None):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        config = config or {}

        self.state = table_state
        self.pending_paths = list(pending_paths or [])
        self.layout = ScreenLayout(stdscr)

        self.view = self.state.get_view()
        self.grid = GridPane(self.view, max_col_width=config.get("MAX_COL_WIDTH"))
        self.paginator = Paginator(
            total_rows=self.view.row_count, page_size=config.get("PAGE_SIZE", 1000)
        )
        self._synced_revision = self.view.revision

        self.overlay = OverlayView(self.layout)
        self.filter_prompt = FilterPrompt(self.state, self._set_status)
        self.open_prompt = OpenPrompt(self.state, self._set_status)

        self.exit_requested = False

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def process_pending_files(self):
        if not self.pending_paths:
            return
        paths, self.pending_paths = self.pending_paths, []
        self.state.select_sources(paths)

    def sync_view(self):
        """Pull the current view from the table state once per cycle."""
        self.view = self.state.get_view()
        if self.view.revision == self._synced_revision:
            return
        self._synced_revision = self.view.revision
        self.grid.set_view(self.view)
        self.paginator.update_total_rows(self.view.row_count)
        self.paginator.ensure_row_visible(self.grid.curr_row)

    # ---------------- UI ----------------

    def redraw(self):
        self.sync_view()

        try:
            prompt_open = self.filter_prompt.active or self.open_prompt.active
            curses.curs_set(1 if prompt_open and not self.overlay.visible else 0)
        except curses.error:
            pass

        if self.overlay.visible:
            self.overlay.draw()
            return

        self.grid.draw(
            self.layout.table_win,
            page_start=self.paginator.page_start,
            page_end=self.paginator.page_end,
        )

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        text = render_status(
            {
                "view": self.view,
                "status_msg": self.status_msg,
                "status_until": self.status_msg_until,
                "page_index": self.paginator.page_index,
                "page_total": self.paginator.page_count,
                "page_start": self.paginator.page_start,
                "page_end": self.paginator.page_end,
            },
            w,
        )
        attr = curses.A_REVERSE
        if self.view.error:
            attr |= curses.A_BOLD
        try:
            sw.addnstr(0, 0, text, max(1, w - 1), attr)
        except curses.error:
            pass
        sw.refresh()

        pw = self.layout.prompt_win
        pw.erase()
        if self.filter_prompt.active:
            self.filter_prompt.draw(pw)
        elif self.open_prompt.active:
            self.open_prompt.draw(pw)
        else:
            pw.refresh()

    # ---------------- table actions ----------------

    def _sort_current_column(self):
        if not self.view.is_loaded:
            self._set_status("No table loaded", 3)
            return
        result = self.state.sort_by(self.grid.curr_col)
        if result.ok:
            self.grid.first_row()
            self.paginator.reset(self.state.get_view().row_count)

    def _clear_filter(self):
        if self.state.filter_spec is None:
            self._set_status("No filter active", 2)
            return
        result = self.state.clear_filter()
        if result.ok:
            self._set_status("Filter cleared", 3)

    def _move_to_row(self, row):
        self.grid.curr_row = row
        self.grid.clamp_cursor()
        self.paginator.ensure_row_visible(self.grid.curr_row)

    def _change_page(self, forward):
        moved = self.paginator.next_page() if forward else self.paginator.prev_page()
        if moved:
            self.grid.curr_row = self.paginator.page_start
            self.grid.row_offset = 0

    def handle_table_key(self, ch):
        if ch == ord("q"):
            self.exit_requested = True
        elif ch == ord("?"):
            self.overlay.open_help(ShortcutHelpHandler.get_lines())
        elif ch == ord("o"):
            self.open_prompt.start()
        elif ch == ord("/"):
            self.filter_prompt.start(self.grid.curr_col)
        elif ch == ord("c"):
            self._clear_filter()
        elif ch in (ord("s"), 10, 13, curses.KEY_ENTER):
            self._sort_current_column()
        elif ch in (ord("h"), curses.KEY_LEFT):
            self.grid.move_left()
        elif ch in (ord("l"), curses.KEY_RIGHT):
            self.grid.move_right()
        elif ch in (ord("j"), curses.KEY_DOWN):
            self._move_to_row(self.grid.curr_row + 1)
        elif ch in (ord("k"), curses.KEY_UP):
            self._move_to_row(self.grid.curr_row - 1)
        elif ch == ord("g"):
            self._move_to_row(0)
        elif ch == ord("G"):
            self._move_to_row(self.view.row_count - 1)
        elif ch == ord("0"):
            self.grid.first_col()
        elif ch == ord("$"):
            self.grid.last_col()
        elif ch in (ord("n"), curses.KEY_NPAGE):
            self._change_page(True)
        elif ch in (ord("p"), curses.KEY_PPAGE):
            self._change_page(False)

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.process_pending_files()
        self.redraw()

        while True:
            ch = self.stdscr.getch()

            if ch in (3, 24):  # Ctrl+C / Ctrl+X
                break

            if ch == curses.KEY_RESIZE:
                self.layout = ScreenLayout(self.stdscr)
                self.overlay.layout = self.layout
                self.overlay.close()
            elif ch == -1:
                pass
            elif self.overlay.visible:
                self.overlay.handle_key(ch)
            elif self.filter_prompt.active:
                self.filter_prompt.handle_key(ch)
            elif self.open_prompt.active:
                self.open_prompt.handle_key(ch)
            else:
                self.handle_table_key(ch)

            if self.exit_requested:
                break

            self.redraw()

        logger.info("Viewer closed")
