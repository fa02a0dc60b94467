import curses


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_HEADER = 2
    PAIR_GUTTER = 3
    MAX_COL_WIDTH = 40
    SORT_MARKERS = {False: "▲", True: "▼"}
    EMPTY_TEXT = "No table loaded (press o to open Parquet files)"

    def __init__(self, view, max_col_width=None):
        self.view = view
        if max_col_width:
            self.MAX_COL_WIDTH = max_col_width
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_HEADER, curses.COLOR_CYAN, -1)
            curses.init_pair(self.PAIR_GUTTER, curses.COLOR_YELLOW, -1)
        except curses.error:
            pass

        self.curr_row = 0
        self.curr_col = 0
        self.row_offset = 0
        self.col_offset = 0

        self.rendered_col_widths = {}
        self._width_cache_key = None
        self._width_cache = []

    def set_view(self, view):
        self.view = view
        self.clamp_cursor()

    def clamp_cursor(self):
        self.curr_row = max(0, min(self.curr_row, self.view.row_count - 1))
        self.curr_col = max(0, min(self.curr_col, len(self.view.columns) - 1))

    def header_text(self, col_idx):
        name = str(self.view.columns[col_idx])
        spec = self.view.sort_spec
        if spec is not None and spec.column_index == col_idx:
            return f"{name} {self.SORT_MARKERS[spec.descending]}"
        return name

    def _header_width(self, col_idx):
        return min(self.MAX_COL_WIDTH, len(self.header_text(col_idx)) + 2)

    def page_col_widths(self, page_start, page_end):
        """Column widths measured on the rows of one page only."""
        key = (self.view.revision, page_start, page_end, self.MAX_COL_WIDTH)
        if key == self._width_cache_key:
            return self._width_cache
        widths = []
        for c in range(len(self.view.columns)):
            max_len = len(self.header_text(c))
            for text in self.view.column_texts(c, page_start, page_end):
                max_len = max(max_len, len(text))
            widths.append(min(self.MAX_COL_WIDTH, max_len + 2))
        self._width_cache_key = key
        self._width_cache = widths
        return widths

    def adjust_col_viewport(self, win=None):
        """Force column viewport adjustment so curr_col is visible.
        Call this after big cursor jumps (especially to last/first column)."""
        ncols = len(self.view.columns)
        if ncols == 0:
            self.col_offset = 0
            return

        if win is not None:
            h, w = win.getmaxyx()
        else:
            h, w = 24, 120

        row_w = max(3, len(str(self.view.row_count)) + 1)
        avail_w = max(20, w - (row_w + 1))

        # header widths only; avoids formatting every cell on a jump
        header_widths = [self._header_width(c) for c in range(ncols)]

        visible_count = 0
        used = 0
        for cw in header_widths[self.col_offset :]:
            if used + cw + 1 > avail_w:
                break
            used += cw + 1
            visible_count += 1
        visible_count = max(1, visible_count)

        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        elif self.curr_col >= self.col_offset + visible_count:
            self.col_offset = self.curr_col - visible_count + 1

        self.col_offset = max(0, self.col_offset)
        max_possible_offset = max(0, ncols - visible_count)
        self.col_offset = min(self.col_offset, max_possible_offset)

    # ---------- navigation ----------
    def move_left(self):
        self.curr_col = max(0, self.curr_col - 1)

    def move_right(self):
        self.curr_col = min(len(self.view.columns) - 1, self.curr_col + 1)
        self.curr_col = max(0, self.curr_col)

    def move_down(self):
        self.curr_row = max(0, min(self.view.row_count - 1, self.curr_row + 1))

    def move_up(self):
        self.curr_row = max(0, self.curr_row - 1)

    def first_row(self):
        self.curr_row = 0
        self.row_offset = 0

    def last_row(self):
        self.curr_row = max(0, self.view.row_count - 1)

    def first_col(self):
        self.curr_col = 0
        self.adjust_col_viewport()

    def last_col(self):
        self.curr_col = max(0, len(self.view.columns) - 1)
        self.adjust_col_viewport()

    @staticmethod
    def _pair_attr(pair):
        try:
            return curses.color_pair(pair)
        except curses.error:
            return 0

    # ---------- rendering ----------
    def draw(self, win, page_start=0, page_end=None):
        win.erase()
        try:
            win.bkgd(" ", self._pair_attr(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()

        if not self.view.is_loaded:
            try:
                win.addnstr(0, 1, self.EMPTY_TEXT, max(1, w - 2))
            except curses.error:
                pass
            win.refresh()
            return

        if page_end is None:
            page_end = self.view.row_count
        total_rows = max(0, page_end - page_start)
        ncols = len(self.view.columns)

        widths = self.page_col_widths(page_start, page_end)

        max_label = page_start
        if total_rows:
            max_label = max(
                self.view.row_label(r) for r in range(page_start, page_end)
            )
        row_w = max(3, len(str(max_label)) + 1)
        avail_w = w - (row_w + 1)

        # column viewport
        self.col_offset = max(0, min(self.col_offset, max(0, ncols - 1)))
        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        while True:
            max_cols = 0
            used = 0
            for cw in widths[self.col_offset :]:
                if used + cw + 1 > avail_w:
                    break
                used += cw + 1
                max_cols += 1
            max_cols = max(1, max_cols)
            if self.curr_col < self.col_offset + max_cols:
                break
            self.col_offset += 1

        visible_cols = tuple(
            range(self.col_offset, min(ncols, self.col_offset + max_cols))
        )

        # row viewport (one line per row, header on line 0)
        body_h = max(1, h - 1)
        if total_rows:
            self.curr_row = max(page_start, min(self.curr_row, page_end - 1))
        local_curr = self.curr_row - page_start
        if local_curr < self.row_offset:
            self.row_offset = local_curr
        elif local_curr >= self.row_offset + body_h:
            self.row_offset = local_curr - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, total_rows - 1)))

        header_attr = curses.A_BOLD | self._pair_attr(self.PAIR_HEADER)
        gutter_attr = self._pair_attr(self.PAIR_GUTTER)
        cell_attr = self._pair_attr(self.PAIR_CELL_TEXT)

        # header
        self.rendered_col_widths = {}
        x = row_w + 1
        for c in visible_cols:
            eff_cw = min(widths[c], max(1, w - x - 1))
            self.rendered_col_widths[c] = eff_cw
            name = self.header_text(c)[:eff_cw].rjust(eff_cw)
            attr = header_attr
            if c == self.curr_col:
                attr |= curses.A_UNDERLINE
            try:
                win.addnstr(0, x, name, eff_cw, attr)
            except curses.error:
                pass
            x += eff_cw + 1

        # rows
        first = page_start + self.row_offset
        last = min(page_end, first + body_h)
        for y, r in enumerate(range(first, last), start=1):
            try:
                win.addnstr(
                    y, 0, str(self.view.row_label(r)).rjust(row_w), row_w, gutter_attr
                )
            except curses.error:
                pass
            x = row_w + 1
            for c in visible_cols:
                eff_cw = self.rendered_col_widths[c]
                text = self.view.cell_text(r, c).replace("\n", " ")
                cell = text[:eff_cw].rjust(eff_cw)
                attr = cell_attr
                if r == self.curr_row and c == self.curr_col:
                    attr |= curses.A_REVERSE
                try:
                    win.addnstr(y, x, cell, eff_cw, attr)
                except curses.error:
                    pass
                x += eff_cw + 1

        win.refresh()
