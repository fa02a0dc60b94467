import unittest
from unittest import mock

import pandas as pd

import orchestrator
from table_state import TableState


class FakeWin:
    def __init__(self, h=24, w=100, keys=()):
        self._h = h
        self._w = w
        self.keys = list(keys)
        self.lines = {}

    def getmaxyx(self):
        return self._h, self._w

    def getch(self):
        return self.keys.pop(0) if self.keys else 24  # Ctrl+X ends the loop

    def addnstr(self, y, x, text, n, attr=0):
        self.lines[y] = self.lines.get(y, "") + text[:n]

    def erase(self):
        self.lines = {}

    clear = erase

    def bkgd(self, *_):
        pass

    def move(self, *_):
        pass

    def refresh(self):
        pass

    def leaveok(self, *_):
        pass

    def nodelay(self, *_):
        pass

    def timeout(self, *_):
        pass


class FakeLayout:
    def __init__(self, stdscr):
        self.H, self.W = stdscr.getmaxyx()
        self.table_win = FakeWin(self.H - 2, self.W)
        self.status_win = FakeWin(1, self.W)
        self.prompt_win = FakeWin(1, self.W)


def _frame_reader(df):
    class FrameReader:
        def __init__(self, sources):
            self.sources = sources

        @classmethod
        def is_supported(cls, path):
            return path.endswith(".parquet")

        def read(self):
            return df.copy()

    return FrameReader


class OrchestratorTests(unittest.TestCase):
    def setUp(self):
        patches = [
            mock.patch.object(orchestrator, "ScreenLayout", FakeLayout),
            mock.patch.object(orchestrator.curses, "curs_set", lambda *_: None),
            mock.patch.object(orchestrator.curses, "raw", lambda: None),
        ]
        for patch in patches:
            patch.start()
            self.addCleanup(patch.stop)

        df = pd.DataFrame({"n": [3, 1, 2], "tag": ["c", "a", "b"]})
        self.state = TableState(reader_cls=_frame_reader(df))
        self.state.load(["nums.parquet"])

    def _run(self, keys, config=None):
        screen = FakeWin(keys=[ord(k) if isinstance(k, str) else k for k in keys])
        orch = orchestrator.Orchestrator(screen, self.state, config=config)
        orch.run()
        return orch

    def _column(self, name):
        return list(self.state.get_view().to_frame()[name])

    def test_s_sorts_and_repeats_toggle(self):
        self._run(["s"])
        self.assertEqual(self._column("n"), [1, 2, 3])

        self._run(["s"])
        self.assertEqual(self._column("n"), [3, 2, 1])

        self._run(["s", "s"])
        self.assertEqual(self._column("n"), [3, 2, 1])

    def test_enter_sorts_current_column(self):
        self._run(["l", 10])

        self.assertEqual(self.state.sort_spec.column_index, 1)
        self.assertEqual(self._column("tag"), ["a", "b", "c"])

    def test_filter_prompt_then_clear(self):
        self._run(["l", "/", "b", 10])
        self.assertEqual(self._column("tag"), ["b"])

        orch = self._run(["c"])
        self.assertIsNone(self.state.filter_spec)
        self.assertEqual(orch.status_msg, "Filter cleared")
        self.assertEqual(len(self._column("tag")), 3)

    def test_clear_without_filter_reports_status(self):
        orch = self._run(["c"])

        self.assertEqual(orch.status_msg, "No filter active")

    def test_help_overlay_swallows_keys_until_closed(self):
        with mock.patch.object(
            orchestrator.curses, "newwin", lambda *_: FakeWin(24, 100)
        ):
            orch = self._run(["?", "s"])
            self.assertTrue(orch.overlay.visible)
            self.assertIsNone(self.state.sort_spec)

            orch = self._run(["?", "q", "s"])

        self.assertFalse(orch.overlay.visible)
        self.assertEqual(self.state.sort_spec.column_index, 0)

    def test_q_quits_before_remaining_keys(self):
        self._run(["q", "s"])

        self.assertIsNone(self.state.sort_spec)

    def test_pending_paths_loaded_on_start(self):
        screen = FakeWin(keys=[])
        orch = orchestrator.Orchestrator(
            screen, self.state, pending_paths=["other.csv"]
        )
        orch.run()

        self.assertIn("other.csv", self.state.error)
        self.assertIn("other.csv", orch.layout.status_win.lines[0])

    def test_paging_moves_cursor_to_page_start(self):
        orch = self._run(["n"], config={"PAGE_SIZE": 2})

        self.assertEqual(orch.paginator.page_index, 1)
        self.assertEqual(orch.grid.curr_row, 2)

    def test_G_jumps_to_last_row_page(self):
        orch = self._run(["G"], config={"PAGE_SIZE": 2})

        self.assertEqual(orch.grid.curr_row, 2)
        self.assertEqual(orch.paginator.page_index, 1)


if __name__ == "__main__":
    unittest.main()
