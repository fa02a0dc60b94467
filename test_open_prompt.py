import os

import pandas as pd
import pytest

from open_prompt import OpenPrompt, expand_paths
from table_state import TableState


def _write(path, df):
    df.to_parquet(path, index=False)
    return str(path)


def _prompt(state):
    messages = []
    prompt = OpenPrompt(state, lambda m, _: messages.append(m))
    return prompt, messages


def _type_and_enter(prompt, text):
    for ch in text:
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)


def test_expand_paths_globs_sorted(tmp_path):
    for name in ("b.parquet", "a.parquet", "c.csv"):
        (tmp_path / name).write_bytes(b"")

    paths = expand_paths(f"{tmp_path}/*.parquet")

    assert paths == [str(tmp_path / "a.parquet"), str(tmp_path / "b.parquet")]


def test_expand_paths_keeps_unmatched_pattern(tmp_path):
    pattern = f"{tmp_path}/*.parquet"

    assert expand_paths(pattern) == [pattern]


def test_expand_paths_quotes_and_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    paths = expand_paths("'my data.parquet' ~/other.parquet")

    assert paths == ["my data.parquet", os.path.join(str(tmp_path), "other.parquet")]


def test_expand_paths_rejects_unbalanced_quotes():
    with pytest.raises(ValueError):
        expand_paths("'broken.parquet")


def test_submit_loads_files(tmp_path):
    _write(tmp_path / "1.parquet", pd.DataFrame({"a": [1]}))
    _write(tmp_path / "2.parquet", pd.DataFrame({"a": [2]}))
    state = TableState()
    prompt, messages = _prompt(state)

    prompt.start()
    _type_and_enter(prompt, f"{tmp_path}/*.parquet")

    assert not prompt.active
    assert state.get_view().row_count == 2
    assert messages[-1] == "Loaded 2 files"


def test_empty_submit_is_a_cancel(tmp_path):
    path = _write(tmp_path / "1.parquet", pd.DataFrame({"a": [1]}))
    state = TableState()
    state.load([path])
    prompt, messages = _prompt(state)

    prompt.start()
    prompt.handle_key(10)

    assert messages[-1] == "Open canceled"
    assert state.sources == (path,)
    assert state.error is None


def test_escape_cancels_without_loading():
    state = TableState()
    prompt, messages = _prompt(state)

    prompt.start("x.parquet")
    prompt.handle_key(27)

    assert not prompt.active
    assert not state.is_loaded
    assert messages[-1] == "Open canceled"


def test_non_parquet_selection_sets_error(tmp_path):
    (tmp_path / "data.csv").write_text("a\n1\n")
    state = TableState()
    prompt, _ = _prompt(state)

    prompt.start()
    _type_and_enter(prompt, str(tmp_path / "data.csv"))

    assert not state.is_loaded
    assert "data.csv" in state.error


def test_unbalanced_quotes_keep_prompt_open():
    state = TableState()
    prompt, messages = _prompt(state)

    prompt.start()
    _type_and_enter(prompt, "'oops")

    assert prompt.active
    assert messages[-1].startswith("Open failed:")
