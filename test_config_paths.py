import json
import tempfile
from pathlib import Path

import pytest

import config_paths


@pytest.fixture
def cfg_dir():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "tablr"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        # point module paths to temp
        orig_dir = config_paths.CONFIG_DIR
        orig_json = config_paths.CONFIG_JSON
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_dir / "config.json")
            yield cfg_dir
        finally:
            config_paths.CONFIG_DIR = orig_dir
            config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json(cfg_dir):
    cfg = config_paths.load_config()

    assert cfg == {
        "PAGE_SIZE": 1000,
        "MAX_COL_WIDTH": 40,
        "LOG_FORMAT": "json",
        "LOG_LEVEL": "INFO",
    }


def test_load_config_reads_json_overrides(cfg_dir):
    (cfg_dir / "config.json").write_text(
        json.dumps(
            {
                "page_size": 250,
                "max_col_width": 24,
                "log_format": "Plain",
                "log_level": "debug",
            }
        )
    )

    cfg = config_paths.load_config()

    assert cfg["PAGE_SIZE"] == 250
    assert cfg["MAX_COL_WIDTH"] == 24
    assert cfg["LOG_FORMAT"] == "plain"
    assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_invalid_values(cfg_dir):
    (cfg_dir / "config.json").write_text(
        json.dumps(
            {
                "page_size": 0,
                "max_col_width": True,
                "log_format": "xml",
                "log_level": "chatty",
            }
        )
    )

    cfg = config_paths.load_config()

    assert cfg["PAGE_SIZE"] == 1000
    assert cfg["MAX_COL_WIDTH"] == 40
    assert cfg["LOG_FORMAT"] == "json"
    assert cfg["LOG_LEVEL"] == "INFO"


def test_load_config_survives_broken_json(cfg_dir):
    (cfg_dir / "config.json").write_text("{not json")

    cfg = config_paths.load_config()

    assert cfg["PAGE_SIZE"] == 1000


def test_ensure_config_dirs_creates_directory(cfg_dir):
    target = cfg_dir / "nested"
    config_paths.CONFIG_DIR = str(target)

    config_paths.ensure_config_dirs()

    assert target.is_dir()
