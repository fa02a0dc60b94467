import json
import logging

import pytest

from logging_config import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_format_writes_one_object_per_line(tmp_path, restore_root_logger):
    log_path = tmp_path / "tablr.log"

    configure_logging(level=logging.INFO, log_format="json", log_path=str(log_path))
    logging.getLogger("table_state").info("Loaded %d rows", 5)
    logging.getLogger().handlers[0].flush()

    record = json.loads(log_path.read_text().strip().splitlines()[-1])
    assert record["message"] == "Loaded 5 rows"
    assert record["levelname"] == "INFO"
    assert record["name"] == "table_state"


def test_plain_format(tmp_path, restore_root_logger):
    log_path = tmp_path / "tablr.log"

    configure_logging(level="WARNING", log_format="plain", log_path=str(log_path))
    logging.getLogger("x").info("hidden")
    logging.getLogger("x").warning("shown")
    logging.getLogger().handlers[0].flush()

    text = log_path.read_text()
    assert "hidden" not in text
    assert "[WARNING] x: shown" in text


def test_reconfigure_replaces_handlers(tmp_path, restore_root_logger):
    configure_logging(log_path=str(tmp_path / "a.log"))
    configure_logging(log_path=str(tmp_path / "b.log"))

    assert len(logging.getLogger().handlers) == 1
