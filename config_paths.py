import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tablr")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "tablr.log")

# default settings
PAGE_SIZE_DEFAULT = 1000
MAX_COL_WIDTH_DEFAULT = 40
LOG_FORMAT_DEFAULT = "json"
LOG_LEVEL_DEFAULT = "INFO"

LOG_FORMATS = {"json", "plain"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _positive_int(value, minimum=1):
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= minimum else None


def load_config():
    cfg = {
        "PAGE_SIZE": PAGE_SIZE_DEFAULT,
        "MAX_COL_WIDTH": MAX_COL_WIDTH_DEFAULT,
        "LOG_FORMAT": LOG_FORMAT_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return cfg

    if not isinstance(data, dict):
        return cfg

    page_size = _positive_int(data.get("page_size"))
    if page_size is not None:
        cfg["PAGE_SIZE"] = page_size

    max_col_width = _positive_int(data.get("max_col_width"), minimum=4)
    if max_col_width is not None:
        cfg["MAX_COL_WIDTH"] = max_col_width

    log_format = data.get("log_format")
    if isinstance(log_format, str) and log_format.lower() in LOG_FORMATS:
        cfg["LOG_FORMAT"] = log_format.lower()

    log_level = data.get("log_level")
    if isinstance(log_level, str) and isinstance(
        logging.getLevelName(log_level.upper()), int
    ):
        cfg["LOG_LEVEL"] = log_level.upper()

    return cfg
