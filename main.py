import curses
import os
import sys

import config_paths
from logging_config import configure_logging
from orchestrator import Orchestrator
from table_state import TableState

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

try:
    from _version import __version__
except ImportError:
    __version__ = "0.0.0"


USAGE = (
    "tablr - terminal Parquet viewer\n\n"
    "Usage:\n"
    "  tablr [path ...]\n"
    "  tablr -v\n"
    "  tablr -h\n"
)


def parse_args(args):
    """Return (command, paths); command is "help", "version", "run" or "error"."""
    if "-h" in args or "--help" in args:
        return "help", []
    if "-v" in args or "-V" in args or "--version" in args:
        return "version", []

    paths = []
    only_paths = False
    for arg in args:
        if arg == "--" and not only_paths:
            only_paths = True
            continue
        if arg.startswith("-") and not only_paths:
            return "error", [arg]
        paths.append(arg)
    return "run", paths


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    command, paths = parse_args(args)

    if command == "help":
        print(USAGE)
        return 0

    if command == "version":
        print(__version__)
        return 0

    if command == "error":
        print(f"Unknown option: {paths[0]}\n\n{USAGE}", file=sys.stderr)
        return 2

    cfg = config_paths.load_config()
    configure_logging(level=cfg["LOG_LEVEL"], log_format=cfg["LOG_FORMAT"])

    state = TableState()

    def curses_main(stdscr):
        Orchestrator(stdscr, state, pending_paths=paths, config=cfg).run()

    curses.wrapper(curses_main)

    if state.error:
        print(state.error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
