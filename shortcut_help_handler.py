class ShortcutHelpHandler:
    SECTIONS = [
        (
            "Navigation",
            [
                ("h j k l / arrows", "move the cursor"),
                ("g / G", "first / last row"),
                ("0 / $", "first / last column"),
                ("n / p, PgDn / PgUp", "next / previous page"),
            ],
        ),
        (
            "Table",
            [
                ("s / Enter", "sort by the cursor column (repeat to flip direction)"),
                ("/", "filter; Tab switches Equals/Contains, Ctrl+N/Ctrl+P change column"),
                ("c", "clear the filter (sort is kept)"),
                ("o", "open Parquet files (space separated, globs allowed)"),
            ],
        ),
        (
            "General",
            [
                ("?", "toggle this help"),
                ("q, Ctrl+C, Ctrl+X", "quit"),
            ],
        ),
    ]

    @classmethod
    def get_lines(cls):
        width = max(len(keys) for _, rows in cls.SECTIONS for keys, _ in rows)
        lines = ["tablr - keyboard shortcuts", ""]
        for title, rows in cls.SECTIONS:
            lines.append(title)
            for keys, desc in rows:
                lines.append(f"  {keys.ljust(width)}  {desc}")
            lines.append("")
        lines.append("Press ? / q / Esc to close")
        return lines
