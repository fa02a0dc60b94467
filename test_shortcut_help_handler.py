from shortcut_help_handler import ShortcutHelpHandler


def test_help_lists_every_section_and_key():
    lines = ShortcutHelpHandler.get_lines()

    for title, rows in ShortcutHelpHandler.SECTIONS:
        assert title in lines
        for keys, desc in rows:
            assert any(keys in line and desc in line for line in lines)


def test_help_descriptions_align():
    rows = [line for line in ShortcutHelpHandler.get_lines() if line.startswith("  ")]

    starts = {line.index(desc) for line, (_, desc) in zip(
        rows, (r for _, section in ShortcutHelpHandler.SECTIONS for r in section)
    )}
    assert len(starts) == 1
