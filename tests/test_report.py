from arena.rarity.rarity import Rarity
from arena.rarity.report import (
    HEADER_TAG,
    WRAP_CLOSE,
    WRAP_OPEN,
    build_block,
    header_line,
    merge_into_sink,
    normalize_whitespace,
    remove_last_block,
    report_lines,
)


def _block(rarity, *notes):
    return build_block(report_lines(rarity, notes))


def test_header_line_colours_rarity():
    line = header_line(Rarity.RARE)
    assert line.startswith(HEADER_TAG)
    assert "Rare</color>" in line


def test_report_lines_skip_empty_notes():
    assert report_lines(Rarity.COMMON, ["+3 Damage (Tier II)", ""]) == [
        header_line(Rarity.COMMON),
        "+3 Damage (Tier II)",
    ]


def test_build_block_wraps_exactly_once():
    block = build_block([WRAP_OPEN + WRAP_OPEN + "x" + WRAP_CLOSE + WRAP_CLOSE, "y"])
    assert block == f"{WRAP_OPEN}x\ny{WRAP_CLOSE}"


def test_build_block_keeps_rarity_colour_close_tag():
    block = _block(Rarity.COMMON)
    assert block.endswith("Common</color>" + WRAP_CLOSE)


def test_merge_into_empty_sink_is_just_the_block():
    block = _block(Rarity.RARE, "+5 Armor (Tier I)")
    assert merge_into_sink("", block) == block


def test_merge_replaces_previous_block_and_keeps_prefix():
    first = merge_into_sink("Sharp edge.", _block(Rarity.COMMON, "+1 Damage (Tier V)"))
    second_block = _block(Rarity.LEGENDARY, "+9 Damage (Tier I)")
    merged = merge_into_sink(first, second_block)
    assert merged == "Sharp edge.\n" + second_block
    assert merged.count(HEADER_TAG) == 1


def test_remove_last_block_is_case_insensitive():
    text = "Intro\n<COLOR=#00aeef><B>RARITY:</B> Rare\n+1 Armor</COLOR>"
    assert remove_last_block(text) == "Intro"


def test_remove_last_block_leaves_plain_text_alone():
    assert remove_last_block("Just flavour text.") == "Just flavour text."


def test_normalize_whitespace_collapses_blank_runs():
    assert normalize_whitespace("a\r\n\n\n\n  b  \n") == "a\n\nb"


def test_merge_collapses_doubled_wrapper_opens():
    merged = merge_into_sink("Intro " + WRAP_OPEN, _block(Rarity.RARE))
    assert WRAP_OPEN + WRAP_OPEN not in merged
