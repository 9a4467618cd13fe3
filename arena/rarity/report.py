"""Rarity report blocks and merging them into a text sink."""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from arena.rarity.rarity import Rarity, format_rarity

WRAP_OPEN = "<color=#00AEEF>"
WRAP_CLOSE = "</color>"
HEADER_TAG = "<b>Rarity:</b>"
NO_UPGRADES = "<i>No applicable upgrades.</i>"

_BLANK_RUNS = re.compile(r"\n{3,}")
_LEADING_INDENT = re.compile(r"\n[ \t]+")


def header_line(rarity: Rarity) -> str:
    return f"{HEADER_TAG} {format_rarity(rarity)}"


def report_lines(rarity: Rarity, notes: Iterable[str]) -> List[str]:
    lines = [header_line(rarity)]
    lines.extend(note for note in notes if note)
    return lines


def strip_wrappers(line: str) -> str:
    line = line.replace("<size=80%>", "").replace("</size>", "").strip()
    while line.startswith(WRAP_OPEN) and line.endswith(WRAP_CLOSE):
        line = line[len(WRAP_OPEN) : -len(WRAP_CLOSE)].strip()
    return line


def build_block(lines: Sequence[str]) -> str:
    """Wrap the cleaned lines exactly once."""

    cleaned = [strip_wrappers(line) for line in lines]
    inner = "\n".join(line for line in cleaned if line)
    return f"{WRAP_OPEN}{inner}{WRAP_CLOSE}"


def remove_last_block(text: str) -> str:
    """Drop the most recent rarity block and everything after it."""

    if not text:
        return text
    lowered = text.lower()
    header_index = lowered.rfind(HEADER_TAG.lower())
    if header_index < 0:
        wrap_index = lowered.rfind(WRAP_OPEN.lower())
        return text[:wrap_index].rstrip() if wrap_index >= 0 else text
    wrap_index = lowered.rfind(WRAP_OPEN.lower(), 0, header_index + 1)
    start = wrap_index if wrap_index >= 0 else header_index
    return text[:start].rstrip()


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r", "")
    text = _BLANK_RUNS.sub("\n\n", text)
    text = _LEADING_INDENT.sub("\n", text)
    return text.rstrip()


def dedupe_wrappers(text: str) -> str:
    # Closing tags are shared with the rarity colour, so only opens collapse.
    while WRAP_OPEN + WRAP_OPEN in text:
        text = text.replace(WRAP_OPEN + WRAP_OPEN, WRAP_OPEN)
    return text


def merge_into_sink(current: str, block: str) -> str:
    """Replace the sink's last rarity block with ``block``."""

    remainder = remove_last_block(current or "")
    if not remainder.strip():
        merged = block
    else:
        merged = remainder.rstrip() + "\n" + block
    return dedupe_wrappers(normalize_whitespace(merged))


__all__ = [
    "HEADER_TAG",
    "NO_UPGRADES",
    "WRAP_CLOSE",
    "WRAP_OPEN",
    "build_block",
    "header_line",
    "merge_into_sink",
    "remove_last_block",
    "report_lines",
]
