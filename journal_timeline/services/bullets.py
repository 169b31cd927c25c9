from __future__ import annotations

import re

BULLET_MARKERS = "-•*"

_SUB_ITEM_RE = re.compile(rf"^\s+[{re.escape(BULLET_MARKERS)}]")
_LEADING_MARKER_RE = re.compile(rf"^[{re.escape(BULLET_MARKERS)}]\s*")


def is_sub_item(line: str) -> bool:
    return bool(_SUB_ITEM_RE.match(line))


def normalize_lines(text: str | None) -> list[str]:
    """
    Split a section into top-level bullet lines.

    Blank lines and indented sub-bullets are dropped; the leading bullet
    marker and surrounding whitespace are stripped from what remains.
    """
    if not text:
        return []

    out: list[str] = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        if is_sub_item(line):
            continue
        cleaned = _LEADING_MARKER_RE.sub("", line.strip(), count=1).strip()
        if cleaned:
            out.append(cleaned)
    return out
