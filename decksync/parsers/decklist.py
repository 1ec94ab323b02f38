"""
Mainboard/sideboard splitting for pasted deck lists.

Deck lists are free text typed or pasted by users, so there is no reliable
format. Three rules are tried in order, first match wins:

    1. A sideboard marker line, e.g. "Sideboard", "Side board:", "-- SIDEBOARD --".
       The split happens after the marker; the marker is dropped.
    2. A structural blank line: at least one card line above it and at
       least two below. The blank line is dropped.
    3. Otherwise the whole text is mainboard.

Example:
    4 Lightning Bolt
    20 Mountain

    2 Abrade
    1 Fury

    -> main "4 Lightning Bolt\\n20 Mountain", side "2 Abrade\\n1 Fury"
"""

import re
from dataclasses import dataclass

# Line is only the marker, optionally wrapped in dashes, ending in a colon,
# or followed by a card count such as "Sideboard (15)"
SIDEBOARD_MARKER = re.compile(
    r"^[-\s]*side\s?board\b[-\s:]*(\(\d+\)|\d+)?[-\s:]*$", re.IGNORECASE
)

# A trailing blank section needs this many card lines to count as a sideboard
MIN_SIDEBOARD_LINES = 2


@dataclass(frozen=True, slots=True)
class SplitDeckList:
    """Result of splitting a deck list. Both halves are stripped."""

    main_text: str
    side_text: str


def _find_marker(lines: list[str]) -> int | None:
    for i, line in enumerate(lines):
        if SIDEBOARD_MARKER.match(line.strip()):
            return i
    return None


def _find_structural_break(lines: list[str]) -> int | None:
    non_blank = [bool(line.strip()) for line in lines]
    seen_before = 0
    remaining_after = sum(non_blank)

    for i, has_text in enumerate(non_blank):
        if has_text:
            seen_before += 1
            remaining_after -= 1
            continue
        if seen_before >= 1 and remaining_after >= MIN_SIDEBOARD_LINES:
            return i
    return None


def split_main_side(text: str | None) -> SplitDeckList:
    """
    Split deck list text into mainboard and sideboard.

    Args:
        text: Deck list text, possibly empty

    Returns:
        SplitDeckList with stripped halves. Inner line breaks are kept.
    """
    if not text:
        return SplitDeckList(main_text="", side_text="")

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")

    split_at = _find_marker(lines)
    if split_at is None:
        split_at = _find_structural_break(lines)
    if split_at is None:
        return SplitDeckList(main_text=normalized.strip(), side_text="")

    return SplitDeckList(
        main_text="\n".join(lines[:split_at]).strip(),
        side_text="\n".join(lines[split_at + 1 :]).strip(),
    )
