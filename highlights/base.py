"""highlights/base.py — Shared scanning utilities for table-literal dumps."""

import re
from enum import Enum
from typing import Iterator

# "[12] = {" with exactly one space around "=", as KOReader writes it.
ENTRY_OPENER = re.compile(r"\[\d+\] = \{", re.ASCII)
ENTRY_CLOSER = "},"
INTEGER = re.compile(r"\s*-?\d+\s*", re.ASCII)


class ScanState(Enum):
    OUTSIDE_ENTRY = "outside_entry"
    INSIDE_ENTRY = "inside_entry"


def iter_entry_blocks(text: str) -> Iterator[str]:
    """
    Yield the body of every numbered entry block, in document order.

    A block runs from its opener to the FIRST "}," that follows it. Braces are
    not balanced, so a nested table or a value containing "}," ends the block
    early, and any opener inside a consumed block is never reported on its own.
    An opener with no closer after it ends the scan.
    """
    state = ScanState.OUTSIDE_ENTRY
    pos = 0
    body_start = 0

    while True:
        if state is ScanState.OUTSIDE_ENTRY:
            m = ENTRY_OPENER.search(text, pos)
            if not m:
                return
            body_start = m.end()
            state = ScanState.INSIDE_ENTRY
        else:
            end = text.find(ENTRY_CLOSER, body_start)
            if end == -1:
                return
            yield text[body_start:end]
            pos = end + len(ENTRY_CLOSER)
            state = ScanState.OUTSIDE_ENTRY


def parse_int(value: str | None) -> int | None:
    """int(value), or None when value is missing or not a plain ASCII integer."""
    if value is None or not INTEGER.fullmatch(value):
        return None
    return int(value)
