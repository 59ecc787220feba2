"""
Text-run scanning.

Finds maximal runs of tab characters in a piece of text, such as the body
of a doc comment. Offsets count characters, not bytes, so a run's
position does not depend on how the text is encoded; callers that need
byte offsets convert with ``char_spans_to_byte_spans``.
"""

from __future__ import annotations

from itertools import islice
from typing import Sequence

from idiomlint.utils.errors import ScanLimitError

TAB = "\t"

# Offsets are unsigned 32-bit values
MAX_OFFSET = 2**32 - 1


def get_chunks_of_tabs(text: str) -> list[tuple[int, int]]:
    """
    Scan ``text`` for groups of tabs.

    Returns the start (inclusive) and end (exclusive) character offset of
    every maximal run of tabs, in increasing order. For example
    ``"sd\\tasd\\t\\taa"`` gives ``[(2, 3), (6, 8)]``::

        012 3456 7 89
          ^-^  ^---^

    Raises:
        ScanLimitError: If ``text`` is longer than ``MAX_OFFSET`` characters
    """
    if len(text) > MAX_OFFSET:
        raise ScanLimitError(len(text), MAX_OFFSET)

    if text == TAB:
        return [(0, 1)]

    spans: list[tuple[int, int]] = []
    current_start = 0
    # True while a group of tabs has been opened but not yet closed
    is_active = False

    for index, (left, right) in enumerate(zip(text, islice(text, 1, None))):
        if left == TAB and right == TAB:
            # Either the text starts with two tabs or the group is already open
            is_active = True
        elif right == TAB:
            is_active = True
            current_start = index + 1
        elif left == TAB:
            is_active = False
            spans.append((current_start, index + 1))

    # The last group reaches the end of the text
    if is_active:
        spans.append((current_start, len(text)))

    return spans


def char_spans_to_byte_spans(
    text: str, spans: Sequence[tuple[int, int]]
) -> list[tuple[int, int]]:
    """
    Convert ordered character spans of ``text`` into UTF-8 byte spans.

    The text is encoded once, piecewise, while walking the spans.
    """
    result: list[tuple[int, int]] = []
    char_pos = 0
    byte_pos = 0
    for lo, hi in spans:
        byte_pos += len(text[char_pos:lo].encode("utf-8"))
        byte_lo = byte_pos
        byte_pos += len(text[lo:hi].encode("utf-8"))
        char_pos = hi
        result.append((byte_lo, byte_pos))
    return result


__all__ = [
    "MAX_OFFSET",
    "get_chunks_of_tabs",
    "char_spans_to_byte_spans",
]
