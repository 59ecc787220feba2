"""
Error types and source location tracking for idiomlint.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class ExpansionContext:
    """
    Identifies where a piece of text came from.

    The root context (id 0) marks text written by the author. Any other
    context marks text produced by expanding a macro or template.

    Attributes:
        id: Unique context id assigned by the front-end
        macro_name: Name of the macro that produced the text, if any
        external: True when the macro is defined outside the linted crate
    """

    id: int = 0
    macro_name: Optional[str] = None
    external: bool = False

    @property
    def is_root(self) -> bool:
        return self.id == 0


ROOT_CONTEXT = ExpansionContext()


@dataclass(frozen=True, slots=True)
class Span:
    """
    A half-open byte range ``[lo, hi)`` into the original source text.

    Attributes:
        lo: Start byte offset (inclusive)
        hi: End byte offset (exclusive)
        ctxt: Expansion context the text belongs to
    """

    lo: int
    hi: int
    ctxt: ExpansionContext = ROOT_CONTEXT

    def __post_init__(self) -> None:
        if self.lo < 0 or self.hi < self.lo:
            raise ValueError(f"invalid span [{self.lo}, {self.hi})")

    @property
    def from_expansion(self) -> bool:
        """Check if this span was produced by a macro expansion."""
        return not self.ctxt.is_root

    def __len__(self) -> int:
        return self.hi - self.lo

    def with_lo(self, lo: int) -> "Span":
        return Span(lo, self.hi, self.ctxt)

    def with_hi(self, hi: int) -> "Span":
        return Span(self.lo, hi, self.ctxt)

    def shrink_to_lo(self) -> "Span":
        """An empty span at the start of this one (an insertion point)."""
        return Span(self.lo, self.lo, self.ctxt)

    def contains(self, other: "Span") -> bool:
        return self.lo <= other.lo and other.hi <= self.hi

    def __str__(self) -> str:
        return f"{self.lo}..{self.hi}"


DUMMY_SPAN = Span(0, 0)


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number (in characters)
        offset: 0-indexed byte offset from start of source
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass
class SourceFile:
    """
    Source text addressed by byte offsets.

    Spans carry byte offsets, so snippets are cut from the UTF-8 encoding
    of the text and decoded back.
    """

    text: str
    filename: str = "<input>"
    _data: bytes = field(init=False, repr=False)
    _line_starts: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._data = self.text.encode("utf-8")
        self._line_starts = [0]
        for index, byte in enumerate(self._data):
            if byte == 0x0A:
                self._line_starts.append(index + 1)

    @property
    def byte_length(self) -> int:
        return len(self._data)

    def snippet(self, span: Span) -> Optional[str]:
        """Return the text covered by ``span``, or None if it is out of range."""
        if span.hi > len(self._data):
            return None
        try:
            return self._data[span.lo:span.hi].decode("utf-8")
        except UnicodeDecodeError:
            return None

    def lookup(self, offset: int) -> SourceLocation:
        """Translate a byte offset into a 1-indexed line/column location."""
        offset = max(0, min(offset, len(self._data)))
        line_index = bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[line_index]
        prefix = self._data[line_start:offset].decode("utf-8", errors="replace")
        return SourceLocation(
            line=line_index + 1,
            column=len(prefix) + 1,
            offset=offset,
            filename=self.filename,
        )

    def line_text(self, line: int) -> str:
        """Get the text of a 1-indexed line without its newline."""
        if not 1 <= line <= len(self._line_starts):
            return ""
        start = self._line_starts[line - 1]
        end = self._line_starts[line] - 1 if line < len(self._line_starts) else len(self._data)
        return self._data[start:end].decode("utf-8", errors="replace").rstrip("\r")

    def line_start(self, offset: int) -> int:
        """Byte offset where the line holding ``offset`` starts."""
        offset = max(0, min(offset, len(self._data)))
        return self._line_starts[bisect_right(self._line_starts, offset) - 1]

    def line_end(self, offset: int) -> int:
        """Byte offset of the newline ending the line holding ``offset`` (or EOF)."""
        offset = max(0, min(offset, len(self._data)))
        line_index = bisect_right(self._line_starts, offset) - 1
        if line_index + 1 < len(self._line_starts):
            return self._line_starts[line_index + 1] - 1
        return len(self._data)

    def line_prefix(self, offset: int) -> str:
        """Text between the start of the line holding ``offset`` and ``offset``."""
        offset = max(0, min(offset, len(self._data)))
        return self._data[self.line_start(offset):offset].decode("utf-8", errors="replace")


class IdiomLintError(Exception):
    """Base exception for all idiomlint errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"[{self.location}] {self.message}"
        return self.message


class ScanLimitError(IdiomLintError):
    """
    Raised when a text is too long for the scanner's offset range.

    Offsets are bounded-width integers; a longer text is an operating
    limit violation, never silently truncated.
    """

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"text of {length} characters exceeds the {limit} character limit")


class OverlappingEditsError(IdiomLintError):
    """Raised when a suggestion contains edits whose spans overlap."""

    def __init__(self, first: Span, second: Span) -> None:
        self.first = first
        self.second = second
        super().__init__(f"edit at {second} overlaps edit at {first}")
