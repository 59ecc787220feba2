"""
Canonical paths and the well-known path catalogue.

A canonical path names a declaration independently of how the linted
code imports it (``core::mem::replace`` rather than ``mem::replace`` or a
local alias). Rules compare resolved paths against a ``PathTable``, which
is injected into the lint context so that rules never hardcode paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class CanonicalPath:
    """
    An ordered sequence of name segments identifying one declaration.

    Example:
        CanonicalPath(("core", "mem", "replace"))
    """

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("a canonical path needs at least one segment")

    @classmethod
    def parse(cls, text: str) -> "CanonicalPath":
        """Parse a ``::``-separated path such as ``core::option::Option``."""
        return cls(tuple(segment for segment in text.split("::") if segment))

    @property
    def name(self) -> str:
        """The last segment."""
        return self.segments[-1]

    def matches(self, segments: Sequence[str]) -> bool:
        return self.segments == tuple(segments)

    def __str__(self) -> str:
        return "::".join(self.segments)


@dataclass(frozen=True)
class PathTable:
    """
    Mapping from semantic operation to its canonical path.

    Attributes:
        mem_replace: The generic value-swap function, ``replace(dest, src)``
        mem_uninitialized: Produces an uninitialized value
        mem_zeroed: Produces an all-zero-bits value
        default_trait_method: The default-constructor association
        option: The optional-value type
        option_none: The absent-value constant of ``option``
        take_display: How suggestions spell the function that takes a value,
            leaving the type's default behind
    """

    mem_replace: CanonicalPath
    mem_uninitialized: CanonicalPath
    mem_zeroed: CanonicalPath
    default_trait_method: CanonicalPath
    option: CanonicalPath
    option_none: CanonicalPath
    take_display: str = "std::mem::take"


DEFAULT_PATHS = PathTable(
    mem_replace=CanonicalPath.parse("core::mem::replace"),
    mem_uninitialized=CanonicalPath.parse("core::mem::uninitialized"),
    mem_zeroed=CanonicalPath.parse("core::mem::zeroed"),
    default_trait_method=CanonicalPath.parse("core::default::Default::default"),
    option=CanonicalPath.parse("core::option::Option"),
    option_none=CanonicalPath.parse("core::option::Option::None"),
)


__all__ = [
    "CanonicalPath",
    "PathTable",
    "DEFAULT_PATHS",
]
