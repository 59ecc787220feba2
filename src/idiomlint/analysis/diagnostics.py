"""
Lint rule descriptors, findings and their presentation.

This module holds everything a rule produces and everything that
consumes it:

- ``LintRule`` descriptors with a default ``LintLevel`` and category
- ``Finding`` records with an optional multi-edit ``Suggestion``
- the ``FindingReporter`` protocol and an in-memory reporter
- ``LintConfiguration`` for per-rule level overrides
- Rust-compiler style rendering and suggestion application

Example output:
    warning[W0101]: replacing an `Option` with `None`
      --> example.rs:3:13
      |
    3 |     let y = mem::replace(&mut x, None);
      |             ^^^^^^^^^^^^^^^^^^^^^^^^^^
      |
       = help: consider `Option::take()` instead: `x.take()`
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence

from idiomlint.utils.errors import OverlappingEditsError, SourceFile, Span


# =============================================================================
# Lint Rule Configuration
# =============================================================================


class LintLevel(Enum):
    """
    Severity level for lint rules.

    ALLOW: Rule is disabled, no finding produced
    WARN: Rule produces a warning
    DENY: Rule produces an error
    """

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"

    @property
    def label(self) -> str:
        return "error" if self is LintLevel.DENY else "warning"

    def color_code(self) -> str:
        """Get ANSI color code for terminal output."""
        colors = {
            LintLevel.DENY: "\033[91m",  # Red
            LintLevel.WARN: "\033[93m",  # Yellow
        }
        return colors.get(self, "")


class LintCategory(Enum):
    """
    Categories of lint rules for organization and filtering.
    """

    STYLE = "style"                # Idiomatic rewrites
    CORRECTNESS = "correctness"    # Code that is outright wrong


class Applicability(Enum):
    """
    How safe it is to apply a suggestion without looking at it.

    MACHINE_APPLICABLE: safe to auto-apply
    MAYBE_INCORRECT: probably correct, may need adjusting
    HAS_PLACEHOLDERS: needs human review before it compiles
    """

    MACHINE_APPLICABLE = "safe-to-auto-apply"
    MAYBE_INCORRECT = "probably-correct"
    HAS_PLACEHOLDERS = "needs-human-review"

    @property
    def rank(self) -> int:
        return _APPLICABILITY_ORDER.index(self)

    def weakest(self, other: "Applicability") -> "Applicability":
        """Return whichever of ``self`` and ``other`` is less certain."""
        return self if self.rank >= other.rank else other


_APPLICABILITY_ORDER = (
    Applicability.MACHINE_APPLICABLE,
    Applicability.MAYBE_INCORRECT,
    Applicability.HAS_PLACEHOLDERS,
)


@dataclass(frozen=True)
class LintRule:
    """
    Definition of a single lint rule.

    Attributes:
        code: Unique rule identifier (e.g., "W0101")
        name: Human-readable rule name (e.g., "mem-replace-option-with-none")
        category: The category this rule belongs to
        description: One-line summary of what the rule catches
        level: Default severity level
        explanation: Longer rationale shown by ``--explain`` style tooling
    """

    code: str
    name: str
    category: LintCategory
    description: str
    level: LintLevel = LintLevel.WARN
    explanation: str = ""

    def __str__(self) -> str:
        return f"{self.code} ({self.name})"


# =============================================================================
# Findings
# =============================================================================


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace the text under ``span`` with ``replacement``."""

    span: Span
    replacement: str


@dataclass(frozen=True)
class Suggestion:
    """
    A suggested fix made of one or more edits.

    Edits are kept sorted by source position.
    """

    message: str
    edits: tuple[Edit, ...]
    applicability: Applicability

    @classmethod
    def single(
        cls,
        message: str,
        span: Span,
        replacement: str,
        applicability: Applicability,
    ) -> "Suggestion":
        return cls(message, (Edit(span, replacement),), applicability)

    @classmethod
    def multipart(
        cls,
        message: str,
        edits: Iterable[tuple[Span, str]],
        applicability: Applicability,
    ) -> "Suggestion":
        ordered = sorted(
            (Edit(span, text) for span, text in edits),
            key=lambda edit: (edit.span.lo, edit.span.hi),
        )
        return cls(message, tuple(ordered), applicability)


@dataclass
class Finding:
    """
    A detected lint finding.

    Attributes:
        rule: The lint rule that fired
        span: Source span of the offending code
        message: Primary message
        level: Effective level after configuration
        help: Optional help line (shown even when there is no edit)
        suggestion: Optional machine-readable fix
        notes: Additional notes
    """

    rule: LintRule
    span: Span
    message: str
    level: LintLevel = LintLevel.WARN
    help: Optional[str] = None
    suggestion: Optional[Suggestion] = None
    notes: list[str] = field(default_factory=list)

    @property
    def edits(self) -> tuple[Edit, ...]:
        return self.suggestion.edits if self.suggestion else ()

    @property
    def applicability(self) -> Optional[Applicability]:
        return self.suggestion.applicability if self.suggestion else None

    def __str__(self) -> str:
        return f"[{self.rule.code}] {self.span}: {self.message}"


class FindingReporter(Protocol):
    """Sink that receives each finding as soon as it is produced."""

    def report(self, finding: Finding) -> None:
        ...


class CollectingReporter:
    """Reporter that keeps findings in memory, in emission order."""

    def __init__(self) -> None:
        self.findings: list[Finding] = []

    def report(self, finding: Finding) -> None:
        self.findings.append(finding)

    def by_rule(self, name: str) -> list[Finding]:
        return [f for f in self.findings if f.rule.name == name]

    def has_errors(self) -> bool:
        return any(f.level == LintLevel.DENY for f in self.findings)

    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.level == LintLevel.DENY)

    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.level == LintLevel.WARN)

    def clear(self) -> None:
        self.findings.clear()


# =============================================================================
# Lint Configuration
# =============================================================================


@dataclass
class LintConfiguration:
    """
    Configuration for the linter specifying rule levels.

    Example:
        config = LintConfiguration()
        config.set_level("mem-replace-with-default", LintLevel.ALLOW)
        config.set_level_by_category(LintCategory.STYLE, LintLevel.DENY)
    """

    rule_levels: dict[str, LintLevel] = field(default_factory=dict)
    category_levels: dict[LintCategory, LintLevel] = field(default_factory=dict)
    default_level: Optional[LintLevel] = None

    def get_level(self, rule: LintRule) -> LintLevel:
        """Get the effective level for a rule."""
        # Code, then name, then category, then the blanket override
        if rule.code in self.rule_levels:
            return self.rule_levels[rule.code]
        if rule.name in self.rule_levels:
            return self.rule_levels[rule.name]
        if rule.category in self.category_levels:
            return self.category_levels[rule.category]
        if self.default_level is not None:
            return self.default_level
        return rule.level

    def set_level(self, rule_id: str, level: LintLevel) -> None:
        """Set the level for a rule by code or name."""
        self.rule_levels[rule_id] = level

    def set_level_by_category(self, category: LintCategory, level: LintLevel) -> None:
        """Set the level for all rules in a category."""
        self.category_levels[category] = level

    def allow(self, rule_id: str) -> None:
        """Disable a rule."""
        self.set_level(rule_id, LintLevel.ALLOW)

    def warn(self, rule_id: str) -> None:
        self.set_level(rule_id, LintLevel.WARN)

    def deny(self, rule_id: str) -> None:
        self.set_level(rule_id, LintLevel.DENY)

    def allow_all(self) -> None:
        """Disable all rules."""
        self.rule_levels.clear()
        self.category_levels.clear()
        self.default_level = LintLevel.ALLOW

    def warn_all(self) -> None:
        self.rule_levels.clear()
        self.category_levels.clear()
        self.default_level = LintLevel.WARN

    def deny_all(self) -> None:
        self.rule_levels.clear()
        self.category_levels.clear()
        self.default_level = LintLevel.DENY

    def apply_directive(self, directive: str) -> None:
        """Apply a ``#![allow(rule-name)]`` style directive."""
        _, rule_name, level = self.parse_directive(directive)
        self.set_level(rule_name, level)

    @classmethod
    def parse_directive(cls, directive: str) -> tuple[str, str, LintLevel]:
        """
        Parse a lint directive from source code.

        Formats:
            #![allow(rule-name)]
            #![warn(rule-name)]
            #![deny(rule-name)]

        Returns:
            Tuple of (action, rule_name, level)

        Raises:
            ValueError: If directive format is invalid
        """
        pattern = r"#!\[(allow|warn|deny)\(([a-zA-Z0-9_-]+)\)\]"
        match = re.match(pattern, directive.strip())
        if not match:
            raise ValueError(f"Invalid lint directive: {directive}")

        action = match.group(1)
        rule_name = match.group(2).replace("_", "-")
        return action, rule_name, LintLevel(action)


# =============================================================================
# Applying suggestions
# =============================================================================


def _check_edits(edits: Sequence[Edit]) -> list[Edit]:
    ordered = sorted(edits, key=lambda edit: (edit.span.lo, edit.span.hi))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.span.hi > current.span.lo:
            raise OverlappingEditsError(previous.span, current.span)
    return ordered


def apply_suggestion(text: str, edits: Sequence[Edit]) -> str:
    """
    Apply byte-offset edits to ``text``.

    Raises:
        OverlappingEditsError: If two edits overlap
    """
    data = text.encode("utf-8")
    pieces: list[bytes] = []
    cursor = 0
    for edit in _check_edits(edits):
        pieces.append(data[cursor:edit.span.lo])
        pieces.append(edit.replacement.encode("utf-8"))
        cursor = edit.span.hi
    pieces.append(data[cursor:])
    return b"".join(pieces).decode("utf-8")


def apply_findings(
    text: str,
    findings: Iterable[Finding],
    minimum: Applicability = Applicability.MACHINE_APPLICABLE,
) -> str:
    """
    Apply every suggestion at least as certain as ``minimum``.

    Suggestions are taken in order; one that overlaps an already accepted
    suggestion is skipped, leaving it for a later run.
    """
    accepted: list[Edit] = []
    for finding in findings:
        suggestion = finding.suggestion
        if suggestion is None or suggestion.applicability.rank > minimum.rank:
            continue
        candidate = accepted + list(suggestion.edits)
        try:
            _check_edits(candidate)
        except OverlappingEditsError:
            continue
        accepted = candidate
    return apply_suggestion(text, accepted)


# =============================================================================
# Formatting
# =============================================================================


def _suggested_lines(source: SourceFile, finding: Finding) -> list[str]:
    """The lines touched by ``finding`` as they read after its edits."""
    edits = finding.edits
    lo = min([finding.span.lo] + [edit.span.lo for edit in edits])
    hi = max([finding.span.hi] + [edit.span.hi for edit in edits])
    region = Span(source.line_start(lo), source.line_end(hi))
    original = source.snippet(region) or ""
    shifted = [
        Edit(Span(edit.span.lo - region.lo, edit.span.hi - region.lo), edit.replacement)
        for edit in edits
    ]
    return apply_suggestion(original, shifted).splitlines()


def render_finding(
    finding: Finding,
    source: SourceFile,
    use_color: bool = False,
) -> str:
    """
    Format a finding like Rust's compiler output.

    A single-edit suggestion is shown inline after the help text; a
    multi-edit suggestion is shown as the rewritten source lines.
    """
    lines: list[str] = []

    reset = "\033[0m" if use_color else ""
    bold = "\033[1m" if use_color else ""
    blue = "\033[94m" if use_color else ""
    green = "\033[92m" if use_color else ""
    severity_color = finding.level.color_code() if use_color else ""

    lines.append(
        f"{severity_color}{bold}{finding.level.label}[{finding.rule.code}]{reset}: "
        f"{bold}{finding.message}{reset}"
    )

    start = source.lookup(finding.span.lo)
    lines.append(f"  {blue}-->{reset} {start}")

    # Source context with underline; multi-line spans are cut at the first line end
    source_line = source.line_text(start.line)
    end = source.lookup(finding.span.hi)
    if end.line == start.line:
        length = max(1, end.column - start.column)
    else:
        length = max(1, len(source_line) - start.column + 1)
    gutter = " " * len(str(start.line))
    lines.append(f"{gutter} {blue}|{reset}")
    lines.append(f"{blue}{start.line} |{reset} {source_line}")
    padding = " " * (start.column - 1)
    lines.append(f"{gutter} {blue}|{reset} {padding}{severity_color}{'^' * length}{reset}")
    lines.append(f"{gutter} {blue}|{reset}")

    suggestion = finding.suggestion
    if suggestion is not None and len(suggestion.edits) > 1:
        if finding.help and finding.help != suggestion.message:
            lines.append(f"   {blue}={reset} {green}help:{reset} {finding.help}")
        lines.append(f"   {blue}={reset} {green}help:{reset} {suggestion.message}:")
        for rewritten in _suggested_lines(source, finding):
            lines.append(f"     {rewritten}")
    elif finding.help:
        if suggestion is not None:
            lines.append(
                f"   {blue}={reset} {green}help:{reset} {finding.help}: "
                f"`{suggestion.edits[0].replacement}`"
            )
        else:
            lines.append(f"   {blue}={reset} {green}help:{reset} {finding.help}")

    for note in finding.notes:
        lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

    return "\n".join(lines)


def render_all(
    findings: Iterable[Finding],
    source: SourceFile,
    use_color: bool = False,
) -> str:
    """Format all findings as a single string."""
    return "\n\n".join(render_finding(f, source, use_color) for f in findings)


# =============================================================================
# Exports
# =============================================================================


__all__ = [
    # Enums
    "LintLevel",
    "LintCategory",
    "Applicability",
    # Data classes
    "LintRule",
    "Edit",
    "Suggestion",
    "Finding",
    "LintConfiguration",
    # Reporting
    "FindingReporter",
    "CollectingReporter",
    "render_finding",
    "render_all",
    "apply_suggestion",
    "apply_findings",
]
