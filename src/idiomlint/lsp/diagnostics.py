"""
LSP conversion for idiomlint findings.

Turns findings into ``lsprotocol`` diagnostics for display in editors, and
their suggestions into quick-fix code actions. Finding spans are byte
offsets; LSP positions count UTF-16 code units within a 0-indexed line.
"""

from __future__ import annotations

from typing import Iterable, Optional

from lsprotocol import types

from idiomlint.analysis.diagnostics import Applicability, Finding, LintLevel
from idiomlint.utils.errors import SourceFile, Span

SOURCE_NAME = "idiomlint"


def position_at(source: SourceFile, offset: int) -> types.Position:
    """Convert a byte offset into an LSP position."""
    location = source.lookup(offset)
    prefix = source.line_prefix(offset)
    return types.Position(
        line=location.line - 1,
        character=len(prefix.encode("utf-16-le")) // 2,
    )


def range_of(source: SourceFile, span: Span) -> types.Range:
    return types.Range(start=position_at(source, span.lo), end=position_at(source, span.hi))


class DiagnosticProvider:
    """
    Converts the findings for one document into LSP objects.

    Example:
        provider = DiagnosticProvider(source, "file:///main.rs")
        diagnostics = provider.get_diagnostics(findings)
        actions = provider.get_code_actions(findings)
    """

    def __init__(self, source: SourceFile, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The source file the findings refer to
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri

    def to_diagnostic(self, finding: Finding) -> Optional[types.Diagnostic]:
        """
        Convert one finding. Returns None for findings at the ALLOW level.
        """
        severity_map = {
            LintLevel.ALLOW: None,
            LintLevel.WARN: types.DiagnosticSeverity.Warning,
            LintLevel.DENY: types.DiagnosticSeverity.Error,
        }
        severity = severity_map[finding.level]
        if severity is None:
            return None

        message = finding.message
        if finding.help:
            message = f"{message}\n\nhelp: {finding.help}"
        for note in finding.notes:
            message = f"{message}\nnote: {note}"

        return types.Diagnostic(
            range=range_of(self.source, finding.span),
            message=message,
            severity=severity,
            source=SOURCE_NAME,
            code=finding.rule.code,
        )

    def get_diagnostics(self, findings: Iterable[Finding]) -> list[types.Diagnostic]:
        diagnostics = []
        for finding in findings:
            diagnostic = self.to_diagnostic(finding)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
        return diagnostics

    def to_code_action(self, finding: Finding) -> Optional[types.CodeAction]:
        """
        Build a quick fix from a finding's suggestion.

        Only machine-applicable suggestions are marked as preferred.
        """
        suggestion = finding.suggestion
        diagnostic = self.to_diagnostic(finding)
        if suggestion is None or diagnostic is None:
            return None

        edits = [
            types.TextEdit(range=range_of(self.source, edit.span), new_text=edit.replacement)
            for edit in suggestion.edits
        ]
        return types.CodeAction(
            title=suggestion.message,
            kind=types.CodeActionKind.QuickFix,
            diagnostics=[diagnostic],
            edit=types.WorkspaceEdit(changes={self.uri: edits}),
            is_preferred=suggestion.applicability == Applicability.MACHINE_APPLICABLE,
        )

    def get_code_actions(self, findings: Iterable[Finding]) -> list[types.CodeAction]:
        actions = []
        for finding in findings:
            action = self.to_code_action(finding)
            if action is not None:
                actions.append(action)
        return actions


def findings_to_lsp(findings: Iterable[Finding], source: SourceFile, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to convert findings for a document.

    Args:
        findings: Findings for the document
        source: The document's source file
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    return DiagnosticProvider(source, uri).get_diagnostics(findings)


def code_actions_for(findings: Iterable[Finding], source: SourceFile, uri: str) -> list[types.CodeAction]:
    """Convenience function returning the quick fixes for a document."""
    return DiagnosticProvider(source, uri).get_code_actions(findings)


__all__ = [
    "DiagnosticProvider",
    "findings_to_lsp",
    "code_actions_for",
    "position_at",
    "range_of",
]
