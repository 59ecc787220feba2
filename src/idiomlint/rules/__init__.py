"""
Rule registry.

``LINT_PASSES`` fixes the order in which passes see each node, which
keeps the order of reported findings reproducible.
"""

from typing import Optional

from idiomlint.analysis.diagnostics import LintCategory, LintRule
from idiomlint.rules.base import LintPass
from idiomlint.rules.mem_replace import (
    MEM_REPLACE_OPTION_WITH_NONE,
    MEM_REPLACE_WITH_DEFAULT,
    MEM_REPLACE_WITH_UNINIT,
    MemReplace,
)
from idiomlint.rules.option_map_unwrap_or import OPTION_MAP_UNWRAP_OR, OptionMapUnwrapOr
from idiomlint.rules.tabs_in_doc_comments import TABS_IN_DOC_COMMENTS, TabsInDocComments

LINT_PASSES: tuple[type[LintPass], ...] = (
    MemReplace,
    OptionMapUnwrapOr,
    TabsInDocComments,
)

ALL_RULES: dict[str, LintRule] = {
    rule.code: rule for pass_cls in LINT_PASSES for rule in pass_cls.lints
}

# Also index by name
RULES_BY_NAME: dict[str, LintRule] = {
    rule.name: rule for rule in ALL_RULES.values()
}


def get_rule_by_name(name: str) -> Optional[LintRule]:
    """Get a lint rule by its name."""
    return RULES_BY_NAME.get(name)


def get_rule_by_code(code: str) -> Optional[LintRule]:
    """Get a lint rule by its code."""
    return ALL_RULES.get(code)


def get_rules_by_category(category: LintCategory) -> list[LintRule]:
    """Get all lint rules in a category."""
    return [rule for rule in ALL_RULES.values() if rule.category == category]


__all__ = [
    "LintPass",
    "LINT_PASSES",
    "ALL_RULES",
    "RULES_BY_NAME",
    "get_rule_by_name",
    "get_rule_by_code",
    "get_rules_by_category",
    "MemReplace",
    "OptionMapUnwrapOr",
    "TabsInDocComments",
    "MEM_REPLACE_OPTION_WITH_NONE",
    "MEM_REPLACE_WITH_UNINIT",
    "MEM_REPLACE_WITH_DEFAULT",
    "OPTION_MAP_UNWRAP_OR",
    "TABS_IN_DOC_COMMENTS",
]
