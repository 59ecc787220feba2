"""
Tests for the mem::replace rule group.
"""

from dataclasses import replace

import pytest

from idiomlint.analysis.diagnostics import (
    Applicability,
    LintConfiguration,
    LintLevel,
    apply_findings,
)
from idiomlint.analysis.paths import DEFAULT_PATHS
from idiomlint.rules.mem_replace import (
    MEM_REPLACE_OPTION_WITH_NONE,
    MEM_REPLACE_WITH_DEFAULT,
    MEM_REPLACE_WITH_UNINIT,
    MemReplace,
)


REPLACE = "core::mem::replace"
NONE = "core::option::Option::None"
DEFAULT = "core::default::Default::default"


def run_pass(builder, expr, config=None):
    cx = builder.context(config)
    MemReplace().check_expr(cx, expr)
    return cx.reporter.findings


class TestReplaceOptionWithNone:
    """Tests for mem::replace(&mut opt, None)."""

    def test_basic_finding(self, replace_option_tree) -> None:
        """Test the finding, its span and its fix."""
        b, _, call = replace_option_tree

        findings = run_pass(b, call)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule is MEM_REPLACE_OPTION_WITH_NONE
        assert finding.message == "replacing an `Option` with `None`"
        assert finding.help == "consider `Option::take()` instead"
        assert finding.span == call.span
        assert len(finding.edits) == 1
        assert finding.edits[0].span == call.span
        assert finding.edits[0].replacement == "opt.take()"
        assert finding.applicability == Applicability.MACHINE_APPLICABLE

    def test_fix_applies(self, replace_option_tree) -> None:
        """Test that applying the fix rewrites the call."""
        b, _, call = replace_option_tree

        result = apply_findings(b.text, run_pass(b, call))

        assert result == "fn main() {\n    let taken = opt.take();\n}\n"

    def test_dest_without_borrow(self, tree_factory) -> None:
        """Test that a bare name as destination is accepted too."""
        b = tree_factory("mem::replace(opt, None)")
        call = b.call(
            "mem::replace(opt, None)",
            b.path("mem::replace", resolution=REPLACE),
            b.path("opt"),
            b.path("None", resolution=NONE),
        )

        findings = run_pass(b, call)

        assert [f.edits[0].replacement for f in findings] == ["opt.take()"]

    def test_index_destination_is_skipped(self, tree_factory) -> None:
        """Test that &mut v[i] is not rewritten."""
        b = tree_factory("mem::replace(&mut v[i], None)")
        index = b.index("v[i]", b.path("v"), b.path("i"))
        call = b.call(
            "mem::replace(&mut v[i], None)",
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut v[i]", index),
            b.path("None", resolution=NONE),
        )

        assert run_pass(b, call) == []

    def test_field_destination_is_skipped(self, tree_factory) -> None:
        """Test that &mut self.slot is not rewritten."""
        b = tree_factory("mem::replace(&mut self.slot, None)")
        field = b.field("self.slot", b.path("self"), "slot")
        call = b.call(
            "mem::replace(&mut self.slot, None)",
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut self.slot", field),
            b.path("None", resolution=NONE),
        )

        assert run_pass(b, call) == []

    def test_shadowed_none_is_skipped(self, tree_factory) -> None:
        """Test that a `None` resolving elsewhere is not the option constant."""
        b = tree_factory("mem::replace(&mut opt, None)")
        call = b.call(
            "mem::replace(&mut opt, None)",
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut opt", b.path("opt")),
            b.path("None", resolution="crate::Mode::None"),
        )

        assert run_pass(b, call) == []

    def test_aliased_replace_is_recognized(self, tree_factory) -> None:
        """Test that the callee is matched by resolution, not by spelling."""
        b = tree_factory("swap_out(&mut opt, None)")
        call = b.call(
            "swap_out(&mut opt, None)",
            b.path("swap_out", resolution=REPLACE),
            b.borrow_mut("&mut opt", b.path("opt")),
            b.path("None", resolution=NONE),
        )

        findings = run_pass(b, call)

        assert [f.rule for f in findings] == [MEM_REPLACE_OPTION_WITH_NONE]

    def test_macro_snippet_weakens_applicability(self, tree_factory, macro_context) -> None:
        """Test that a destination from a macro expansion is only probably correct."""
        b = tree_factory("mem::replace(&mut opt, None)")
        opt = b.path("opt", ctxt=macro_context)
        call = b.call(
            "mem::replace(&mut opt, None)",
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut opt", opt),
            b.path("None", resolution=NONE),
        )

        findings = run_pass(b, call)

        assert findings[0].applicability == Applicability.MAYBE_INCORRECT


class TestReplaceWithUninit:
    """Tests for mem::replace with uninitialized or zeroed values."""

    def _call(self, b, func: str, resolution: str, ty=None):
        text = f"mem::replace(&mut v, {func}())"
        return b.call(
            text,
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut v", b.path("v")),
            b.call(f"{func}()", b.path(func, resolution=resolution), ty=ty),
        )

    def test_uninitialized(self, tree_factory) -> None:
        """Test that replacing with uninitialized memory is denied."""
        b = tree_factory("mem::replace(&mut v, mem::uninitialized())")
        call = self._call(b, "mem::uninitialized", "core::mem::uninitialized", ty=b.I32)

        findings = run_pass(b, call)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule is MEM_REPLACE_WITH_UNINIT
        assert finding.level == LintLevel.DENY
        assert finding.message == "replacing with `mem::uninitialized()`"
        assert finding.help == "consider using the `take_mut` crate instead"
        assert finding.suggestion is None

    def test_zeroed_non_primitive(self, tree_factory) -> None:
        """Test that zeroing a non-primitive value is denied."""
        b = tree_factory("mem::replace(&mut v, mem::zeroed())")
        call = self._call(b, "mem::zeroed", "core::mem::zeroed", ty=b.VEC_I32)

        findings = run_pass(b, call)

        assert [f.message for f in findings] == ["replacing with `mem::zeroed()`"]
        assert findings[0].help == "consider using a default value or the `take_mut` crate instead"

    def test_zeroed_primitive_is_allowed(self, tree_factory) -> None:
        """Test that all-zero bits are fine for a primitive."""
        b = tree_factory("mem::replace(&mut v, mem::zeroed())")
        call = self._call(b, "mem::zeroed", "core::mem::zeroed", ty=b.I32)

        assert run_pass(b, call) == []

    def test_zeroed_unknown_type_is_reported(self, tree_factory) -> None:
        """Test that a value of unknown type is treated as non-primitive."""
        b = tree_factory("mem::replace(&mut v, mem::zeroed())")
        call = self._call(b, "mem::zeroed", "core::mem::zeroed")

        assert [f.rule for f in run_pass(b, call)] == [MEM_REPLACE_WITH_UNINIT]

    def test_call_with_arguments_is_skipped(self, tree_factory) -> None:
        """Test that only zero-argument calls are considered."""
        b = tree_factory("mem::replace(&mut v, mem::zeroed(1))")
        call = b.call(
            "mem::replace(&mut v, mem::zeroed(1))",
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut v", b.path("v")),
            b.call("mem::zeroed(1)", b.path("mem::zeroed", resolution="core::mem::zeroed"),
                   b.literal("1", 1)),
        )

        assert run_pass(b, call) == []


class TestReplaceWithDefault:
    """Tests for mem::replace(&mut x, T::default())."""

    TEXT = "mem::replace(&mut text, String::default())"

    def _call(self, b, ctxt=None):
        kwargs = {"ctxt": ctxt} if ctxt is not None else {}
        return b.call(
            self.TEXT,
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut text", b.path("text")),
            b.call("String::default()", b.path("String::default", resolution=DEFAULT)),
            **kwargs,
        )

    def test_default_finding(self, tree_factory) -> None:
        """Test the finding and its take() fix."""
        b = tree_factory(self.TEXT)
        call = self._call(b)

        findings = run_pass(b, call)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule is MEM_REPLACE_WITH_DEFAULT
        assert finding.message == (
            "replacing a value of type `T` with `T::default()` is better expressed "
            "using `std::mem::take`"
        )
        assert finding.help == "consider using"
        assert finding.edits[0].replacement == "std::mem::take(&mut text)"
        assert finding.applicability == Applicability.MACHINE_APPLICABLE
        assert apply_findings(b.text, findings) == "std::mem::take(&mut text)"

    def test_take_spelling_comes_from_path_table(self, tree_factory) -> None:
        """Test that the fix spells the take function as the path table says."""
        b = tree_factory(self.TEXT)
        cx = b.context(paths=replace(DEFAULT_PATHS, take_display="core::mem::take"))

        MemReplace().check_expr(cx, self._call(b))

        assert cx.reporter.findings[0].edits[0].replacement == "core::mem::take(&mut text)"

    def test_qualified_default_callee(self, tree_factory) -> None:
        """Test that <T as Default>::default() is recognized by resolution."""
        text = "mem::replace(&mut text, <String as Default>::default())"
        b = tree_factory(text)
        callee = b.path("default", resolution=DEFAULT, qualified_self=b.STRING)
        call = b.call(
            text,
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut text", b.path("text")),
            b.call("<String as Default>::default()", callee),
        )

        assert [f.rule for f in run_pass(b, call)] == [MEM_REPLACE_WITH_DEFAULT]

    def test_local_macro_reports_without_fix(self, tree_factory, macro_context) -> None:
        """Test that a call from a local macro is reported with no edit."""
        b = tree_factory(self.TEXT)
        call = self._call(b, ctxt=macro_context)

        findings = run_pass(b, call)

        assert len(findings) == 1
        assert findings[0].suggestion is None
        assert findings[0].help is None

    def test_external_macro_is_skipped(self, tree_factory, external_macro_context) -> None:
        """Test that calls from external macros are never reported."""
        b = tree_factory(self.TEXT)
        call = self._call(b, ctxt=external_macro_context)

        assert run_pass(b, call) == []

    def test_other_constructor_is_skipped(self, tree_factory) -> None:
        """Test that String::new() is not the default constructor."""
        text = "mem::replace(&mut text, String::new())"
        b = tree_factory(text)
        call = b.call(
            text,
            b.path("mem::replace", resolution=REPLACE),
            b.borrow_mut("&mut text", b.path("text")),
            b.call("String::new()", b.path("String::new", resolution="alloc::string::String::new")),
        )

        assert run_pass(b, call) == []


class TestMemReplacePass:
    """Tests for the pass entry point."""

    def test_other_function_is_ignored(self, tree_factory) -> None:
        """Test that calls not resolving to replace are ignored."""
        b = tree_factory("mem::swap(&mut opt, None)")
        call = b.call(
            "mem::swap(&mut opt, None)",
            b.path("mem::swap", resolution="core::mem::swap"),
            b.borrow_mut("&mut opt", b.path("opt")),
            b.path("None", resolution=NONE),
        )

        assert run_pass(b, call) == []

    @pytest.mark.parametrize("arity", [1, 3])
    def test_wrong_arity_is_ignored(self, tree_factory, arity: int) -> None:
        """Test that replace with other than two arguments is ignored."""
        b = tree_factory("mem::replace(opt, None, x)")
        args = [b.path("opt"), b.path("None", resolution=NONE), b.path("x")][:arity]
        call = b.call("mem::replace(opt, None, x)",
                      b.path("mem::replace", resolution=REPLACE), *args)

        assert run_pass(b, call) == []

    def test_allowed_rule_is_suppressed(self, replace_option_tree) -> None:
        """Test that an ALLOW level drops the finding."""
        b, _, call = replace_option_tree
        config = LintConfiguration()
        config.allow("mem-replace-option-with-none")

        assert run_pass(b, call, config) == []

    def test_unresolved_callee_is_ignored(self, tree_factory) -> None:
        """Test that an unresolved callee never matches."""
        b = tree_factory("replace(&mut opt, None)")
        call = b.call(
            "replace(&mut opt, None)",
            b.path("replace"),
            b.borrow_mut("&mut opt", b.path("opt")),
            b.path("None", resolution=NONE),
        )

        assert run_pass(b, call) == []
