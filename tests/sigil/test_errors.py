"""Tests for Sigil error reporting."""

import pytest

from sigil import (
    SigilConfig, SigilDepthLimitError, SigilDesugarer, SigilError, SigilInternalError,
    SigilUnresolvedNameError, SigilVarKind
)
from sigil.sigil_error import offset_to_line_column


class TestUnresolvedNames:
    """Test errors for names that resolve nowhere."""

    def test_unresolved_name_message(self, desugarer, helpers):
        """The message names the offending identifier."""
        with pytest.raises(SigilUnresolvedNameError) as exc_info:
            desugarer.desugar([helpers.var("qux", position=0)], source="qux")

        error = exc_info.value
        assert error.name == "qux"
        assert "Unresolved name 'qux'" in str(error)
        assert error.line == 1
        assert error.column == 1

    def test_position_translated_to_line_and_column(self, desugarer, helpers):
        """The node position is reported as a 1-indexed line and column."""
        with pytest.raises(SigilUnresolvedNameError) as exc_info:
            desugarer.desugar([helpers.var("qux", position=4)], source="a\n  qux")

        error = exc_info.value
        assert (error.line, error.column) == (2, 3)
        assert "Location: Line 2, Column 3" in str(error)
        assert ">" in str(error) and "^" in str(error)

    def test_position_without_source(self, desugarer, helpers):
        """Without source text the raw offset is reported."""
        with pytest.raises(SigilUnresolvedNameError) as exc_info:
            desugarer.desugar([helpers.var("qux", position=12)])

        assert exc_info.value.line is None
        assert "Position: 12" in str(exc_info.value)

    def test_similar_name_suggested(self, desugarer, helpers):
        """A close match among the bound names is suggested."""
        with pytest.raises(SigilUnresolvedNameError) as exc_info:
            desugarer.desugar([helpers.var("qux")], globals_=["quux"])

        assert "Did you mean 'quux'?" in str(exc_info.value)

    def test_effect_hint_without_similar_names(self, desugarer, helpers):
        """With nothing similar in scope the effect convention is pointed out."""
        with pytest.raises(SigilUnresolvedNameError) as exc_info:
            desugarer.desugar([helpers.var("zzzzzz")])

        assert "end the name with '!'" in str(exc_info.value)

    def test_name_bound_in_sibling_block_is_unresolved(self, desugarer, helpers):
        """Bindings do not leak from one block into a sibling block."""
        program = [
            helpers.block(helpers.call("let", helpers.bind("x"), helpers.var("v")), helpers.var("x")),
            helpers.block(helpers.var("x")),
        ]

        with pytest.raises(SigilUnresolvedNameError):
            desugarer.desugar(program, globals_=["let", "v"])


class TestDepthLimit:
    """Test the nesting ceiling."""

    def test_deep_nesting_rejected(self, helpers):
        """Nesting beyond max_depth raises a depth error."""
        desugarer = SigilDesugarer(SigilConfig(max_depth=5))
        program = [helpers.nest_calls("f", 10, helpers.var("x"))]

        with pytest.raises(SigilDepthLimitError) as exc_info:
            desugarer.desugar(program, globals_=["f", "x"])

        assert exc_info.value.max_depth == 5
        assert "maximum depth of 5" in str(exc_info.value)

    def test_nesting_within_limit(self, helpers):
        """Nesting below max_depth desugars normally."""
        desugarer = SigilDesugarer(SigilConfig(max_depth=50))

        result = desugarer.desugar([helpers.nest_calls("f", 10, helpers.var("x"))], globals_=["f", "x"])

        assert result.globals_count == 2

    def test_zero_disables_limit(self, helpers):
        """A max_depth of 0 turns the check off."""
        desugarer = SigilDesugarer(SigilConfig(max_depth=0))

        result = desugarer.desugar([helpers.nest_calls("f", 50, helpers.var("x"))], globals_=["f", "x"])

        assert result.globals_count == 2

    def test_default_limit_stops_runaway_nesting(self, desugarer, helpers):
        """The default ceiling is reached before the interpreter's own recursion limit."""
        with pytest.raises(SigilDepthLimitError):
            desugarer.desugar([helpers.nest_calls("f", 300, helpers.var("x"))], globals_=["f", "x"])

    def test_deep_macro_argument_rejected(self, desugarer, helpers):
        """Deep nesting inside a macro argument reaches the ceiling, not the recursion limit."""
        argument = helpers.nest_calls("f", 3000, helpers.bind("y"))

        with pytest.raises(SigilDepthLimitError):
            desugarer.desugar([helpers.call("m", argument)], globals_=[("m", SigilVarKind.MACRO), "f"])

    def test_deep_binding_free_macro_argument_rejected(self, desugarer, helpers):
        """A deep argument without bindings is rejected the same way."""
        argument = helpers.nest_calls("f", 3000, helpers.var("x"))

        with pytest.raises(SigilDepthLimitError):
            desugarer.desugar([helpers.call("m", argument)], globals_=[("m", SigilVarKind.MACRO), "f", "x"])

    def test_depth_resets_between_runs(self, helpers):
        """A failed run does not leave depth behind for the next one."""
        desugarer = SigilDesugarer(SigilConfig(max_depth=20))

        with pytest.raises(SigilDepthLimitError):
            desugarer.desugar([helpers.nest_calls("f", 30, helpers.var("x"))], globals_=["f", "x"])

        result = desugarer.desugar([helpers.nest_calls("f", 5, helpers.var("x"))], globals_=["f", "x"])
        assert result.globals_count == 2


class TestErrorHelpers:
    """Test the error base class and position helper."""

    def test_offset_to_line_column(self):
        """Offsets map to 1-indexed lines and columns."""
        source = "ab\ncd\n\nef"

        assert offset_to_line_column(source, 0) == (1, 1)
        assert offset_to_line_column(source, 1) == (1, 2)
        assert offset_to_line_column(source, 3) == (2, 1)
        assert offset_to_line_column(source, 6) == (3, 1)
        assert offset_to_line_column(source, 8) == (4, 2)

    def test_offset_past_end_is_clamped(self):
        """Offsets beyond the source end clamp to the end."""
        assert offset_to_line_column("abc", 99) == (1, 4)

    def test_error_hierarchy(self):
        """Every Sigil error is a SigilError."""
        assert issubclass(SigilUnresolvedNameError, SigilError)
        assert issubclass(SigilDepthLimitError, SigilError)
        assert issubclass(SigilInternalError, SigilError)

    def test_detailed_message_parts(self):
        """Context, suggestion and example appear in the message."""
        error = SigilError("Broken", context="while testing", suggestion="fix it", example="{ ok }")

        text = str(error)
        assert text.startswith("Error: Broken")
        assert "Context: while testing" in text
        assert "Suggestion: fix it" in text
        assert "Example: { ok }" in text
