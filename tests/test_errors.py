"""
Unit tests for error diagnostics.
"""

import pytest

from voxelcsg import (
    Diagnostic, EquationError, InvalidCharacterError, VoxelError, validate_equation,
)
from voxelcsg.errors import (
    error_deleted_object, error_empty_input, error_invalid_junction, error_invalid_mode,
    error_unbalanced_grouping,
)


class TestDiagnostic:
    """Rendering of diagnostics."""

    def test_plain_message(self):
        diag = Diagnostic(code="V001", message="Line requires at least 2 voxels")
        assert diag.format() == "error[V001]: Line requires at least 2 voxels"

    def test_caret_under_column(self):
        diag = Diagnostic(code="E001", message="invalid character '+'", source="a+b", column=1)
        assert diag.format().splitlines() == [
            "error[E001]: invalid character '+'",
            "  | a+b",
            "  |  ^",
        ]

    def test_source_hidden(self):
        diag = Diagnostic(code="E001", message="m", source="a+b", column=1)
        assert diag.format(show_source=False) == "error[E001]: m"

    def test_source_without_column(self):
        diag = Diagnostic(code="E005", message="m", source="(a")
        assert diag.format().splitlines() == ["error[E005]: m", "  | (a"]


class TestErrorFactories:

    def test_str_is_formatted(self):
        with pytest.raises(InvalidCharacterError) as exc:
            validate_equation("a∪b+c")
        text = str(exc.value)
        assert text.startswith("error[E001]: invalid character '+'")
        assert text.splitlines()[-1] == "  |    ^"

    def test_hierarchy(self):
        err = error_invalid_junction("∪", "∩", "a∪∩b", 2)
        assert isinstance(err, EquationError)
        assert isinstance(err, VoxelError)
        assert err.code == "E004"

    def test_junction_at_start(self):
        err = error_invalid_junction("", "∪", "∪a", 0)
        assert "cannot start with '∪'" in str(err)

    def test_empty_input_wording(self):
        assert "at least 1 voxel" in str(error_empty_input("Layer"))
        assert "at least 2 voxels" in str(error_empty_input("Line", 2))

    def test_invalid_mode_lists_choices(self):
        err = error_invalid_mode("bogus", ["A", "B"])
        assert err.code == "V002"
        assert "A, B" in str(err)

    def test_deleted_object(self):
        assert "abc" in str(error_deleted_object("abc"))

    def test_unbalanced_messages(self):
        assert "2 '(' against 1 ')'" in str(error_unbalanced_grouping(2, 1, "((a)"))
        assert "no matching" in str(error_unbalanced_grouping(0, 1, ")a", 0))
