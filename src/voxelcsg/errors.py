"""
Exceptions and error factories for voxelcsg.

Error code ranges:
- V0xx: Geometry and object lifecycle errors
- E0xx: Equation syntax errors
- E1xx: Equation interpretation errors
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Diagnostic:
    """A single error report."""
    code: str                       # V001, E001, etc.
    message: str                    # Human-readable message
    source: Optional[str] = None    # The equation text, if any
    column: Optional[int] = None    # 0-indexed column in ``source``

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = [f"error[{self.code}]: {self.message}"]

        if show_source and self.source is not None:
            parts.append(f"  | {self.source}")
            if self.column is not None:
                parts.append(f"  | {' ' * self.column}^")

        return "\n".join(parts)


class VoxelError(Exception):
    """Base exception for voxelcsg errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class EmptyInputError(VoxelError):
    """A box, line or layer was built from too few points (V001)."""
    pass


class InvalidModeError(VoxelError):
    """An unrecognised mode was passed to an export operation (V002)."""
    pass


class DeletedObjectError(VoxelError):
    """An object was used after ``delete()`` (V003)."""
    pass


class EquationError(VoxelError):
    """Malformed set-operations equation."""
    pass


class InvalidCharacterError(EquationError):
    """Character outside the equation alphabet (E001)."""
    pass


class InvalidNegationError(EquationError):
    """Negation applied where it is not allowed (E002)."""
    pass


class InvalidEndingError(InvalidNegationError):
    """Equation ends with an operator, negation or opening group (E003)."""
    pass


class InvalidJunctionError(InvalidNegationError):
    """Two tokens that may not be adjacent (E004)."""
    pass


class UnbalancedGroupingError(EquationError):
    """Opening and closing groups do not match (E005)."""
    pass


class InterpretationError(VoxelError):
    """An AST could not be evaluated against the bound voxel sets."""
    pass


class UnboundNameError(InterpretationError):
    """The AST references a name with no bound voxel set (E101)."""
    pass


class MalformedAstError(InterpretationError):
    """An AST level has a length other than one or three (E102)."""
    pass


class UnknownOperationError(InterpretationError):
    """The AST holds a token that is not a set operator (E103)."""
    pass


# --- Geometry errors ---

def error_empty_input(what: str, needed: int = 1) -> EmptyInputError:
    """V001: Not enough points."""
    noun = "voxel" if needed == 1 else "voxels"
    return EmptyInputError(Diagnostic(
        code="V001",
        message=f"{what} requires at least {needed} {noun}",
    ))


def error_invalid_mode(mode, valid) -> InvalidModeError:
    """V002: Invalid mode."""
    names = ", ".join(str(v) for v in valid)
    return InvalidModeError(Diagnostic(
        code="V002",
        message=f"invalid mode {mode!r}, expected one of: {names}",
    ))


def error_deleted_object(uid: str) -> DeletedObjectError:
    """V003: Use after delete."""
    return DeletedObjectError(Diagnostic(
        code="V003",
        message=f"object {uid or '<released>'} has been deleted",
    ))


# --- Equation syntax errors ---

def error_invalid_character(char: str, source: str, column: int) -> InvalidCharacterError:
    """E001: Invalid character."""
    return InvalidCharacterError(Diagnostic(
        code="E001",
        message=f"invalid character '{char}'",
        source=source,
        column=column,
    ))


def error_invalid_negation(detail: str, source: str, column: int) -> InvalidNegationError:
    """E002: Invalid negation."""
    return InvalidNegationError(Diagnostic(
        code="E002",
        message=f"invalid negation: {detail}",
        source=source,
        column=column,
    ))


def error_invalid_ending(token: str, source: str) -> InvalidEndingError:
    """E003: Invalid equation ending."""
    return InvalidEndingError(Diagnostic(
        code="E003",
        message=f"equation cannot end with '{token}'",
        source=source,
        column=len(source) - 1,
    ))


def error_invalid_junction(left: str, right: str, source: str, column: int) -> InvalidJunctionError:
    """E004: Invalid junction between two tokens."""
    if left:
        message = f"'{right}' cannot follow '{left}'"
    else:
        message = f"equation cannot start with '{right}'"
    return InvalidJunctionError(Diagnostic(
        code="E004",
        message=message,
        source=source,
        column=column,
    ))


def error_unbalanced_grouping(opening: int, closing: int, source: str,
                              column: Optional[int] = None) -> UnbalancedGroupingError:
    """E005: Unbalanced grouping."""
    if column is not None:
        message = "closing group ')' has no matching '('"
    else:
        message = f"unbalanced grouping: {opening} '(' against {closing} ')'"
    return UnbalancedGroupingError(Diagnostic(
        code="E005",
        message=message,
        source=source,
        column=column,
    ))


# --- Interpretation errors ---

def error_unbound_name(name: str) -> UnboundNameError:
    """E101: Unbound name."""
    return UnboundNameError(Diagnostic(
        code="E101",
        message=f"no voxel set is bound to '{name}'",
    ))


def error_malformed_ast(layer) -> MalformedAstError:
    """E102: Malformed AST level."""
    return MalformedAstError(Diagnostic(
        code="E102",
        message=f"invalid sub-equation of length {len(layer)}: {layer!r}",
    ))


def error_unknown_operation(token) -> UnknownOperationError:
    """E103: Unknown operation."""
    return UnknownOperationError(Diagnostic(
        code="E103",
        message=f"unknown set operation {token!r}",
    ))
