"""
Symbols of the set-operations equation language.

    a∪b        union
    a∩b        intersection
    a-b        subtraction
    a⊕b        symmetric difference
    !a         negation (complement against Ω)
    Ω, ∅       the universal and the null set
    ( )        grouping

Variable names are runs of ASCII letters and digits.
"""

import re
from enum import Enum, auto
from typing import Dict


UNIVERSAL_SET = "Ω"     # U+03A9
NULL_SET = "∅"          # U+2205
UNION_OP = "∪"          # U+222A, not Latin U
INTERSECTION_OP = "∩"   # U+2229
SUBTRACTION_OP = "-"    # U+002D
SYMM_DIFF_OP = "⊕"      # U+2295
NEGATION_OP = "!"
OPEN_PER = "("
CLOSE_PER = ")"

# Indent unit used when logging AST construction.
INDENTATION = "    "

SYMBOLS: Dict[str, str] = {
    "UNIVERSAL_SET": UNIVERSAL_SET,
    "NULL_SET": NULL_SET,
    "UNION_OP": UNION_OP,
    "INTERSECTION_OP": INTERSECTION_OP,
    "SUBTRACTION_OP": SUBTRACTION_OP,
    "SYMM_DIFF_OP": SYMM_DIFF_OP,
    "NEGATION_OP": NEGATION_OP,
    "OPEN_PER": OPEN_PER,
    "CLOSE_PER": CLOSE_PER,
    "INDENTATION": INDENTATION,
}

# Higher binds tighter.
PRECEDENCE: Dict[str, int] = {
    OPEN_PER: 3,
    CLOSE_PER: 3,
    NEGATION_OP: 2,
    SYMM_DIFF_OP: 1,
    SUBTRACTION_OP: 0,
    INTERSECTION_OP: 0,
    UNION_OP: 0,
}

BINARY_OPERATORS = (UNION_OP, INTERSECTION_OP, SUBTRACTION_OP, SYMM_DIFF_OP)
CONSTANTS = (UNIVERSAL_SET, NULL_SET)

NAME_RE = re.compile(r"[A-Za-z0-9]+")
VALID_CHAR_RE = re.compile(r"[A-Za-z0-9Ω∅∪∩⊕!()\-]")

# Splits a validated equation into tokens; negations stay glued to the
# operand or opening group they apply to.
CONVERSION_RE = re.compile(r"!*\(|\)|!*[A-Za-z0-9]+|!*[Ω∅]|[∩⊕∪\-]")


class TokenClass(Enum):
    """Coarse token classes used for junction checks."""
    OPERAND = auto()    # name, Ω or ∅
    OPERATOR = auto()   # ∪ ∩ - ⊕
    NEGATION = auto()   # !
    OPEN = auto()       # (
    CLOSE = auto()      # )


def classify(token: str) -> TokenClass:
    """Class of a single raw token (no glued negation)."""
    if token in BINARY_OPERATORS:
        return TokenClass.OPERATOR
    if token == NEGATION_OP:
        return TokenClass.NEGATION
    if token == OPEN_PER:
        return TokenClass.OPEN
    if token == CLOSE_PER:
        return TokenClass.CLOSE
    return TokenClass.OPERAND


def is_constant(token: str) -> bool:
    return token in CONSTANTS


def get_symbols() -> Dict[str, str]:
    """A copy of the symbol table, keyed by symbol name."""
    return dict(SYMBOLS)


def get_precedence() -> Dict[str, int]:
    """A copy of the precedence table, keyed by symbol."""
    return dict(PRECEDENCE)
