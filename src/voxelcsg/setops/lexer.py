"""
Validation and tokenization of set-operations equations.

``validate_equation`` runs the syntax checks in a fixed order, so the
error raised for a string with several problems is predictable:

1. characters outside the alphabet       InvalidCharacterError
2. ``!`` directly before ``)``           InvalidNegationError
3. unmatched ``(`` or ``)``              UnbalancedGroupingError
4. trailing operator, ``!`` or ``(``     InvalidEndingError
5. ``!`` directly before ``-`` or ``⊕``  InvalidNegationError
6. tokens that may not be adjacent       InvalidJunctionError

A valid equation is then simplified (double negations, De Morgan on
negated ``∪``/``∩``, negated constants, a redundant outer group) and
split into tokens.
"""

import re
from typing import List, Optional, Tuple

from .tokens import (
    CLOSE_PER, CONVERSION_RE, INTERSECTION_OP, NEGATION_OP, NULL_SET, OPEN_PER,
    SUBTRACTION_OP, SYMM_DIFF_OP, UNION_OP, UNIVERSAL_SET, VALID_CHAR_RE,
    TokenClass, classify,
)
from ..errors import (
    error_invalid_character,
    error_invalid_ending,
    error_invalid_junction,
    error_invalid_negation,
    error_unbalanced_grouping,
)

# Names as one piece, every other symbol on its own.
RAW_TOKEN_RE = re.compile(r"[A-Za-z0-9]+|.")

INVALID_ENDINGS = (OPEN_PER, NEGATION_OP, INTERSECTION_OP, SYMM_DIFF_OP, UNION_OP, SUBTRACTION_OP)

# Which token classes may follow which; None is the start of the equation.
ALLOWED_SUCCESSORS = {
    None: {TokenClass.OPERAND, TokenClass.NEGATION, TokenClass.OPEN},
    TokenClass.OPERAND: {TokenClass.OPERATOR, TokenClass.CLOSE},
    TokenClass.OPERATOR: {TokenClass.OPERAND, TokenClass.NEGATION, TokenClass.OPEN},
    TokenClass.NEGATION: {TokenClass.OPERAND, TokenClass.NEGATION, TokenClass.OPEN},
    TokenClass.OPEN: {TokenClass.OPERAND, TokenClass.NEGATION, TokenClass.OPEN},
    TokenClass.CLOSE: {TokenClass.OPERATOR, TokenClass.CLOSE},
}

# Applied in order.
SIMPLIFICATIONS = (
    (NEGATION_OP + NEGATION_OP, ""),
    (NEGATION_OP + INTERSECTION_OP, UNION_OP),
    (NEGATION_OP + UNION_OP, INTERSECTION_OP),
    (NEGATION_OP + UNIVERSAL_SET, NULL_SET),
    (NEGATION_OP + NULL_SET, UNIVERSAL_SET),
)


def strip_whitespace(equation: str) -> str:
    return "".join(equation.split())


def _check_characters(source: str) -> None:
    for column, char in enumerate(source):
        if not VALID_CHAR_RE.fullmatch(char):
            raise error_invalid_character(char, source, column)


def _check_negated_close(source: str) -> None:
    column = source.find(NEGATION_OP + CLOSE_PER)
    if column != -1:
        raise error_invalid_negation(
            f"cannot negate closing group '{CLOSE_PER}'", source, column)


def _check_grouping(source: str) -> None:
    opening = source.count(OPEN_PER)
    closing = source.count(CLOSE_PER)
    depth = 0
    for column, char in enumerate(source):
        if char == OPEN_PER:
            depth += 1
        elif char == CLOSE_PER:
            depth -= 1
            if depth < 0:
                raise error_unbalanced_grouping(opening, closing, source, column)
    if opening != closing:
        raise error_unbalanced_grouping(opening, closing, source)


def _check_ending(source: str) -> None:
    if source and source[-1] in INVALID_ENDINGS:
        raise error_invalid_ending(source[-1], source)


def _check_negated_operators(source: str) -> None:
    for op in (SUBTRACTION_OP, SYMM_DIFF_OP):
        column = source.find(NEGATION_OP + op)
        if column != -1:
            raise error_invalid_negation(
                f"cannot directly negate '{op}', negate an enclosing group instead",
                source, column)


def _raw_pieces(source: str) -> List[Tuple[str, TokenClass, int]]:
    """
    Split ``source`` into (text, class, column) pieces.

    A ``!`` directly before ``∪`` or ``∩`` is part of that operator; it is
    rewritten away during simplification.
    """
    pieces: List[Tuple[str, TokenClass, int]] = []
    for match in RAW_TOKEN_RE.finditer(source):
        text = match.group()
        kind = classify(text)
        if kind is TokenClass.OPERATOR and pieces and pieces[-1][1] is TokenClass.NEGATION:
            prev_text, _, prev_col = pieces.pop()
            pieces.append((prev_text + text, kind, prev_col))
            continue
        pieces.append((text, kind, match.start()))
    return pieces


def _check_junctions(source: str) -> None:
    previous: Optional[TokenClass] = None
    previous_text = ""
    for text, kind, column in _raw_pieces(source):
        if kind not in ALLOWED_SUCCESSORS[previous]:
            raise error_invalid_junction(previous_text, text, source, column)
        previous = kind
        previous_text = text


def simplify(source: str) -> str:
    """Apply the textual simplifications to a validated equation."""
    simplified = source
    for pattern, replacement in SIMPLIFICATIONS:
        simplified = simplified.replace(pattern, replacement)

    if source.count(OPEN_PER) == 1 and source.count(CLOSE_PER) == 1 and \
            simplified.startswith(OPEN_PER) and simplified.endswith(CLOSE_PER):
        simplified = simplified[1:-1]
    return simplified


def tokenize(source: str) -> List[str]:
    """Split a simplified equation into AST builder tokens."""
    return CONVERSION_RE.findall(source)


def validate_equation(equation: str) -> List[str]:
    """
    Check an equation and return its tokens.

    Raises an ``EquationError`` subclass describing the first problem
    found.

    >>> validate_equation("!!(a ∪ b)")
    ['a', '∪', 'b']
    """
    source = strip_whitespace(equation)
    _check_characters(source)
    _check_negated_close(source)
    _check_grouping(source)
    _check_ending(source)
    _check_negated_operators(source)
    _check_junctions(source)
    return tokenize(simplify(source))
