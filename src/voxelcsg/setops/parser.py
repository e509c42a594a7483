"""
Builds the precedence tree of a tokenized set-operations equation.

Precedence (higher binds tighter)::

    ( )      3
    !        2
    ⊕        1
    - ∩ ∪    0

Groups are reduced innermost first.  Inside a group without parentheses
the leftmost operator of the highest precedence is collapsed first, so
equal precedence evaluates left to right.

Negations are removed while building:

    !x          ->  Ω - x
    !Ω, !∅      ->  ∅, Ω
    !(l ∪ r)    ->  !l ∩ !r
    !(l ∩ r)    ->  !l ∪ !r
    !(l - r)    ->  !l ∪ r
    !( ..⊕.. )  ->  Ω - ( ..⊕.. )

Set identities are applied whenever two operands are combined, so
``a∩a`` builds to ``a`` and ``a-Ω`` to ``∅``.
"""

import logging
from typing import List, Sequence, Union

from .ast import AST, BinOp, Leaf, Negated, Node, NULL, UNIVERSAL, flatten, is_null, is_universal, to_string
from .tokens import (
    BINARY_OPERATORS, CLOSE_PER, INDENTATION, INTERSECTION_OP, NEGATION_OP,
    OPEN_PER, PRECEDENCE, SUBTRACTION_OP, SYMM_DIFF_OP, UNION_OP, UNIVERSAL_SET,
)
from ..errors import error_malformed_ast, error_unbalanced_grouping

logger = logging.getLogger(__name__)

Item = Union[Node, str]


def combine(left: Node, op: str, right: Node) -> Node:
    """Join two operands, applying the set identities where one fits."""
    if left == right:
        if op in (INTERSECTION_OP, UNION_OP):
            return left
        return NULL

    if op == INTERSECTION_OP:
        if is_null(left) or is_null(right):
            return NULL
        if is_universal(left):
            return right
        if is_universal(right):
            return left
    elif op == UNION_OP:
        if is_universal(left) or is_universal(right):
            return UNIVERSAL
        if is_null(left):
            return right
        if is_null(right):
            return left
    elif op == SYMM_DIFF_OP:
        if is_null(left):
            return right
        if is_null(right):
            return left
    elif op == SUBTRACTION_OP:
        if is_null(left) or is_universal(right):
            return NULL
        if is_null(right):
            return left
    return BinOp(op, left, right)


def negate(node: Node) -> Node:
    """Push a negation down through ``node``."""
    if isinstance(node, Leaf):
        if node.is_universal:
            return NULL
        if node.is_null:
            return UNIVERSAL
        return BinOp(SUBTRACTION_OP, UNIVERSAL, node)
    if node.op == UNION_OP:
        return combine(negate(node.left), INTERSECTION_OP, negate(node.right))
    if node.op == INTERSECTION_OP:
        return combine(negate(node.left), UNION_OP, negate(node.right))
    if node.op == SUBTRACTION_OP:
        return combine(negate(node.left), UNION_OP, node.right)
    return combine(UNIVERSAL, SUBTRACTION_OP, node)


class AstBuilder:
    """
    Turns the token list from ``validate_equation`` into a tree.

    Usage:
        builder = AstBuilder(["a", "∪", "!(", "b", "∩", "c", ")"])
        builder.build()    # ['a', '∪', [['Ω', '-', 'b'], '∪', ['Ω', '-', 'c']]]
    """

    def __init__(self, tokens: Sequence[str]):
        self.tokens = list(tokens)

    def build(self) -> AST:
        if not self.tokens:
            return []
        node = self._build_group(self.tokens, 0)
        logger.debug("AST for %s: %s", "".join(self.tokens), to_string(node))
        return flatten(node)

    def _indent(self, depth: int) -> str:
        return INDENTATION * depth

    def _matching_close(self, tokens: List[str], start: int) -> int:
        depth = 0
        for i in range(start, len(tokens)):
            if tokens[i].endswith(OPEN_PER):
                depth += 1
            elif tokens[i] == CLOSE_PER:
                depth -= 1
                if depth == 0:
                    return i
        opening = sum(1 for t in tokens if t.endswith(OPEN_PER))
        closing = tokens.count(CLOSE_PER)
        raise error_unbalanced_grouping(opening, closing, "".join(tokens))

    def _operand(self, token: str) -> Node:
        name = token.lstrip(NEGATION_OP)
        negations = len(token) - len(name)
        node = Leaf(name)
        if negations % 2:
            return negate(node)
        return node

    def _build_group(self, tokens: List[str], depth: int) -> Node:
        logger.debug("%sgroup: %s", self._indent(depth), "".join(tokens))
        items: List[Item] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.endswith(OPEN_PER):
                close = self._matching_close(tokens, i)
                inner_tokens = tokens[i + 1:close]
                inner = self._build_group(inner_tokens, depth + 1)
                if (len(token) - 1) % 2:
                    inner = self._resolve_negation(
                        Negated(inner, SYMM_DIFF_OP in inner_tokens), depth + 1)
                items.append(inner)
                i = close + 1
            elif token == CLOSE_PER:
                opening = sum(1 for t in tokens if t.endswith(OPEN_PER))
                raise error_unbalanced_grouping(opening, tokens.count(CLOSE_PER), "".join(tokens))
            elif token in BINARY_OPERATORS:
                items.append(token)
                i += 1
            else:
                items.append(self._operand(token))
                i += 1
        return self._reduce(items, depth)

    def _resolve_negation(self, node: Negated, depth: int) -> Node:
        if node.has_symmetric_difference:
            logger.debug("%snegated group holds %s, rewriting as %s-(...)",
                         self._indent(depth), SYMM_DIFF_OP, UNIVERSAL_SET)
            return combine(UNIVERSAL, SUBTRACTION_OP, node.operand)
        resolved = negate(node.operand)
        logger.debug("%sdistributed negation: %s -> %s", self._indent(depth),
                     to_string(node.operand), to_string(resolved))
        return resolved

    def _check_sequence(self, items: List[Item]) -> None:
        if len(items) % 2 == 0:
            raise error_malformed_ast(items)
        for index, item in enumerate(items):
            is_operator = isinstance(item, str)
            if is_operator != (index % 2 == 1):
                raise error_malformed_ast(items)

    def _reduce(self, items: List[Item], depth: int) -> Node:
        """Collapse operand/operator/operand runs by precedence."""
        self._check_sequence(items)
        while len(items) > 1:
            best = 1
            for index in range(3, len(items), 2):
                if PRECEDENCE[items[index]] > PRECEDENCE[items[best]]:
                    best = index
            left, op, right = items[best - 1:best + 2]
            node = combine(left, op, right)
            logger.debug("%scollapse %s %s %s -> %s", self._indent(depth),
                         to_string(left), op, to_string(right), to_string(node))
            items[best - 1:best + 2] = [node]
        return items[0]


def generate_ast(tokens: Sequence[str]) -> AST:
    """
    Build the nested list AST for a token list.

    >>> generate_ast(["a", "∩", "a"])
    ['a']
    >>> generate_ast(["a", "∪", "b", "⊕", "c"])
    ['a', '∪', ['b', '⊕', 'c']]
    """
    return AstBuilder(tokens).build()

