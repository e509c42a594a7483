"""Stateful wrapper around the equation validator and AST builder."""

import copy
import logging
from typing import List, Optional

from .ast import AST
from .lexer import validate_equation
from .parser import generate_ast

logger = logging.getLogger(__name__)


class SetOperationsEquation:
    """
    An equation string with its validated tokens and AST.

    Usage:
        eq = SetOperationsEquation("a ∪ (b - c)")
        eq.validate_equation().generate_ast()
        eq.get_ast()    # ['a', '∪', ['b', '-', 'c']]
    """

    def __init__(self, equation: str = ""):
        self.equation = equation
        self.tokens: Optional[List[str]] = None
        self.ast: AST = []

    def change_equation(self, equation: str) -> "SetOperationsEquation":
        """Replace the equation; tokens and AST are discarded."""
        self.equation = equation
        self.tokens = None
        self.ast = []
        return self

    def validate_equation(self) -> "SetOperationsEquation":
        self.tokens = validate_equation(self.equation)
        return self

    def generate_ast(self) -> "SetOperationsEquation":
        """Build the AST, validating first if that has not happened yet."""
        if self.tokens is None:
            self.validate_equation()
        self.ast = generate_ast(self.tokens)
        logger.debug("equation %r -> %r", self.equation, self.ast)
        return self

    def get_ast(self) -> AST:
        """A copy of the AST that callers may modify freely."""
        return copy.deepcopy(self.ast)

    def __repr__(self) -> str:
        return f"SetOperationsEquation({self.equation!r})"
