"""
Set-operations equations.

This package provides:
- Symbol and precedence tables
- validate_equation: syntax checks, simplification and tokenization
- generate_ast: precedence tree with negations distributed
- SetOperationsEquation: stateful wrapper used by composite collections

Usage:
    from voxelcsg.setops import validate_equation, generate_ast

    tokens = validate_equation("!(a ∪ b) - c")
    ast = generate_ast(tokens)
"""

from .tokens import (
    UNIVERSAL_SET,
    NULL_SET,
    UNION_OP,
    INTERSECTION_OP,
    SUBTRACTION_OP,
    SYMM_DIFF_OP,
    NEGATION_OP,
    OPEN_PER,
    CLOSE_PER,
    BINARY_OPERATORS,
    get_symbols,
    get_precedence,
)
from .lexer import validate_equation, simplify, tokenize
from .ast import Leaf, Negated, BinOp, flatten
from .parser import AstBuilder, generate_ast
from .equation import SetOperationsEquation

__all__ = [
    "UNIVERSAL_SET",
    "NULL_SET",
    "UNION_OP",
    "INTERSECTION_OP",
    "SUBTRACTION_OP",
    "SYMM_DIFF_OP",
    "NEGATION_OP",
    "OPEN_PER",
    "CLOSE_PER",
    "BINARY_OPERATORS",
    "get_symbols",
    "get_precedence",
    "validate_equation",
    "simplify",
    "tokenize",
    "Leaf",
    "Negated",
    "BinOp",
    "flatten",
    "AstBuilder",
    "generate_ast",
    "SetOperationsEquation",
]
