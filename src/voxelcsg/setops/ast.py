"""
AST nodes for set-operations equations.

The builder works on tagged nodes; ``flatten`` turns the finished tree into
the nested list form consumed by the interpreter::

    Leaf("a")                              -> ["a"]
    BinOp("∪", Leaf("a"), Leaf("b"))       -> ["a", "∪", "b"]
    BinOp("∩", BinOp("∪", a, b), Leaf("c")) -> [["a", "∪", "b"], "∩", "c"]

``Negated`` only exists while a tree is being built.
"""

from dataclasses import dataclass
from typing import List, Union

from .tokens import NULL_SET, UNIVERSAL_SET


@dataclass(frozen=True)
class Leaf:
    """A variable name, Ω or ∅."""
    name: str

    @property
    def is_universal(self) -> bool:
        return self.name == UNIVERSAL_SET

    @property
    def is_null(self) -> bool:
        return self.name == NULL_SET


@dataclass(frozen=True)
class Negated:
    """A negated operand or group awaiting distribution."""
    operand: "Node"
    has_symmetric_difference: bool = False


@dataclass(frozen=True)
class BinOp:
    """A binary set operation."""
    op: str
    left: "Node"
    right: "Node"


Node = Union[Leaf, Negated, BinOp]
AST = List[Union[str, "AST"]]

UNIVERSAL = Leaf(UNIVERSAL_SET)
NULL = Leaf(NULL_SET)


def is_universal(node: Node) -> bool:
    return isinstance(node, Leaf) and node.is_universal


def is_null(node: Node) -> bool:
    return isinstance(node, Leaf) and node.is_null


def _flatten_inner(node: Node):
    if isinstance(node, Leaf):
        return node.name
    if isinstance(node, BinOp):
        return [_flatten_inner(node.left), node.op, _flatten_inner(node.right)]
    raise TypeError(f"cannot flatten unresolved node {node!r}")


def flatten(node: Node) -> AST:
    """Nested list form of a finished tree; a lone operand becomes ``[name]``."""
    if isinstance(node, Leaf):
        return [node.name]
    return _flatten_inner(node)


def to_string(node: Node) -> str:
    """Render a tree back to equation text, fully parenthesized."""
    if isinstance(node, Leaf):
        return node.name
    if isinstance(node, Negated):
        return f"!({to_string(node.operand)})"
    return f"({to_string(node.left)}{node.op}{to_string(node.right)})"
