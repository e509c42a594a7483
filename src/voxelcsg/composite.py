"""
Constructive solid geometry over named voxel sets.

A ``CompositeVoxelCollection`` binds names to voxel sets, takes an
equation over those names and evaluates it.  Every binary operation is
memoized for the duration of one pass in the virtual cache, keyed by the
operand ids and the operator, so repeated sub-expressions are computed
once.  Cached results are owned by the collection and released when the
next pass starts or the bindings change.  Bound voxel sets belong to the
caller and are never released here.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .bbox import JointBoundingBox, Voxel
from .errors import error_malformed_ast, error_unbound_name, error_unknown_operation
from .registry import IdentifierRegistry
from .setops import (
    BINARY_OPERATORS, INTERSECTION_OP, NULL_SET, SUBTRACTION_OP, SYMM_DIFF_OP,
    UNION_OP, UNIVERSAL_SET, SetOperationsEquation,
)
from .setops.tokens import INDENTATION
from .voxels import DEFAULT_ORIGIN, VoxelSet, find_point, subtract_origin, unique_voxels

logger = logging.getLogger(__name__)

CacheKey = Union[str, Tuple[str, str, str]]

COMMUTATIVE_OPERATORS = (UNION_OP, INTERSECTION_OP)


def overlap_region(first: VoxelSet, second: VoxelSet) -> JointBoundingBox:
    """Every pairwise overlap of the two sets' slice boxes."""
    boxes = []
    for box1 in first.joint_bounding_box.bounding_boxes:
        for box2 in second.joint_bounding_box.bounding_boxes:
            overlap = box1.intersect(box2)
            if overlap is not None:
                boxes.append(overlap)
    return JointBoundingBox(boxes)


def partition(source: VoxelSet, other: VoxelSet,
              region: JointBoundingBox) -> Tuple[List[Voxel], List[Voxel]]:
    """
    Split the voxels of ``source`` into those also in ``other`` and the rest.

    The overlap region rules most voxels out before the lookup in
    ``other`` is needed.
    """
    matched: List[Voxel] = []
    unmatched: List[Voxel] = []
    for voxel in source.get_fill_voxels():
        if region.is_inside(voxel) and find_point(other, voxel) != -1:
            matched.append(voxel)
        else:
            unmatched.append(voxel)
    return matched, unmatched


class CompositeVoxelCollection(VoxelSet):
    """
    A voxel set computed from an equation over other voxel sets.

    Usage:
        composite = CompositeVoxelCollection(registry, (0, 0, 0), {"a": cube1, "b": cube2})
        composite.set_equation("a ∪ b").interpret_ast()
        composite.get_fill_voxels()
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 bindings: Optional[Mapping[str, VoxelSet]] = None):
        self.bindings: Dict[str, VoxelSet] = dict(bindings or {})
        self.equation = SetOperationsEquation("")
        self.virtual_cache: Dict[CacheKey, VoxelSet] = {}
        initial = unique_voxels(v for vs in self.bindings.values() for v in vs.get_fill_voxels())
        super().__init__(registry, origin, subtract_origin(initial, origin))
        self.reset_virtual_cache()

    def _release_cache(self) -> None:
        for result in self.virtual_cache.values():
            result.delete()
        self.virtual_cache = {}

    def reset_virtual_cache(self) -> "CompositeVoxelCollection":
        """Release cached results and rebuild Ω and ∅ from the bindings."""
        self._check_alive()
        self._release_cache()
        universe = unique_voxels(v for vs in self.bindings.values() for v in vs.get_fill_voxels())
        self.virtual_cache[UNIVERSAL_SET] = VoxelSet(self.registry, DEFAULT_ORIGIN, universe)
        self.virtual_cache[NULL_SET] = VoxelSet(self.registry, DEFAULT_ORIGIN, [])
        return self

    def change_names(self, bindings: Mapping[str, VoxelSet]) -> "CompositeVoxelCollection":
        """Rebind the equation's names; the cache is rebuilt."""
        self._check_alive()
        self.bindings = dict(bindings)
        return self.reset_virtual_cache()

    def set_equation(self, equation: str) -> "CompositeVoxelCollection":
        """Validate ``equation`` and build its AST."""
        self._check_alive()
        self.equation.change_equation(equation).validate_equation().generate_ast()
        return self

    def _resolve(self, token, depth: int) -> VoxelSet:
        if isinstance(token, list):
            return self._solve(token, depth + 1)
        if token in (UNIVERSAL_SET, NULL_SET):
            return self.virtual_cache[token]
        if token in self.bindings:
            return self.bindings[token]
        raise error_unbound_name(token)

    def _solve(self, layer: list, depth: int) -> VoxelSet:
        if len(layer) not in (1, 3):
            raise error_malformed_ast(layer)
        left = self._resolve(layer[0], depth)
        if len(layer) == 1:
            return left
        op = layer[1]
        if not isinstance(op, str) or op not in BINARY_OPERATORS:
            raise error_unknown_operation(op)
        right = self._resolve(layer[2], depth)
        return self._apply(left, op, right, depth)

    def _store(self, key: CacheKey, voxels: List[Voxel]) -> VoxelSet:
        result = VoxelSet(self.registry, DEFAULT_ORIGIN, voxels)
        self.virtual_cache[key] = result
        return result

    def _apply(self, left: VoxelSet, op: str, right: VoxelSet, depth: int) -> VoxelSet:
        indent = INDENTATION * depth
        key = (left.id, op, right.id)
        if key in self.virtual_cache:
            logger.debug("%scache hit %s %s %s", indent, left.id, op, right.id)
            return self.virtual_cache[key]
        if op in COMMUTATIVE_OPERATORS:
            swapped = (right.id, op, left.id)
            if swapped in self.virtual_cache:
                logger.debug("%scache hit %s %s %s", indent, right.id, op, left.id)
                return self.virtual_cache[swapped]

        if left is right:
            if op in COMMUTATIVE_OPERATORS:
                return self._store(key, left.get_fill_voxels())
            return self._store(key, [])

        region = overlap_region(left, right)
        matched, left_only = partition(left, right, region)
        _, right_only = partition(right, left, region)

        if op == INTERSECTION_OP:
            voxels = matched
        elif op == UNION_OP:
            voxels = left_only + right_only + matched
        elif op == SUBTRACTION_OP:
            voxels = left_only
        elif op == SYMM_DIFF_OP:
            voxels = left_only + right_only
        else:
            raise error_unknown_operation(op)

        logger.debug("%s%d %s %d -> %d voxels (%d overlap boxes)", indent,
                     len(left), op, len(right), len(voxels), len(region))
        return self._store(key, voxels)

    def interpret_ast(self) -> "CompositeVoxelCollection":
        """Evaluate the equation; the result becomes this collection's fill."""
        self._check_alive()
        self.reset_virtual_cache()
        result = self._solve(self.equation.get_ast(), 0)
        self.set_fill_voxels(subtract_origin(result.get_fill_voxels(), self.get_origin()))
        return self

    def delete(self) -> None:
        """Release the cache and this collection; bound sets are left alone."""
        self._check_alive()
        self._release_cache()
        self.bindings = {}
        super().delete()


__all__ = ["CompositeVoxelCollection", "find_point", "overlap_region", "partition"]
