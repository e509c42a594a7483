"""
voxelcsg: voxel shapes combined with set-operation equations.

This package provides:
- Bounding box algebra: construction, intersection, corner correction
- Voxel sets with sorted slice directories and O(log n) point lookup
- Lines, polygon layers and extrusions
- A set-operations equation language and a CSG interpreter over it

Usage:
    from voxelcsg import IdentifierRegistry, Layer, CompositeVoxelCollection

    registry = IdentifierRegistry()
    a = Layer(registry, (0, 0, 0), [(0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0)])
    b = Layer(registry, (2, 2, 0), [(0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0)])
    a.generate_edges().fill_polygon()
    b.generate_edges().fill_polygon()

    both = CompositeVoxelCollection(registry, (0, 0, 0), {"a": a, "b": b})
    both.set_equation("a - b").interpret_ast()
"""

import logging

from .errors import (
    Diagnostic,
    VoxelError,
    EmptyInputError,
    InvalidModeError,
    DeletedObjectError,
    EquationError,
    InvalidCharacterError,
    InvalidNegationError,
    InvalidEndingError,
    InvalidJunctionError,
    UnbalancedGroupingError,
    InterpretationError,
    UnboundNameError,
    MalformedAstError,
    UnknownOperationError,
)
from .registry import IdentifierRegistry
from .bbox import (
    Corner,
    BoundingBox,
    BoundingBoxPayload,
    JointBoundingBox,
    JointBoxMode,
    intersect,
    correct,
    is_inside,
    compile_corners,
)
from .voxels import (
    Voxel,
    DEFAULT_ORIGIN,
    VoxelSet,
    add_origin,
    graph3d_parametric,
    sort_fill_voxels,
    find_point,
)
from .shapes import Line, Layer
from .setops import SetOperationsEquation, validate_equation, generate_ast, get_symbols, get_precedence
from .composite import CompositeVoxelCollection
from .extrude import (
    LayerVectorExtrude,
    LayerConvexExtrude,
    EdgeDirectoryMode,
    convex_hull,
    point_orientation,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Errors
    "Diagnostic",
    "VoxelError",
    "EmptyInputError",
    "InvalidModeError",
    "DeletedObjectError",
    "EquationError",
    "InvalidCharacterError",
    "InvalidNegationError",
    "InvalidEndingError",
    "InvalidJunctionError",
    "UnbalancedGroupingError",
    "InterpretationError",
    "UnboundNameError",
    "MalformedAstError",
    "UnknownOperationError",
    # Registry
    "IdentifierRegistry",
    # Bounding boxes
    "Corner",
    "BoundingBox",
    "BoundingBoxPayload",
    "JointBoundingBox",
    "JointBoxMode",
    "intersect",
    "correct",
    "is_inside",
    "compile_corners",
    # Voxel sets
    "Voxel",
    "DEFAULT_ORIGIN",
    "VoxelSet",
    "add_origin",
    "graph3d_parametric",
    "sort_fill_voxels",
    "find_point",
    # Shapes
    "Line",
    "Layer",
    # Equations
    "SetOperationsEquation",
    "validate_equation",
    "generate_ast",
    "get_symbols",
    "get_precedence",
    # CSG
    "CompositeVoxelCollection",
    # Extrusions
    "LayerVectorExtrude",
    "LayerConvexExtrude",
    "EdgeDirectoryMode",
    "convex_hull",
    "point_orientation",
]
