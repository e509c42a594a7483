"""
Primitive voxel shapes: lines and polygon layers.

Vertices and endpoints are stored relative to the shape's origin, the same
as fill voxels.  Accessors add the origin back.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .bbox import Voxel
from .errors import error_empty_input
from .registry import IdentifierRegistry
from .voxels import (DEFAULT_ORIGIN, VoxelSet, add_origin, as_voxel,
                     graph3d_parametric, subtract_origin, unique_voxels)

logger = logging.getLogger(__name__)


class Line(VoxelSet):
    """
    A rasterized segment between two endpoints.

    The fill voxels are the two endpoints until ``generate_line`` is called.
    With ``double_pass`` the line also traces end to start and keeps the
    voxels the first pass missed, which makes the result independent of
    endpoint order.
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 endpoints: Sequence[Sequence[int]] = (), double_pass: bool = False):
        if len(endpoints) != 2:
            raise error_empty_input("Line", 2)
        self._endpoints: List[Voxel] = [as_voxel(p) for p in endpoints]
        self.double_pass = double_pass
        super().__init__(registry, origin, self._endpoints)

    def generate_line(self) -> "Line":
        """Replace the fill voxels with the rasterized path, start first."""
        self._check_alive()
        start, end = self._endpoints
        voxels = graph3d_parametric(start, end)
        if self.double_pass:
            voxels = unique_voxels(voxels + graph3d_parametric(end, start))
        return self.set_fill_voxels(voxels)

    def change_endpoints(self, endpoints: Sequence[Sequence[int]]) -> "Line":
        """New endpoints; the fill voxels go back to just the endpoints."""
        self._check_alive()
        if len(endpoints) != 2:
            raise error_empty_input("Line", 2)
        self._endpoints = [as_voxel(p) for p in endpoints]
        return self.set_fill_voxels(self._endpoints)

    def get_vertice_voxels(self) -> List[Voxel]:
        self._check_alive()
        return add_origin(self._endpoints, self.get_origin())


class Layer(VoxelSet):
    """
    A closed polygon through an ordered list of vertices.

    ``generate_edges`` traces the outline, last vertex wrapping back to the
    first, and ``fill_polygon`` fills it slice by slice.

    Usage:
        square = Layer(registry, (0, 0, 0), [(0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0)])
        square.generate_edges().fill_polygon()
        len(square)   # 25
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 vertices: Sequence[Sequence[int]] = ()):
        if len(vertices) == 0:
            raise error_empty_input("Layer")
        self._vertices: List[Voxel] = [as_voxel(v) for v in vertices]
        self.edge_directory: Dict[str, List[Voxel]] = {}
        super().__init__(registry, origin, self._vertices)

    def change_vertices(self, vertices: Sequence[Sequence[int]]) -> "Layer":
        """New vertices; clears the edges and resets the fill to the vertices."""
        self._check_alive()
        if len(vertices) == 0:
            raise error_empty_input("Layer")
        self._vertices = [as_voxel(v) for v in vertices]
        self.edge_directory = {}
        return self.set_fill_voxels(self._vertices)

    def generate_edges(self) -> "Layer":
        """
        Trace a line between every pair of consecutive vertices.

        Each path, endpoints included, is stored under ``"V{i}V{j}"``.  The
        fill voxels become the edge interiors followed by the vertices,
        without repeats.
        """
        self._check_alive()
        self.edge_directory = {}
        fill: List[Voxel] = []
        count = len(self._vertices)
        for i in range(count):
            j = (i + 1) % count
            path = graph3d_parametric(self._vertices[i], self._vertices[j])
            self.edge_directory[f"V{i}V{j}"] = path
            fill.extend(path[1:-1])
        fill.extend(self._vertices)
        return self.set_fill_voxels(unique_voxels(fill))

    def fill_polygon(self) -> "Layer":
        """
        Fill the shape from its current slices.

        Every slice of the sorted directory is traced as a polygon of its
        own; a slice of outline voxels sorted along the next axis traces
        into the solid span between them.
        """
        self._check_alive()
        origin = self.get_origin()
        fill: List[Voxel] = []
        for bucket in self.sorted_directory.values():
            if not bucket:
                continue
            scratch = Layer(self.registry, DEFAULT_ORIGIN, subtract_origin(bucket, origin))
            fill.extend(scratch.generate_edges()._fill_voxels)
            scratch.delete()
        logger.debug("%s: filled %d slices into %d voxels", self.id,
                     len(self.sorted_directory), len(fill))
        return self.set_fill_voxels(unique_voxels(fill))

    def get_edge_directory(self) -> Dict[str, List[Voxel]]:
        """Edge paths keyed by ``"V{i}V{j}"``, origin added."""
        self._check_alive()
        origin = self.get_origin()
        return {key: add_origin(path, origin) for key, path in self.edge_directory.items()}

    def get_edge_voxels(self) -> List[Voxel]:
        """Every edge path concatenated, origin added."""
        self._check_alive()
        origin = self.get_origin()
        out: List[Voxel] = []
        for path in self.edge_directory.values():
            out.extend(add_origin(path, origin))
        return out

    def get_vertice_voxels(self) -> List[Voxel]:
        self._check_alive()
        return add_origin(self._vertices, self.get_origin())

    def delete(self) -> None:
        super().delete()
        self.edge_directory = {}
