"""
Extrusions of polygon layers.

``LayerVectorExtrude`` sweeps one layer along a vector.  ``LayerConvexExtrude``
lofts through an ordered list of layers, wrapping each consecutive pair in
the convex hull of the lines joining their vertices.
"""

import logging
from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

from .composite import CompositeVoxelCollection
from .errors import error_empty_input, error_invalid_mode
from .registry import IdentifierRegistry
from .setops import SUBTRACTION_OP, UNION_OP
from .shapes import Layer
from .voxels import (DEFAULT_ORIGIN, Voxel, VoxelSet, as_voxel, graph3d_parametric,
                     subtract_origin, unique_voxels)

logger = logging.getLogger(__name__)

Point2D = Tuple[int, int]


def _translate(voxel: Sequence[int], vector: Sequence[int]) -> Voxel:
    return (voxel[0] + vector[0], voxel[1] + vector[1], voxel[2] + vector[2])


def point_orientation(p1: Sequence[int], p2: Sequence[int], p3: Sequence[int]) -> int:
    """
    Turn direction of the path p1 -> p2 -> p3 in the plane.

    Negative for a counter-clockwise turn, positive for clockwise, zero
    when the three points are collinear.
    """
    return (p2[1] - p1[1]) * (p3[0] - p2[0]) - (p3[1] - p2[1]) * (p2[0] - p1[0])


def convex_hull(points: Sequence[Sequence[int]]) -> List[Point2D]:
    """
    Convex hull of 2D points, counter-clockwise from the lowest x.

    Andrew's monotone chain.  Collinear points on the hull edges are
    dropped; fewer than three distinct points are returned sorted.
    """
    pts = sorted(set((p[0], p[1]) for p in points))
    if len(pts) <= 2:
        return pts

    lower: List[Point2D] = []
    for p in pts:
        while len(lower) >= 2 and point_orientation(lower[-2], lower[-1], p) >= 0:
            lower.pop()
        lower.append(p)

    upper: List[Point2D] = []
    for p in reversed(pts):
        while len(upper) >= 2 and point_orientation(upper[-2], upper[-1], p) >= 0:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


def _trace_outline(registry: IdentifierRegistry, vertices: List[Voxel], filled: bool) -> List[Voxel]:
    """Voxels of the closed outline through ``vertices``, optionally filled."""
    scratch = Layer(registry, DEFAULT_ORIGIN, vertices).generate_edges()
    if filled:
        scratch.fill_polygon()
    voxels = scratch.get_fill_voxels()
    scratch.delete()
    return voxels


class LayerVectorExtrude(VoxelSet):
    """
    A layer swept along a vector.

    The solid form joins every voxel of the layer to its translated twin.
    The shell form only joins the edge voxels, and keeps the layer and the
    translated end cap as the two lids.
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 extrude_vector: Sequence[int] = (0, 0, 0), extrude_object: Layer = None):
        if extrude_object is None:
            raise error_empty_input("LayerVectorExtrude layer")
        self.extrude_vector: Voxel = as_voxel(extrude_vector)
        self.extrude_object = extrude_object
        self.extrude_end_cap = None
        self.shell = False
        super().__init__(registry, origin,
                         subtract_origin(extrude_object.get_fill_voxels(), origin))

    def _reset(self) -> "LayerVectorExtrude":
        if self.extrude_end_cap is not None:
            self.extrude_end_cap.delete()
            self.extrude_end_cap = None
        self.shell = False
        return self.set_fill_voxels(
            subtract_origin(self.extrude_object.get_fill_voxels(), self.get_origin()))

    def change_extrude_vector(self, vector: Sequence[int]) -> "LayerVectorExtrude":
        self._check_alive()
        self.extrude_vector = as_voxel(vector)
        return self._reset()

    def change_extrude_object(self, layer: Layer) -> "LayerVectorExtrude":
        self._check_alive()
        self.extrude_object = layer
        return self._reset()

    def _build_end_cap(self, vertices: List[Voxel]) -> Layer:
        if self.extrude_end_cap is not None:
            self.extrude_end_cap.delete()
        self.extrude_end_cap = Layer(self.registry, DEFAULT_ORIGIN, vertices)
        return self.extrude_end_cap.generate_edges().fill_polygon()

    def extrude_voxels(self, shell: bool = False) -> "LayerVectorExtrude":
        """
        Sweep the layer.  A zero vector gives the layer itself, filled.

        Raises EmptyInputError in shell mode when the layer has no edges;
        call ``generate_edges`` on it first.
        """
        self._check_alive()
        self.shell = shell
        layer = self.extrude_object
        vector = self.extrude_vector

        if vector == (0, 0, 0):
            cap = self._build_end_cap(layer.get_vertice_voxels())
            voxels = layer.get_fill_voxels() + cap.get_fill_voxels()
            return self.set_fill_voxels(subtract_origin(unique_voxels(voxels), self.get_origin()))

        cap = self._build_end_cap([_translate(v, vector) for v in layer.get_vertice_voxels()])
        voxels: List[Voxel] = []
        if shell:
            edge_voxels = layer.get_edge_voxels()
            if not edge_voxels:
                raise error_empty_input(f"shell extrusion of layer {layer.id} edge directory")
            for voxel in edge_voxels:
                voxels.extend(graph3d_parametric(voxel, _translate(voxel, vector))[1:-1])
            voxels.extend(cap.get_fill_voxels())
            voxels.extend(layer.get_fill_voxels())
        else:
            for voxel in layer.get_fill_voxels():
                voxels.extend(graph3d_parametric(voxel, _translate(voxel, vector)))
            voxels.extend(cap.get_fill_voxels())

        logger.debug("%s: extruded %s by %s (shell=%s) into %d voxels", self.id,
                     layer.id, vector, shell, len(voxels))
        return self.set_fill_voxels(subtract_origin(unique_voxels(voxels), self.get_origin()))

    def delete(self) -> None:
        self._check_alive()
        if self.extrude_end_cap is not None:
            self.extrude_end_cap.delete()
            self.extrude_end_cap = None
        super().delete()


class EdgeDirectoryMode(Enum):
    """Export formats for ``LayerConvexExtrude.get_edge_directory``."""
    FULL_DIRECTORY = "RETURN_MODE_FULL_DIRECTORY"
    VOXELS = "RETURN_MODE_VOXELS"


class LayerConvexExtrude(VoxelSet):
    """
    A loft through an ordered list of layers.

    Each consecutive pair of layers forms one section.  A section starts
    as every line joining a vertex of the first layer to a vertex of the
    second; it is then sliced along its dominant axis and every slice is
    replaced by the outline of its convex hull (or the filled hull when
    ``shell`` is False).  The sections are kept in ``edge_directory`` and
    their union is the fill.

    Usage:
        loft = LayerConvexExtrude(registry, (0, 0, 0), [bottom, top])
        loft.generate_edges(shell=False)
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 extrude_objects: Sequence[Layer] = ()):
        self.extrude_objects: List[Layer] = list(extrude_objects)
        self.edge_directory: Dict[int, VoxelSet] = {}
        self.shell = False
        super().__init__(registry, origin, [])

    def _hull_slices(self, section: VoxelSet, shell: bool) -> List[Voxel]:
        axis = section.sort_axes[0]
        plane_axes = [a for a in range(3) if a != axis]
        out: List[Voxel] = []
        for coordinate, bucket in section.sorted_directory.items():
            if not bucket:
                continue
            hull = convex_hull([(v[plane_axes[0]], v[plane_axes[1]]) for v in bucket])
            vertices = []
            for u, w in hull:
                v = [0, 0, 0]
                v[axis] = coordinate
                v[plane_axes[0]] = u
                v[plane_axes[1]] = w
                vertices.append(tuple(v))
            out.extend(_trace_outline(self.registry, vertices, filled=not shell))
        return out

    def generate_edges(self, shell: bool = True) -> "LayerConvexExtrude":
        """Build every section and set the fill to their union."""
        self._check_alive()
        self.reset_edge_directory()
        self.shell = shell

        line = VoxelSet(self.registry, DEFAULT_ORIGIN, [])
        composite = CompositeVoxelCollection(self.registry, DEFAULT_ORIGIN, {})
        for index in range(len(self.extrude_objects) - 1):
            start = self.extrude_objects[index]
            end = self.extrude_objects[index + 1]
            section = VoxelSet(self.registry, DEFAULT_ORIGIN, [])
            composite.change_names({section.id: section, line.id: line})
            composite.set_equation(line.id + SUBTRACTION_OP + section.id)
            for sv in start.get_vertice_voxels():
                for ev in end.get_vertice_voxels():
                    line.set_fill_voxels(graph3d_parametric(sv, ev))
                    section.add_fill_voxels(composite.interpret_ast().get_fill_voxels())

            section.set_fill_voxels(unique_voxels(self._hull_slices(section, shell)))
            self.edge_directory[index] = section
            logger.debug("%s: section %d has %d voxels", self.id, index, len(section))

        voxels: List[Voxel] = []
        if self.edge_directory:
            sections = list(self.edge_directory.values())
            composite.change_names({s.id: s for s in sections})
            composite.set_equation(UNION_OP.join(s.id for s in sections))
            voxels = composite.interpret_ast().get_fill_voxels()
        composite.delete()
        line.delete()

        logger.debug("%s: %d sections, %d voxels", self.id, len(self.edge_directory), len(voxels))
        return self.set_fill_voxels(subtract_origin(voxels, self.get_origin()))

    def get_edge_directory(self, mode: Union[EdgeDirectoryMode, str]) -> Union[Dict[int, List[Voxel]], List[Voxel]]:
        """
        FULL_DIRECTORY gives each section's voxels by section index; VOXELS
        gives all sections' voxels as one list without repeats.
        """
        self._check_alive()
        if not isinstance(mode, EdgeDirectoryMode):
            try:
                mode = EdgeDirectoryMode(mode)
            except ValueError:
                raise error_invalid_mode(mode, [m.value for m in EdgeDirectoryMode]) from None

        if mode is EdgeDirectoryMode.FULL_DIRECTORY:
            return {key: section.get_fill_voxels() for key, section in self.edge_directory.items()}
        return unique_voxels(v for section in self.edge_directory.values()
                             for v in section.get_fill_voxels())

    def reset_edge_directory(self) -> "LayerConvexExtrude":
        """Release every section and empty the fill."""
        self._check_alive()
        for section in self.edge_directory.values():
            section.delete()
        self.edge_directory = {}
        self.shell = False
        return self.set_fill_voxels([])

    def delete(self) -> None:
        self.reset_edge_directory()
        super().delete()
