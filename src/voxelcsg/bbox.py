"""
Axis-aligned bounding boxes over integer voxels.

A box is stored as its eight corners.  Each corner has a fixed label whose
bits encode its position on the unit cube::

    bit 0 -> x (0 = left,   1 = right)
    bit 1 -> y (0 = bottom, 1 = top)
    bit 2 -> z (0 = front,  1 = back)

so corner 0 is the minimum corner and corner 7 the maximum corner.

Two boxes are intersected by clipping the edges of each box against the
bounding planes of the other.  Clipping only discovers some of the corners
of the overlap; ``correct`` rebuilds the rest from the cube topology.
"""

from __future__ import annotations

import copy
import logging
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import error_empty_input, error_invalid_mode

logger = logging.getLogger(__name__)

Voxel = Tuple[int, int, int]
CompleteCorners = Tuple[Voxel, Voxel, Voxel, Voxel, Voxel, Voxel, Voxel, Voxel]
PartialCorners = List[Optional[Voxel]]

AXES = ("x", "y", "z")
CORNER_COUNT = 8


class Corner(IntEnum):
    """Corner labels, [Front|Back] [Left|Right] [Bottom|Top]."""
    FLB = 0
    FRB = 1
    FLT = 2
    FRT = 3
    BLB = 4
    BRB = 5
    BLT = 6
    BRT = 7


def corner_bit(corner: int, axis: int) -> int:
    """0 if ``corner`` sits on the low side of ``axis``, else 1."""
    return (corner >> axis) & 1


# Edges of the cube grouped by the axis they run along; each pair is
# (low endpoint, high endpoint).
EDGE_PAIRS = tuple(
    tuple((c, c | (1 << axis)) for c in range(CORNER_COUNT) if not corner_bit(c, axis))
    for axis in range(3)
)


def _spanned(i: int, j: int) -> Tuple[int, ...]:
    """Corners of the sub-box spanned by corners ``i`` and ``j``."""
    fixed = [axis for axis in range(3) if corner_bit(i, axis) == corner_bit(j, axis)]
    return tuple(
        k for k in range(CORNER_COUNT)
        if k not in (i, j) and all(corner_bit(k, a) == corner_bit(i, a) for a in fixed)
    )


def _hamming(i: int, j: int) -> int:
    return bin(i ^ j).count("1")


# Inference rules for ``correct``: two known corners on a face diagonal
# give the two other corners of that face; two known corners on a space
# diagonal give all six others.  Face diagonals are listed first.
CORRECTION_RULES = tuple(
    (i, j, _spanned(i, j))
    for distance in (2, 3)
    for i in range(CORNER_COUNT)
    for j in range(i + 1, CORNER_COUNT)
    if _hamming(i, j) == distance
)


def empty_corners() -> PartialCorners:
    """A partial corner set with every corner absent."""
    return [None] * CORNER_COUNT


def corners_from_extents(lows: Sequence[int], highs: Sequence[int]) -> CompleteCorners:
    """Build the eight labelled corners from per-axis minima and maxima."""
    return tuple(
        tuple(highs[a] if corner_bit(c, a) else lows[a] for a in range(3))
        for c in range(CORNER_COUNT)
    )


def is_inside(point: Sequence[int], corners: Sequence[Voxel]) -> bool:
    """Does ``point`` lie inside the box (inclusive) given by ``corners``?"""
    lo = corners[Corner.FLB]
    hi = corners[Corner.BRT]
    return lo[0] <= point[0] <= hi[0] and \
        lo[1] <= point[1] <= hi[1] and \
        lo[2] <= point[2] <= hi[2]


def compile_corners(corners: Sequence[Optional[Voxel]]) -> List[Voxel]:
    """Return the defined corners, in corner order."""
    return [tuple(c) for c in corners if c is not None]


def defined_count(corners: Sequence[Optional[Voxel]]) -> int:
    return sum(1 for c in corners if c is not None)


def is_correctable(corners: Sequence[Optional[Voxel]]) -> bool:
    """
    Can the full box be rebuilt from the defined corners?

    True exactly when the defined corners include both a low and a high
    corner along every axis; anything less leaves an extent unknown.
    """
    defined = [c for c in range(CORNER_COUNT) if corners[c] is not None]
    if len(defined) <= 1:
        return False
    return all(
        {corner_bit(c, axis) for c in defined} == {0, 1}
        for axis in range(3)
    )


def correct(corners: Sequence[Optional[Voxel]]) -> Tuple[bool, Union[CompleteCorners, PartialCorners]]:
    """
    Fill in the missing corners of a partial box.

    Returns ``(True, complete_corners)`` on success.  When the defined
    corners cannot determine the box, returns ``(False, partial)`` with the
    input unchanged (as a fresh list).
    """
    b3: PartialCorners = [None if c is None else tuple(c) for c in corners]
    if not is_correctable(b3):
        logger.debug("cannot rebuild box from %d corners", defined_count(b3))
        return False, b3

    while defined_count(b3) < CORNER_COUNT:
        progressed = False
        for i, j, targets in CORRECTION_RULES:
            if b3[i] is None or b3[j] is None:
                continue
            for k in targets:
                if b3[k] is None:
                    b3[k] = tuple(
                        b3[i][a] if corner_bit(k, a) == corner_bit(i, a) else b3[j][a]
                        for a in range(3)
                    )
                    progressed = True
        if not progressed:
            return False, b3

    return True, tuple(b3)


def _crosses_plane(low_end: Voxel, high_end: Voxel, axis: int, plane: int,
                   other: Sequence[Voxel]) -> bool:
    """
    Does the edge from ``low_end`` to ``high_end`` (running along ``axis``)
    pass through the face of box ``other`` lying at ``plane``?
    """
    if not low_end[axis] <= plane <= high_end[axis]:
        return False
    lo = other[Corner.FLB]
    hi = other[Corner.BRT]
    for a in range(3):
        if a != axis and not lo[a] <= low_end[a] <= hi[a]:
            return False
    return True


def _clip_edges(b1: Sequence[Voxel], b2: Sequence[Voxel], axis: int,
                out: PartialCorners) -> None:
    """Record the corners found by clipping the ``axis`` edges of ``b1`` to ``b2``."""
    low_plane = b2[Corner.FLB][axis]
    high_plane = b2[Corner.BRT][axis]
    for lo_c, hi_c in EDGE_PAIRS[axis]:
        low_end = b1[lo_c]
        high_end = b1[hi_c]
        if _crosses_plane(low_end, high_end, axis, low_plane, b2):
            p = list(low_end)
            p[axis] = low_plane
            out[lo_c] = tuple(p)
        if _crosses_plane(low_end, high_end, axis, high_plane, b2):
            p = list(high_end)
            p[axis] = high_plane
            out[hi_c] = tuple(p)


def _contained_endpoints(b1: Sequence[Voxel], b2: Sequence[Voxel], axis: int,
                         out: PartialCorners) -> None:
    """Record the ``axis`` edge endpoints of ``b1`` lying inside ``b2``."""
    for pair in EDGE_PAIRS[axis]:
        for c in pair:
            if is_inside(b1[c], b2):
                out[c] = tuple(b1[c])


def intersect(b1: Sequence[Voxel], b2: Sequence[Voxel]) -> Tuple[bool, Union[CompleteCorners, PartialCorners]]:
    """
    Intersect two boxes given by their complete corners.

    Returns ``(True, corners)`` with the overlap box, or ``(False,
    partial)`` with the best partial corner set when the boxes do not
    overlap.  Touching boxes overlap in a flat (zero range) box.
    """
    b3 = empty_corners()
    for axis in range(3):
        _clip_edges(b1, b2, axis, b3)
        _clip_edges(b2, b1, axis, b3)
        _contained_endpoints(b1, b2, axis, b3)
        _contained_endpoints(b2, b1, axis, b3)
    return correct(b3)


def _extents(points) -> Tuple[List[int], List[int]]:
    arr = np.asarray(points, dtype=np.int64).reshape(-1, 3)
    return [int(v) for v in arr.min(axis=0)], [int(v) for v in arr.max(axis=0)]


class BoundingBoxPayload(Enum):
    """What the payload handed to ``BoundingBox`` holds."""
    CORNERS = "TYPE_BOUNDING_DIRECTORY"
    POINTS = "TYPE_BOUNDING_POINTS"


class BoundingBox:
    """
    Axis aligned box around a set of voxels.

    Besides the corners, a box keeps the per-axis extremes and ranges and
    the axes ordered from largest to smallest range.  The ordering decides
    which axis a shape is sliced along; ties keep x, y, z order.

    Usage:
        box = BoundingBox.from_points([(0, 0, 0), (4, 1, 2)])
        box.biggest_range_index   # [0, 2, 1]
    """

    def __init__(self, payload, mode: BoundingBoxPayload = BoundingBoxPayload.POINTS):
        self._corners: CompleteCorners = corners_from_extents((0, 0, 0), (0, 0, 0))
        if mode is BoundingBoxPayload.POINTS:
            self._create(payload)
        elif mode is BoundingBoxPayload.CORNERS:
            self.set_corners(payload)
        else:
            raise error_invalid_mode(mode, list(BoundingBoxPayload))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[int]]) -> "BoundingBox":
        return cls(list(points), BoundingBoxPayload.POINTS)

    @classmethod
    def from_corners(cls, corners: Sequence[Voxel]) -> "BoundingBox":
        return cls(corners, BoundingBoxPayload.CORNERS)

    def _create(self, points: Sequence[Sequence[int]]) -> None:
        if len(points) == 0:
            raise error_empty_input("BoundingBox")
        lows, highs = _extents(points)
        self._corners = corners_from_extents(lows, highs)
        self._set_extents(lows, highs)

    def set_corners(self, corners: Sequence[Voxel]) -> None:
        """Copy ``corners`` in as the box and recompute the range metadata."""
        self._corners = tuple(tuple(int(v) for v in c) for c in corners)
        lows, highs = _extents(compile_corners(self._corners))
        self._set_extents(lows, highs)

    def _set_extents(self, lows: Sequence[int], highs: Sequence[int]) -> None:
        self.x_low, self.y_low, self.z_low = lows
        self.x_high, self.y_high, self.z_high = highs
        self.x_range = abs(self.x_high - self.x_low)
        self.y_range = abs(self.y_high - self.y_low)
        self.z_range = abs(self.z_high - self.z_low)

        ranges = self.ranges
        order = sorted(range(3), key=lambda a: -ranges[a])
        self.biggest_range_index: List[int] = order
        self.biggest_range_labels: List[str] = [AXES[a] + "Range" for a in order]
        self.biggest_range_low: List[str] = [AXES[a] + "Low" for a in order]
        self.biggest_range_high: List[str] = [AXES[a] + "High" for a in order]

    @property
    def corners(self) -> CompleteCorners:
        return self._corners

    @property
    def lows(self) -> Voxel:
        return (self.x_low, self.y_low, self.z_low)

    @property
    def highs(self) -> Voxel:
        return (self.x_high, self.y_high, self.z_high)

    @property
    def ranges(self) -> Tuple[int, int, int]:
        return (self.x_range, self.y_range, self.z_range)

    def low(self, axis: int) -> int:
        return self.lows[axis]

    def high(self, axis: int) -> int:
        return self.highs[axis]

    def contains(self, point: Sequence[int]) -> bool:
        return is_inside(point, self._corners)

    def intersect(self, other: "BoundingBox") -> Optional["BoundingBox"]:
        """The overlap with ``other`` as a new box, or None."""
        ok, corners = intersect(self._corners, other.corners)
        if not ok:
            return None
        return BoundingBox.from_corners(corners)

    def copy(self) -> "BoundingBox":
        return BoundingBox.from_corners(self._corners)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self._corners == other.corners

    def __hash__(self):
        return hash(self._corners)

    def __repr__(self) -> str:
        return f"BoundingBox({self.lows}, {self.highs})"


class JointBoxMode(Enum):
    """Export formats for ``JointBoundingBox.export``."""
    FULL_DIRECTORY = "RETURN_MODE_FULL_DIRECTORY"
    CORNERS_DIRECTORY = "RETURN_MODE_VOXELS_DIRECTORY"
    VOXELS = "RETURN_MODE_VOXELS"


class JointBoundingBox:
    """
    Several boxes treated as one, possibly non-convex, region.

    A single box around a diagonal line is mostly empty space; slicing the
    line and boxing each slice keeps the region tight.
    """

    def __init__(self, boxes: Optional[Iterable[BoundingBox]] = None):
        self.bounding_boxes: List[BoundingBox] = list(boxes or [])

    def is_inside(self, point: Sequence[int]) -> bool:
        for box in self.bounding_boxes:
            if box.contains(point):
                return True
        return False

    def export(self, mode: Union[JointBoxMode, str]) -> list:
        """
        Export the member boxes.

        FULL_DIRECTORY returns copies of every box, CORNERS_DIRECTORY one
        corner tuple per box, and VOXELS every corner of every box in a
        single flat list.
        """
        if not isinstance(mode, JointBoxMode):
            try:
                mode = JointBoxMode(mode)
            except ValueError:
                raise error_invalid_mode(mode, [m.value for m in JointBoxMode]) from None

        if mode is JointBoxMode.FULL_DIRECTORY:
            return [copy.deepcopy(box) for box in self.bounding_boxes]
        elif mode is JointBoxMode.CORNERS_DIRECTORY:
            return [box.corners for box in self.bounding_boxes]
        out: List[Voxel] = []
        for box in self.bounding_boxes:
            out.extend(compile_corners(box.corners))
        return out

    def __len__(self) -> int:
        return len(self.bounding_boxes)

    def __iter__(self):
        return iter(self.bounding_boxes)
