"""
Voxel sets and line rasterization.

A ``VoxelSet`` owns a list of origin-relative voxels.  Every mutation
rebuilds the derived state eagerly:

- ``bounding_box``: the box around the absolute voxels, or None when the
  set is empty (the zero-volume set is a valid value, not an error);
- ``sorted_directory``: the absolute voxels bucketed by their coordinate on
  the axis of largest range, each bucket sorted by the other two axes;
- ``joint_bounding_box``: one box per non-empty bucket.

The sorted directory is what makes ``find_point`` logarithmic.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .bbox import BoundingBox, JointBoundingBox, Voxel
from .errors import error_deleted_object
from .registry import IdentifierRegistry

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN: Voxel = (0, 0, 0)

SortedDirectory = Dict[int, List[Voxel]]


def as_voxel(point: Sequence[int]) -> Voxel:
    return (int(point[0]), int(point[1]), int(point[2]))


def add_origin(voxels: Iterable[Sequence[int]], origin: Sequence[int]) -> List[Voxel]:
    """Translate ``voxels`` by ``origin``; always returns a new list."""
    ox, oy, oz = origin
    return [(v[0] + ox, v[1] + oy, v[2] + oz) for v in voxels]


def subtract_origin(voxels: Iterable[Sequence[int]], origin: Sequence[int]) -> List[Voxel]:
    ox, oy, oz = origin
    return [(v[0] - ox, v[1] - oy, v[2] - oz) for v in voxels]


def unique_voxels(voxels: Iterable[Sequence[int]]) -> List[Voxel]:
    """Drop repeated voxels, keeping the first occurrence of each."""
    seen = set()
    out = []
    for v in voxels:
        v = as_voxel(v)
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _step(delta: int) -> int:
    if delta > 0:
        return 1
    elif delta < 0:
        return -1
    return 0


def graph3d_parametric(p1: Sequence[int], p2: Sequence[int]) -> List[Voxel]:
    """
    Rasterize the segment from ``p1`` to ``p2``, both ends included.

    The walk steps one unit at a time along the axis of largest change
    (ties go to y, then x, then z).  The other two axes accumulate their
    change and advance one unit whenever the accumulated remainder reaches
    the dominant change; the check happens before accumulating.  The
    result always has ``max(|dx|, |dy|, |dz|) + 1`` voxels.

    Walking ``p2`` to ``p1`` does not always give the reverse of walking
    ``p1`` to ``p2``.  ``Line(double_pass=True)`` traces both directions.

    >>> graph3d_parametric((0, 0, 0), (3, 3, 0))
    [(0, 0, 0), (1, 1, 0), (2, 2, 0), (3, 3, 0)]
    """
    start = as_voxel(p1)
    end = as_voxel(p2)
    deltas = [end[a] - start[a] for a in range(3)]
    steps = [_step(d) for d in deltas]
    dx, dy, dz = (abs(d) for d in deltas)

    if dy >= dz and dy >= dx:
        major = 1
    elif dx >= dy and dx >= dz:
        major = 0
    else:
        major = 2

    if steps[major] == 0:
        return [end]

    minors = [a for a in range(3) if a != major]
    size = (dx, dy, dz)
    span = size[major]
    current = list(start)
    remainder = [0, 0, 0]
    points: List[Voxel] = []
    for i in range(span + 1):
        for a in minors:
            if remainder[a] >= span:
                remainder[a] -= span
                current[a] += steps[a]
            remainder[a] += size[a]
        current[major] = start[major] + i * steps[major]
        points.append(tuple(current))
    return points


def sort_fill_voxels(voxels: Sequence[Voxel], bounding_box: BoundingBox) -> Tuple[SortedDirectory, JointBoundingBox]:
    """
    Slice ``voxels`` along the largest-range axis of ``bounding_box``.

    Every integer of that axis' range gets a bucket, empty or not.  Each
    bucket is sorted by the second then third axis of the range ordering,
    and each non-empty bucket contributes one box to the joint box.
    """
    a0, a1, a2 = bounding_box.biggest_range_index
    directory: SortedDirectory = {
        k: [] for k in range(bounding_box.low(a0), bounding_box.high(a0) + 1)
    }
    for v in voxels:
        directory[v[a0]].append(v)

    boxes = []
    for bucket in directory.values():
        if bucket:
            bucket.sort(key=lambda v: (v[a1], v[a2]))
            boxes.append(BoundingBox.from_points(bucket))
    return directory, JointBoundingBox(boxes)


def find_point(voxel_set: "VoxelSet", point: Sequence[int]) -> int:
    """
    Index of ``point`` inside its slice of ``voxel_set``, or -1.

    The slice is found directly by the point's coordinate on the dominant
    axis, then binary searched on the (second, third) axis pair.
    """
    if voxel_set.bounding_box is None:
        return -1
    a0, a1, a2 = voxel_set.sort_axes
    bucket = voxel_set.sorted_directory.get(point[a0])
    if not bucket:
        return -1

    target = (point[a1], point[a2])
    lo, hi = 0, len(bucket) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        v = bucket[mid]
        key = (v[a1], v[a2])
        if key == target:
            return mid
        elif key < target:
            lo = mid + 1
        else:
            hi = mid - 1
    return -1


class VoxelSet:
    """
    A set of voxels with an origin and an identifier.

    Usage:
        registry = IdentifierRegistry()
        vs = VoxelSet(registry, (1, 0, 0), [(0, 0, 0), (1, 0, 0)])
        vs.get_fill_voxels()   # [(1, 0, 0), (2, 0, 0)]
    """

    def __init__(self, registry: IdentifierRegistry, origin: Sequence[int] = DEFAULT_ORIGIN,
                 fill_voxels: Optional[Iterable[Sequence[int]]] = None):
        self.registry = registry
        self.id: str = registry.issue_id()
        registry.register(self.id, self)
        self._deleted = False
        self._origin: Voxel = as_voxel(origin)
        self._fill_voxels: List[Voxel] = [as_voxel(v) for v in (fill_voxels or [])]

        self.bounding_box: Optional[BoundingBox] = None
        self.joint_bounding_box = JointBoundingBox()
        self.sorted_directory: SortedDirectory = {}
        self.sort_axes: List[int] = [0, 1, 2]
        self.recompute_derived()

    def _check_alive(self) -> None:
        if self._deleted:
            raise error_deleted_object(self.id)

    @property
    def deleted(self) -> bool:
        return self._deleted

    @property
    def is_empty(self) -> bool:
        self._check_alive()
        return not self._fill_voxels

    def get_fill_voxels(self) -> List[Voxel]:
        """Absolute fill voxels, as a new list."""
        self._check_alive()
        return add_origin(self._fill_voxels, self._origin)

    def get_origin(self) -> Voxel:
        self._check_alive()
        return self._origin

    def set_origin(self, origin: Sequence[int]) -> "VoxelSet":
        self._check_alive()
        self._origin = as_voxel(origin)
        self.recompute_derived()
        return self

    def set_fill_voxels(self, voxels: Iterable[Sequence[int]]) -> "VoxelSet":
        """Replace the origin-relative fill voxels."""
        self._check_alive()
        self._fill_voxels = [as_voxel(v) for v in voxels]
        self.recompute_derived()
        return self

    def add_fill_voxels(self, voxels: Iterable[Sequence[int]]) -> "VoxelSet":
        """Append origin-relative fill voxels."""
        self._check_alive()
        self._fill_voxels.extend(as_voxel(v) for v in voxels)
        self.recompute_derived()
        return self

    def recompute_derived(self) -> None:
        """Rebuild the bounding box, sorted directory and joint box."""
        self._check_alive()
        if not self._fill_voxels:
            self.bounding_box = None
            self.joint_bounding_box = JointBoundingBox()
            self.sorted_directory = {}
            self.sort_axes = [0, 1, 2]
            return

        absolute = add_origin(self._fill_voxels, self._origin)
        self.bounding_box = BoundingBox.from_points(absolute)
        self.sort_axes = list(self.bounding_box.biggest_range_index)
        self.sorted_directory, self.joint_bounding_box = sort_fill_voxels(absolute, self.bounding_box)
        logger.debug("%s: %d voxels in %d slices", self.id, len(absolute),
                     len(self.joint_bounding_box))

    def delete(self) -> None:
        """Release the identifier and storage.  The set cannot be used afterwards."""
        self._check_alive()
        self.registry.remove_id(self.id)
        self._fill_voxels = []
        self.bounding_box = None
        self.joint_bounding_box = JointBoundingBox()
        self.sorted_directory = {}
        self._deleted = True

    def __len__(self) -> int:
        self._check_alive()
        return len(self._fill_voxels)

    def __iter__(self) -> Iterator[Voxel]:
        return iter(self.get_fill_voxels())

    def __contains__(self, point) -> bool:
        self._check_alive()
        return find_point(self, point) != -1

    def __repr__(self) -> str:
        if self._deleted:
            return f"{type(self).__name__}(<deleted {self.id}>)"
        return f"{type(self).__name__}(id={self.id!r}, origin={self._origin}, voxels={len(self._fill_voxels)})"
