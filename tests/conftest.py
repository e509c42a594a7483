"""Shared fixtures for the voxelcsg tests."""

import itertools

import pytest

from voxelcsg import IdentifierRegistry, VoxelSet


def cube_voxels(size, offset=(0, 0, 0)):
    """Every voxel of a ``size``-sided cube with its minimum corner at ``offset``."""
    ox, oy, oz = offset
    return [(x + ox, y + oy, z + oz)
            for x, y, z in itertools.product(range(size), repeat=3)]


@pytest.fixture
def registry():
    """A fresh identifier registry per test."""
    return IdentifierRegistry()


@pytest.fixture
def make_set(registry):
    """Build a VoxelSet at the default origin from absolute voxels."""
    def _make(voxels, origin=(0, 0, 0)):
        relative = [(x - origin[0], y - origin[1], z - origin[2]) for x, y, z in voxels]
        return VoxelSet(registry, origin, relative)
    return _make
