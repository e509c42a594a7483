"""Identifier registry shared by the voxel objects of one object graph."""

from __future__ import annotations

import uuid
from typing import Any, Dict, List


class IdentifierRegistry:
    """
    Issues unique identifiers and optionally keeps a reference for each.

    Identifiers are 32 character lowercase hex strings, so every issued id is
    also a valid variable name inside a set-operations equation.

    The registry is passed explicitly to each object constructor; separate
    object graphs may use separate registries.
    """

    def __init__(self):
        self._ids: set = set()
        self._references: Dict[str, Any] = {}

    def issue_id(self) -> str:
        """Return a new identifier, retrying on collision."""
        uid = uuid.uuid4().hex
        while uid in self._ids:
            uid = uuid.uuid4().hex
        self._ids.add(uid)
        return uid

    def add_id(self, uid: str) -> bool:
        """Track an externally created id; False if it is already in use."""
        if uid in self._ids:
            return False
        self._ids.add(uid)
        return True

    def register(self, uid: str, reference: Any) -> None:
        self._references[uid] = reference

    def unregister(self, uid: str) -> None:
        self._references.pop(uid, None)

    def remove_id(self, uid: str) -> None:
        """Forget an id and any reference attached to it."""
        self._ids.discard(uid)
        self._references.pop(uid, None)

    def lookup(self, uid: str) -> Any:
        return self._references.get(uid)

    def all_ids(self) -> List[str]:
        return sorted(self._ids)

    def __contains__(self, uid: str) -> bool:
        return uid in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def clear(self) -> None:
        """Drop every id and reference held by this registry."""
        self._ids.clear()
        self._references.clear()
