from __future__ import annotations

"""Nested key-path configuration store.

The store maps a path of string segments to a leaf value. The rearrange
workflow uses two levels, document type then element type, terminating in
the name of the attribute that carries an element's display name::

    store = PathConfigStore()
    store = store.set_path(["article", "sect1"], "id")
    store.get_path(["article", "sect1"])  # -> "id"

Each level is an ordered tuple of ``(key, value)`` entries where ``value`` is
either a leaf or another :class:`PathConfigStore`. Stores are immutable by
convention: :meth:`PathConfigStore.set_path` returns a new store and shares
every unmodified sibling subtree with the original.

Known limitation
----------------
Inserting a path that extends an existing leaf replaces that leaf with a
nested level. The old leaf value is discarded::

    store = PathConfigStore.from_mapping({"a": 1}).set_path(["a", "b"], 2)
    store.get_path(["a"])       # -> PathConfigStore, the leaf 1 is gone
    store.get_path(["a", "b"])  # -> 2
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

__all__ = ["PathConfigStore", "get_in", "set_in"]


class PathConfigStore(Mapping):
    """One level of the nested configuration, usable as a read-only mapping.

    Direct mapping access (``store["sect1"]``, ``store.get("sect1")``) works
    on this level only. Use :meth:`get_path` / :meth:`set_path` to address a
    full path.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Sequence[Tuple[str, Any]] = ()) -> None:
        self._entries: Tuple[Tuple[str, Any], ...] = tuple(entries)

    # ------------------------------------------------------------------
    # Mapping protocol (single level)
    # ------------------------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        for entry_key, value in self._entries:
            if entry_key == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PathConfigStore({self.to_dict()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PathConfigStore):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    @property
    def entries(self) -> Tuple[Tuple[str, Any], ...]:
        return self._entries

    # ------------------------------------------------------------------
    # Path access
    # ------------------------------------------------------------------
    def get_path(self, path: Sequence[str]) -> Optional[Any]:
        """Return the value stored at ``path``, or None when it does not resolve."""
        return get_in(self, path)

    def set_path(self, path: Sequence[str], value: Any) -> Any:
        """Return a store where ``path`` resolves to ``value``.

        With an empty path the result is ``value`` itself.
        """
        return set_in(self, path, value)

    # ------------------------------------------------------------------
    # Conversion helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Optional[Mapping]) -> "PathConfigStore":
        """Build a store from plain nested mappings (e.g. parsed YAML)."""
        if not data:
            return cls()
        entries = []
        for key, value in data.items():
            if isinstance(value, Mapping) and not isinstance(value, PathConfigStore):
                value = cls.from_mapping(value)
            entries.append((str(key), value))
        return cls(entries)

    def to_dict(self) -> Dict[str, Any]:
        """Return the store as plain nested dictionaries, in entry order."""
        result: Dict[str, Any] = {}
        for key, value in self._entries:
            result[key] = value.to_dict() if isinstance(value, PathConfigStore) else value
        return result


def get_in(tree: Any, path: Sequence[str]) -> Optional[Any]:
    """Follow ``path`` through nested stores.

    Returns None if a segment is absent, or if a leaf is reached before the
    path is exhausted.
    """
    node = tree
    for segment in path:
        if not isinstance(node, PathConfigStore):
            return None
        found = False
        for key, value in node.entries:
            if key == segment:
                node = value
                found = True
                break
        if not found:
            return None
    return node


def set_in(tree: Any, path: Sequence[str], value: Any) -> Any:
    """Return ``tree`` updated so that ``path`` resolves to ``value``.

    A missing first segment gets a fresh chain placed before the existing
    entries; an existing one has its value replaced by the recursive result.
    When ``tree`` is a leaf (or None) it is replaced by a new level.
    """
    if not path:
        return value

    head, tail = path[0], path[1:]
    entries = tree.entries if isinstance(tree, PathConfigStore) else ()

    for index, (key, current) in enumerate(entries):
        if key == head:
            updated = set_in(current, tail, value)
            return PathConfigStore(entries[:index] + ((key, updated),) + entries[index + 1:])

    return PathConfigStore(((head, set_in(None, tail, value)),) + entries)
