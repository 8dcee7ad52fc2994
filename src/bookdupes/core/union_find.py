# ABOUTME: Generic disjoint-set (union-find) structure for transitive duplicate grouping.
# ABOUTME: Path halving on find, plain root linking on union; one instance per matcher pass.

from collections.abc import Hashable, Iterable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Disjoint sets over hashable ids.

    Clusters are expected to be small, so union links roots directly without
    rank or size bookkeeping. Elements are remembered in insertion order, which
    makes groups() deterministic for a given input order.
    """

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._parent: dict[T, T] = {}
        for element in elements:
            self.add(element)

    def __contains__(self, x: object) -> bool:
        return x in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def add(self, x: T) -> None:
        """Add x as a singleton set. No-op if already present."""
        self._parent.setdefault(x, x)

    def find(self, x: T) -> T:
        """Return the root of x's set, halving the path on the way up.

        Unknown elements are added as singletons.
        """
        parent = self._parent
        if x not in parent:
            parent[x] = x
            return x
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, a: T, b: T) -> None:
        """Merge the sets of a and b; a's root becomes a child of b's root."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a != root_b:
            self._parent[root_a] = root_b

    def groups(self) -> list[list[T]]:
        """Partition all elements by root, in first-seen order."""
        by_root: dict[T, list[T]] = {}
        for element in list(self._parent):
            by_root.setdefault(self.find(element), []).append(element)
        return list(by_root.values())
