from __future__ import annotations

from collections import defaultdict

from clean_match.models import MatchEdge


class UnionFindGraph:
    """Similarity graph backed by a union-find forest.

    Only nodes touched by an edge exist, so isolated entities never form a
    component.
    """

    def __init__(self) -> None:
        self._parent: dict[int, int] = {}
        self._edges: list[MatchEdge] = []

    def find(self, node: int) -> int:
        if node not in self._parent:
            self._parent[node] = node
            return node
        if self._parent[node] != node:
            self._parent[node] = self.find(self._parent[node])
        return self._parent[node]

    def add_edge(self, left_id: int, right_id: int, weight: float) -> None:
        self._edges.append(MatchEdge(left_id=left_id, right_id=right_id, similarity=weight))
        root_left = self.find(left_id)
        root_right = self.find(right_id)
        if root_left != root_right:
            # Smaller id becomes the root so component labels are reproducible.
            low, high = sorted((root_left, root_right))
            self._parent[high] = low

    def connected_components(self) -> list[list[int]]:
        grouped: dict[int, list[int]] = defaultdict(list)
        for node in list(self._parent):
            grouped[self.find(node)].append(node)
        return sorted((sorted(members) for members in grouped.values()), key=lambda c: c[0])

    def component_weights(self) -> dict[int, list[float]]:
        weights: dict[int, list[float]] = defaultdict(list)
        for edge in self._edges:
            weights[self.find(edge.left_id)].append(edge.similarity)
        return dict(weights)
