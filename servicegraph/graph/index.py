"""Forward and backward adjacency over the service graph.

Built once from the corpus and shared read-only by the journey planner
and the API layer.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from servicegraph.corpus.schemas import Corpus, Edge, EdgeType

logger = structlog.get_logger()


@dataclass(frozen=True)
class Neighbour:
    node_id: str
    type: EdgeType


class GraphIndex:
    def __init__(
        self,
        outgoing: Mapping[str, tuple[Neighbour, ...]],
        incoming: Mapping[str, tuple[Neighbour, ...]],
    ) -> None:
        self._outgoing = MappingProxyType(dict(outgoing))
        self._incoming = MappingProxyType(dict(incoming))

    @classmethod
    def from_edges(cls, node_ids: Iterable[str], edges: Iterable[Edge]) -> "GraphIndex":
        out_lists: dict[str, list[Neighbour]] = {}
        in_lists: dict[str, list[Neighbour]] = {}
        for node_id in node_ids:
            out_lists[node_id] = []
            in_lists[node_id] = []

        skipped = 0
        for edge in edges:
            if edge.from_id not in out_lists or edge.to_id not in in_lists:
                skipped += 1
                continue
            out_lists[edge.from_id].append(Neighbour(edge.to_id, edge.type))
            in_lists[edge.to_id].append(Neighbour(edge.from_id, edge.type))

        if skipped:
            logger.debug("graph_index_skipped_edges", count=skipped)

        return cls(
            {k: tuple(v) for k, v in out_lists.items()},
            {k: tuple(v) for k, v in in_lists.items()},
        )

    @classmethod
    def from_corpus(cls, corpus: Corpus) -> "GraphIndex":
        return cls.from_edges(corpus.nodes.keys(), corpus.edges)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._outgoing

    def outgoing(self, node_id: str) -> tuple[Neighbour, ...]:
        """Edges leaving ``node_id``; empty for unknown ids."""
        return self._outgoing.get(node_id, ())

    def incoming(self, node_id: str) -> tuple[Neighbour, ...]:
        """Edges entering ``node_id``; empty for unknown ids."""
        return self._incoming.get(node_id, ())
