"""Journey planning over the service graph.

Two passes:

  1. BFS from the entry nodes of each selected life event, following both
     REQUIRES and ENABLES edges, to discover every reachable service.
  2. Kahn layering over REQUIRES edges only, restricted to the discovered
     services, to group them into phases.

ENABLES edges make a service relevant but never constrain its ordering.
"""

from collections import deque
from collections.abc import Sequence

import structlog

from servicegraph.corpus.schemas import Corpus, EdgeType, LifeEvent, ServiceNode
from servicegraph.graph.index import GraphIndex
from servicegraph.journey.schemas import (
    GraphLink,
    JourneyPhase,
    JourneyResult,
    JourneyService,
    JourneySummary,
    LifeEventRef,
    LifeEventSummary,
    ServiceListing,
    ServiceWithContext,
)

logger = structlog.get_logger()

GATEWAY_LABEL = "Gateway services - start here"


class JourneyPlanner:
    def __init__(self, corpus: Corpus, index: GraphIndex | None = None) -> None:
        self._corpus = corpus
        self._index = index if index is not None else GraphIndex.from_corpus(corpus)
        self._events: dict[str, LifeEvent] = {e.id: e for e in corpus.life_events}

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def index(self) -> GraphIndex:
        return self._index

    def is_known_event(self, event_id: str) -> bool:
        return event_id in self._events

    def unknown_events(self, event_ids: Sequence[str]) -> list[str]:
        return [eid for eid in event_ids if not self.is_known_event(eid)]

    # ------------------------------------------------------------------
    # Journey building
    # ------------------------------------------------------------------

    def build_journey(self, event_ids: Sequence[str]) -> JourneyResult:
        """Compute the phased journey for one or more life events.

        Unknown event ids are ignored. Services caught in a REQUIRES cycle
        never reach in-degree zero and are left out of every phase.
        """
        scope, tags = self.discover(event_ids)
        layers = self._layer(scope)

        placed = [nid for layer in layers for nid in layer]
        if len(placed) != len(scope):
            placed_set = set(placed)
            logger.debug(
                "journey_requires_cycle_dropped",
                node_ids=[nid for nid in scope if nid not in placed_set],
            )

        event_order = list(dict.fromkeys(event_ids))
        phases = [
            JourneyPhase(
                phase=i + 1,
                label=GATEWAY_LABEL if i == 0 else f"Phase {i + 1}",
                services=[self._shape(nid, scope, tags, event_order) for nid in layer],
            )
            for i, layer in enumerate(layers)
        ]

        nodes = [self._corpus.nodes[nid] for nid in placed]
        summary = JourneySummary(
            total_services=len(placed),
            total_departments=len({n.dept_key for n in nodes if n.dept_key}),
            services_with_deadlines=sum(1 for n in nodes if n.deadline),
            total_phases=len(layers),
            selected_life_events=list(event_ids),
        )

        logger.info(
            "journey_built",
            life_events=list(event_ids),
            services=summary.total_services,
            phases=summary.total_phases,
        )
        return JourneyResult(summary=summary, phases=phases)

    def discover(self, event_ids: Sequence[str]) -> tuple[dict[str, None], dict[str, set[str]]]:
        """Return the in-scope services (insertion ordered) and their event tags."""
        scope: dict[str, None] = {}
        tags: dict[str, set[str]] = {}

        for event_id in event_ids:
            event = self._events.get(event_id)
            if event is None:
                continue
            for node_id in event.entry_nodes:
                if node_id not in self._index:
                    continue
                scope.setdefault(node_id, None)
                tags.setdefault(node_id, set()).add(event_id)

        queue = deque(scope)
        while queue:
            current = queue.popleft()
            current_tags = tags.get(current, set())
            for neighbour in self._index.outgoing(current):
                target = neighbour.node_id
                target_tags = tags.setdefault(target, set())
                grew = not current_tags <= target_tags
                target_tags |= current_tags
                if target not in scope:
                    scope[target] = None
                    queue.append(target)
                elif grew:
                    # already visited, but its successors must see the new tags
                    queue.append(target)

        return scope, tags

    def _layer(self, scope: dict[str, None]) -> list[list[str]]:
        in_degree = dict.fromkeys(scope, 0)
        children: dict[str, list[str]] = {nid: [] for nid in scope}

        for node_id in scope:
            for neighbour in self._index.outgoing(node_id):
                if neighbour.type is not EdgeType.requires or neighbour.node_id not in in_degree:
                    continue
                children[node_id].append(neighbour.node_id)
                in_degree[neighbour.node_id] += 1

        layers: list[list[str]] = []
        frontier = [nid for nid in scope if in_degree[nid] == 0]
        while frontier:
            layers.append(frontier)
            next_frontier: list[str] = []
            for node_id in frontier:
                for child in children[node_id]:
                    in_degree[child] -= 1
                    if in_degree[child] == 0:
                        next_frontier.append(child)
            frontier = next_frontier
        return layers

    def _shape(
        self,
        node_id: str,
        scope: dict[str, None],
        tags: dict[str, set[str]],
        event_order: list[str],
    ) -> JourneyService:
        node = self._corpus.nodes[node_id]
        node_tags = tags.get(node_id, set())
        requires = [
            n.node_id
            for n in self._index.incoming(node_id)
            if n.type is EdgeType.requires and n.node_id in scope
        ]
        enables = [n.node_id for n in self._index.outgoing(node_id) if n.node_id in scope]
        return JourneyService(
            id=node.id,
            name=node.name,
            dept=node.dept,
            dept_key=node.dept_key,
            deadline=node.deadline,
            desc=node.desc,
            govuk_url=node.govuk_url,
            service_type=node.service_type,
            proactive=node.proactive,
            gated=node.gated,
            eligibility_summary=node.eligibility.summary,
            universal=node.eligibility.universal,
            means_tested=node.eligibility.means_tested,
            nations=node.nations,
            triggered_by=[eid for eid in event_order if eid in node_tags],
            requires=requires,
            enables=enables,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_service(self, service_id: str) -> ServiceNode | None:
        return self._corpus.get_node(service_id)

    def get_service_with_context(self, service_id: str) -> ServiceWithContext | None:
        node = self._corpus.get_node(service_id)
        if node is None:
            return None

        prerequisites = [self._link(n.node_id, n.type) for n in self._index.incoming(service_id)]
        unlocks = [self._link(n.node_id, n.type) for n in self._index.outgoing(service_id)]
        triggered_by = [
            LifeEventRef(id=e.id, name=e.name)
            for e in self._corpus.life_events
            if service_id in e.entry_nodes
        ]
        return ServiceWithContext(
            **node.model_dump(),
            prerequisites=prerequisites,
            unlocks=unlocks,
            triggered_by_events=triggered_by,
        )

    def _link(self, node_id: str, edge_type: EdgeType) -> GraphLink:
        node = self._corpus.get_node(node_id)
        return GraphLink(service_id=node_id, name=node.name if node else node_id, type=edge_type)

    def list_life_events(self) -> list[LifeEventSummary]:
        return [
            LifeEventSummary(
                id=e.id,
                name=e.name,
                description=e.desc,
                entry_node_count=len(e.entry_nodes),
            )
            for e in self._corpus.life_events
        ]

    def life_events(self) -> list[LifeEvent]:
        return list(self._corpus.life_events)

    def all_services(self) -> list[ServiceListing]:
        return [
            ServiceListing(
                **node.model_dump(),
                triggered_by_events=[
                    e.id for e in self._corpus.life_events if node.id in e.entry_nodes
                ],
            )
            for node in self._corpus.nodes.values()
        ]
