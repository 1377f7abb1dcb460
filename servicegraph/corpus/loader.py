from pathlib import Path

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from servicegraph.config import settings
from servicegraph.corpus.schemas import Corpus, Edge, LifeEvent, ServiceNode
from servicegraph.exceptions import CorpusError

logger = structlog.get_logger()

_corpus: Corpus | None = None


class CorpusFile(BaseModel):
    """On-disk layout: nodes are a list, keyed by id once loaded."""

    nodes: list[ServiceNode]
    edges: list[Edge] = []
    life_events: list[LifeEvent] = []


def build_corpus(data: CorpusFile) -> Corpus:
    nodes: dict[str, ServiceNode] = {}
    for node in data.nodes:
        if node.id in nodes:
            raise CorpusError(f"Duplicate service id '{node.id}' in corpus")
        nodes[node.id] = node

    dangling = [e for e in data.edges if e.from_id not in nodes or e.to_id not in nodes]
    for edge in dangling:
        logger.warning(
            "corpus_dangling_edge",
            from_id=edge.from_id,
            to_id=edge.to_id,
            type=edge.type,
        )

    for event in data.life_events:
        missing = [nid for nid in event.entry_nodes if nid not in nodes]
        if missing:
            logger.warning("corpus_unknown_entry_nodes", event_id=event.id, node_ids=missing)

    return Corpus(nodes=nodes, edges=data.edges, life_events=data.life_events)


def load_corpus(path: str | Path) -> Corpus:
    """Read and validate a JSON corpus file."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CorpusError(f"Cannot read corpus file '{path}': {exc}") from exc

    try:
        data = CorpusFile.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise CorpusError(f"Invalid corpus file '{path}': {exc}") from exc

    corpus = build_corpus(data)
    logger.info(
        "corpus_loaded",
        path=str(path),
        nodes=len(corpus.nodes),
        edges=len(corpus.edges),
        life_events=len(corpus.life_events),
    )
    return corpus


def init_corpus(path: str | Path | None = None) -> Corpus:
    global _corpus
    _corpus = load_corpus(path or settings.corpus_path)
    return _corpus


def close_corpus() -> None:
    global _corpus
    _corpus = None


def get_corpus() -> Corpus:
    if _corpus is None:
        raise RuntimeError("Corpus not initialized. Call init_corpus() first.")
    return _corpus
