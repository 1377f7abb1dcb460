import pytest
from fastapi.testclient import TestClient

from servicegraph.corpus.loader import close_corpus
from servicegraph.corpus.schemas import Corpus, Edge, LifeEvent, ServiceNode


def build_node(
    node_id: str,
    *,
    rules: list[dict] | None = None,
    universal: bool = False,
    nations: list[str] | None = None,
    key_questions: list[str] | None = None,
    deadline: str | None = None,
    dept_key: str = "dwp",
) -> ServiceNode:
    return ServiceNode.model_validate(
        {
            "id": node_id,
            "name": node_id.replace("-", " ").title(),
            "dept": dept_key.upper(),
            "dept_key": dept_key,
            "deadline": deadline,
            "service_type": "benefit",
            "nations": nations,
            "eligibility": {
                "summary": f"Who can get {node_id}",
                "universal": universal,
                "key_questions": key_questions or [],
                "rules": rules,
            },
        }
    )


def build_corpus(
    nodes: list[ServiceNode],
    edges: list[tuple[str, str, str]] = (),
    events: dict[str, list[str]] | None = None,
) -> Corpus:
    return Corpus(
        nodes={n.id: n for n in nodes},
        edges=[Edge.model_validate({"from": f, "to": t, "type": kind}) for f, t, kind in edges],
        life_events=[
            LifeEvent(id=event_id, name=event_id.title(), entry_nodes=entry)
            for event_id, entry in (events or {}).items()
        ],
    )


@pytest.fixture
def make_node():
    return build_node


@pytest.fixture
def make_corpus():
    return build_corpus


@pytest.fixture
def baby_corpus() -> Corpus:
    """register-birth REQUIRES child-benefit and ENABLES healthy-start."""
    return build_corpus(
        [
            build_node("register-birth", universal=True, deadline="42 days", dept_key="gro"),
            build_node("child-benefit", universal=True, dept_key="hmrc"),
            build_node("healthy-start", key_questions=["Are you pregnant?"], dept_key="nhs"),
        ],
        [
            ("register-birth", "child-benefit", "REQUIRES"),
            ("register-birth", "healthy-start", "ENABLES"),
        ],
        {"baby": ["register-birth"]},
    )


@pytest.fixture
def client():
    from servicegraph.main import app

    with TestClient(app) as test_client:
        yield test_client
    close_corpus()
