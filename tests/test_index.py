from servicegraph.corpus.schemas import EdgeType
from servicegraph.graph.index import GraphIndex, Neighbour


def test_forward_and_backward_adjacency(baby_corpus):
    index = GraphIndex.from_corpus(baby_corpus)

    assert index.outgoing("register-birth") == (
        Neighbour("child-benefit", EdgeType.requires),
        Neighbour("healthy-start", EdgeType.enables),
    )
    assert index.incoming("child-benefit") == (Neighbour("register-birth", EdgeType.requires),)
    assert index.incoming("healthy-start") == (Neighbour("register-birth", EdgeType.enables),)


def test_isolated_nodes_have_empty_adjacency(make_node, make_corpus):
    corpus = make_corpus([make_node("alone"), make_node("a"), make_node("b")], [("a", "b", "ENABLES")])
    index = GraphIndex.from_corpus(corpus)

    assert "alone" in index
    assert index.outgoing("alone") == ()
    assert index.incoming("alone") == ()


def test_edges_to_unknown_nodes_are_skipped(make_node, make_corpus):
    corpus = make_corpus(
        [make_node("a")],
        [("a", "ghost", "REQUIRES"), ("ghost", "a", "ENABLES")],
    )
    index = GraphIndex.from_corpus(corpus)

    assert index.outgoing("a") == ()
    assert index.incoming("a") == ()
    assert "ghost" not in index


def test_unknown_id_lookup_is_empty(baby_corpus):
    index = GraphIndex.from_corpus(baby_corpus)

    assert index.outgoing("nope") == ()
    assert index.incoming("nope") == ()
    assert "nope" not in index
    assert all(n in index for n in ("register-birth", "child-benefit", "healthy-start"))
