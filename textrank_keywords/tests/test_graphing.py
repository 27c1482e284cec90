import io

import pytest

from textrank_keywords.datatypes import Pos, Token
from textrank_keywords.graphing import Graph, build_graph


def _tok(lemma: str) -> Token:
    return Token(surface=lemma, pos=Pos.NOUN, lemma=lemma)


def _stop(surface: str = "le") -> Token:
    return Token(surface=surface, pos=Pos.STOP, lemma="")


def _sentence(words: str):
    """`a b _ c` -> tokens, `_` being a stop word."""
    return [_stop() if w == "_" else _tok(w) for w in words.split()]


def _weights(graph: Graph) -> dict:
    return {node.lemma: dict(node.edges) for node in graph}


def _assert_symmetric(graph: Graph):
    for node in graph:
        for neighbor, weight in node.edges.items():
            assert graph.get(neighbor).edges[node.lemma] == weight


def test_window_links_following_words():
    graph = build_graph([_sentence("a b c d e")], window_size=2)
    assert _weights(graph) == {
        "a": {"b": 1, "c": 1},
        "b": {"a": 1, "c": 1, "d": 1},
        "c": {"a": 1, "b": 1, "d": 1, "e": 1},
        "d": {"b": 1, "c": 1, "e": 1},
        "e": {"c": 1, "d": 1},
    }
    assert graph.edge_count() == 7


def test_stop_words_are_skipped_not_counted():
    graph = build_graph([_sentence("a _ _ b _ c d")], window_size=2)
    assert graph.get("a").edges == {"b": 1, "c": 1}
    assert "d" not in graph.get("a").edges
    assert "" not in graph


def test_window_stops_at_sentence_end():
    graph = build_graph([_sentence("a b"), _sentence("c")], window_size=3)
    assert graph.get("a").edges == {"b": 1}
    assert graph.get("c").edges == {}
    assert len(graph) == 3


def test_repeated_cooccurrence_increments_weight():
    graph = build_graph([_sentence("a b"), _sentence("b _ a")])
    assert graph.get("a").edges == {"b": 2}
    assert graph.get("b").edges == {"a": 2}


def test_repeated_lemma_makes_self_loop():
    graph = build_graph([_sentence("a a")])
    assert graph.get("a").edges == {"a": 2}
    assert graph.edge_count() == 1


def test_tokens_refer_to_their_node():
    graph = build_graph([_sentence("a _ b a")])
    sentence = graph.sentences[0]
    assert sentence[1].node is None
    assert graph.nodes[sentence[0].node].lemma == "a"
    assert sentence[0].node == sentence[3].node
    assert graph.nodes[sentence[2].node].lemma == "b"


def test_graphs_do_not_share_tokens():
    sentences = [_sentence("b a")]
    first = build_graph(sentences)
    second = build_graph([_sentence("a")] + sentences)

    assert all(tok.node is None for tok in sentences[0])
    assert [first.nodes[t.node].lemma for t in first.sentences[0]] == ["b", "a"]
    assert [second.nodes[t.node].lemma for t in second.sentences[1]] == ["b", "a"]
    assert first.sentences[0][0].node != second.sentences[1][0].node


def test_symmetry_holds_during_construction():
    graph = Graph()
    ids = [graph.node_index(lemma) for lemma in "abcd"]
    for a, b in [(0, 1), (1, 2), (2, 0), (3, 3), (0, 1), (2, 3)]:
        graph.add_edge(ids[a], ids[b])
        _assert_symmetric(graph)


@pytest.mark.parametrize("window_size", [1, 2, 3, 5])
def test_built_graph_is_symmetric(window_size):
    sentences = [_sentence("a b _ c a d"), _sentence("d _ _ e a"), _sentence("b b c")]
    graph = build_graph(sentences, window_size=window_size)
    _assert_symmetric(graph)


def test_node_index_is_stable():
    graph = Graph()
    assert graph.node_index("x") == 0
    assert graph.node_index("y") == 1
    assert graph.node_index("x") == 0
    assert graph.get("z") is None


def test_empty_input():
    graph = build_graph([[]])
    assert len(graph) == 0
    assert graph.edge_count() == 0


def test_to_networkx():
    graph = build_graph([_sentence("a b"), _sentence("a b c")], window_size=1)
    G = graph.to_networkx()
    assert set(G.nodes) == {"a", "b", "c"}
    assert G["a"]["b"]["weight"] == 2
    assert G["b"]["c"]["weight"] == 1
    assert not G.has_edge("a", "c")
    assert G.nodes["a"]["score"] == 1.0
    assert G.nodes["a"]["is_keyword"] is False


def test_dump():
    graph = build_graph([_sentence("a b")])
    out = io.StringIO()
    graph.dump(out)
    assert out.getvalue() == "a\t(b,1)\nb\t(a,1)\n"
