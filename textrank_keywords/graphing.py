from __future__ import annotations
import logging
from dataclasses import replace
from typing import IO, Dict, Iterator, List, Optional

import networkx as nx

from .datatypes import Node, Sentence

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 3


class Graph:
    """
    Undirected co-occurrence graph keyed by lemma.

    Nodes live in an arena (`nodes`) and tokens refer to them by index.
    The tokenized sentences are kept for keyphrase merging after ranking.
    """

    def __init__(self, sentences: Optional[List[Sentence]] = None):
        self.nodes: List[Node] = []
        self.sentences: List[Sentence] = sentences if sentences is not None else []
        self._index: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, lemma: str) -> bool:
        return lemma in self._index

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def get(self, lemma: str) -> Optional[Node]:
        i = self._index.get(lemma)
        return None if i is None else self.nodes[i]

    def node_index(self, lemma: str) -> int:
        """Index of the node for `lemma`, created on first use."""
        i = self._index.get(lemma)
        if i is None:
            i = len(self.nodes)
            self.nodes.append(Node(lemma=lemma))
            self._index[lemma] = i
        return i

    def add_edge(self, a: int, b: int) -> None:
        na, nb = self.nodes[a], self.nodes[b]
        na.edges[nb.lemma] = na.edges.get(nb.lemma, 0) + 1
        nb.edges[na.lemma] = nb.edges.get(na.lemma, 0) + 1

    def edge_count(self) -> int:
        # self loops are stored once, other edges twice
        pairs = 0
        for node in self.nodes:
            for neighbor in node.edges:
                pairs += 2 if neighbor == node.lemma else 1
        return pairs // 2

    def dump(self, out: IO[str]) -> None:
        for node in self.nodes:
            pairs = " ".join(f"({k},{w})" for k, w in node.edges.items())
            out.write(f"{node.lemma}\t{pairs}\n")

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()
        for node in self.nodes:
            G.add_node(node.lemma, score=node.score, is_keyword=node.is_keyword)
        for node in self.nodes:
            for neighbor, weight in node.edges.items():
                G.add_edge(node.lemma, neighbor, weight=weight)
        return G


def build_graph(sentences: List[Sentence], window_size: int = DEFAULT_WINDOW_SIZE) -> Graph:
    """
    Link every non-stop lemma to the next `window_size` non-stop lemmas of
    the same sentence. Stop tokens are skipped and do not count.

    The graph keeps its own copy of the tokens, with `node` set; the caller's
    sentences are left untouched.
    """
    graph = Graph([[replace(tok) for tok in sentence] for sentence in sentences])
    for sentence in graph.sentences:
        for tok in sentence:
            tok.node = None if tok.is_stop else graph.node_index(tok.lemma)
        # tokens whose node is set, in sentence order
        content = [tok.node for tok in sentence if tok.node is not None]
        for pos, anchor in enumerate(content):
            for neighbor in content[pos + 1:pos + 1 + window_size]:
                graph.add_edge(anchor, neighbor)
    logger.debug(f"Built graph: {len(graph)} nodes, {graph.edge_count()} edges, "
                 f"{len(sentences)} sentences")
    return graph
