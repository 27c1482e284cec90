from __future__ import annotations
import heapq
from typing import List, Set

from .datatypes import KeywordResult, Sentence
from .graphing import Graph

DEFAULT_DAMPING = 0.85
DEFAULT_ITERATIONS = 20
DEFAULT_NUM_KEYWORDS = 10


def text_rank(graph: Graph, num_iterations: int = DEFAULT_ITERATIONS,
              damping: float = DEFAULT_DAMPING) -> None:
    """
    Score every node of the graph in place.

    TextRank formula: S(Vi) = (1-d) + d × Σ(w_ij × S(Vj) / Σ_k w_jk)

    All scores of an iteration are computed from the previous iteration,
    so the visiting order of nodes does not matter.
    """
    for node in graph:
        node.score = 1.0
        node.edge_weight_total = sum(node.edges.values())
        node.is_keyword = False

    for _ in range(num_iterations):
        for node in graph:
            node.previous_score = node.score
        for node in graph:
            acc = 0.0
            for lemma, weight in node.edges.items():
                neighbor = graph.get(lemma)
                if neighbor is None or neighbor.edge_weight_total == 0:
                    continue
                acc += weight * neighbor.previous_score / neighbor.edge_weight_total
            node.score = (1.0 - damping) + damping * acc


def select_keywords(graph: Graph, num_keywords: int = DEFAULT_NUM_KEYWORDS) -> List[KeywordResult]:
    """Mark the `num_keywords` best nodes as keywords; ties go to the smaller lemma."""
    k = min(max(num_keywords, 0), len(graph))
    best = heapq.nsmallest(k, graph, key=lambda n: (-n.score, n.lemma))
    for node in best:
        node.is_keyword = True
    return [KeywordResult(phrase=n.lemma, score=n.score) for n in best]


def merge_keyphrases(graph: Graph, keywords: List[KeywordResult]) -> List[KeywordResult]:
    """
    Append to `keywords` the runs of two or more consecutive keyword tokens,
    joined by spaces and scored by the sum of their nodes. A phrase already
    collected is not added again.
    """
    results = list(keywords)
    seen: Set[str] = {kw.phrase for kw in keywords}
    for sentence in graph.sentences:
        for run in _keyword_runs(graph, sentence):
            if len(run) < 2:
                continue
            phrase = " ".join(tok.lemma for tok in run)
            if phrase in seen:
                continue
            seen.add(phrase)
            score = sum(graph.nodes[tok.node].score for tok in run)
            results.append(KeywordResult(phrase=phrase, score=score))
    return results


def _keyword_runs(graph: Graph, sentence: Sentence):
    run = []
    for tok in sentence:
        if tok.node is not None and graph.nodes[tok.node].is_keyword:
            run.append(tok)
        else:
            if run:
                yield run
            run = []
    if run:
        yield run


def finalize_ranking(results: List[KeywordResult], num_keywords: int = DEFAULT_NUM_KEYWORDS) -> List[KeywordResult]:
    # sorted() is stable: equal scores keep discovery order
    ranked = sorted(results, key=lambda r: r.score, reverse=True)
    return ranked[:max(num_keywords, 0)]
