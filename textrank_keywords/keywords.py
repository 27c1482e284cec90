from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .datatypes import KeywordResult
from .graphing import DEFAULT_WINDOW_SIZE, Graph, build_graph
from .lexicon import Lexicon
from .preprocessing import CharClassifier, preprocess_text
from .scoring import (DEFAULT_DAMPING, DEFAULT_ITERATIONS, DEFAULT_NUM_KEYWORDS,
                      finalize_ranking, merge_keyphrases, select_keywords, text_rank)

logger = logging.getLogger(__name__)


@dataclass
class RankConfig:
    window_size: int = DEFAULT_WINDOW_SIZE
    num_keywords: int = DEFAULT_NUM_KEYWORDS
    num_iterations: int = DEFAULT_ITERATIONS
    damping: float = DEFAULT_DAMPING

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {self.window_size}")
        if self.num_keywords < 0:
            raise ValueError(f"num_keywords must be non-negative, got {self.num_keywords}")
        if self.num_iterations < 0:
            raise ValueError(f"num_iterations must be non-negative, got {self.num_iterations}")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"damping must be in [0, 1], got {self.damping}")


def run_pipeline(text: str, lexicon: Lexicon, config: Optional[RankConfig] = None,
                 classifier: Optional[CharClassifier] = None) -> Tuple[Graph, List[KeywordResult]]:
    """Rank `text` and return the scored graph along with the results."""
    config = config or RankConfig()
    sentences = preprocess_text(text, lexicon, classifier)
    graph = build_graph(sentences, window_size=config.window_size)
    if len(graph) == 0:
        return graph, []
    text_rank(graph, num_iterations=config.num_iterations, damping=config.damping)
    keywords = select_keywords(graph, config.num_keywords)
    results = merge_keyphrases(graph, keywords)
    logger.debug(f"{len(keywords)} keywords, {len(results) - len(keywords)} merged keyphrases")
    return graph, finalize_ranking(results, config.num_keywords)


def rank(text: str, lexicon: Lexicon,
         window_size: int = DEFAULT_WINDOW_SIZE,
         num_keywords: int = DEFAULT_NUM_KEYWORDS,
         num_iterations: int = DEFAULT_ITERATIONS,
         damping: float = DEFAULT_DAMPING,
         classifier: Optional[CharClassifier] = None) -> List[KeywordResult]:
    config = RankConfig(window_size=window_size, num_keywords=num_keywords,
                        num_iterations=num_iterations, damping=damping)
    _, results = run_pipeline(text, lexicon, config, classifier)
    return results


def extract_keywords(text: str, lexicon: Lexicon, config: Optional[RankConfig] = None,
                     classifier: Optional[CharClassifier] = None) -> List[KeywordResult]:
    _, results = run_pipeline(text, lexicon, config, classifier)
    return results
