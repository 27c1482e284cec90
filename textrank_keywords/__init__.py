from .datatypes import Pos, LexiconEntry, LexiconRecord, Token, Node, KeywordResult
from .lexicon import Lexicon, LexiconError, encode_records, iter_records
from .preprocessing import CharClassifier, DEFAULT_CLASSIFIER, preprocess_text, classify_word
from .graphing import Graph, build_graph
from .scoring import text_rank, select_keywords, merge_keyphrases, finalize_ranking
from .keywords import RankConfig, rank, extract_keywords, run_pipeline
