from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Pos(Enum):
    UNKNOWN = "UNKNOWN"
    ADJ = "ADJ"
    ADV = "ADV"
    STOP = "STOP"    # determiner, pronoun, preposition...
    NOUN = "NOUN"
    VER = "VER"

    @classmethod
    def from_tag(cls, tag: str) -> "Pos":
        # one-byte tag of the binary lexicon
        return _TAG_TO_POS.get(tag, cls.UNKNOWN)


_TAG_TO_POS = {"N": Pos.NOUN, "A": Pos.ADJ, "S": Pos.STOP}


@dataclass(frozen=True)
class LexiconRecord:
    """Raw record of the binary lexicon, lemma not yet resolved."""
    word: str
    tag: str
    lemma_index: int = -1


@dataclass(frozen=True)
class LexiconEntry:
    word: str
    pos: Pos
    lemma: str


@dataclass
class Token:
    surface: str
    pos: Pos
    lemma: str
    node: Optional[int] = None  # index into Graph.nodes, None for STOP tokens

    @property
    def is_stop(self) -> bool:
        return self.pos is Pos.STOP


Sentence = List[Token]


@dataclass
class Node:
    lemma: str
    score: float = 1.0
    previous_score: float = 1.0
    edges: Dict[str, int] = field(default_factory=dict)  # neighbor lemma -> weight
    edge_weight_total: int = 0
    is_keyword: bool = False


@dataclass(frozen=True)
class KeywordResult:
    phrase: str
    score: float

    def as_tuple(self):
        return (self.phrase, self.score)
