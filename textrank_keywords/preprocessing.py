from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from .datatypes import Pos, Sentence, Token
from .lexicon import Lexicon

# accented letters of the French alphabet, both cases
FRENCH_LETTERS = frozenset("éÉêÊèÈëËâÂàÀîÎïÏôÔùÙûÛüÜçÇœŒæÆ")

_SENTENCE_END_RE = re.compile(r"[.\n]")
_ASCII_LETTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")
_DIGITS = frozenset("0123456789")

MIN_WORD_LENGTH = 3


@dataclass
class CharClassifier:
    """
    Character table deciding what belongs to a word.

    Word characters are ASCII letters, digits, the hyphen and `extra_letters`.
    Only letters (ASCII or extra) count as alphabetic.
    """
    extra_letters: FrozenSet[str] = FRENCH_LETTERS
    word_chars: FrozenSet[str] = field(init=False, repr=False, compare=False)
    word_pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.word_chars = _ASCII_LETTERS | _DIGITS | {"-"} | frozenset(self.extra_letters)
        # maximal runs of word_chars
        chars = "".join(re.escape(ch) for ch in sorted(self.word_chars))
        self.word_pattern = re.compile(f"[{chars}]+")

    def is_alpha(self, ch: str) -> bool:
        return ch in _ASCII_LETTERS or ch in self.extra_letters

    def is_word_char(self, ch: str) -> bool:
        return ch in self.word_chars

    def lower(self, word: str) -> str:
        return "".join(ch.lower() if self.is_alpha(ch) else ch for ch in word)


DEFAULT_CLASSIFIER = CharClassifier()


def split_sentences(text: str) -> List[str]:
    # '.' and newline end a sentence and are dropped; the text after the last
    # terminator is a sentence of its own, possibly empty
    return _SENTENCE_END_RE.split(text)


def split_words(sentence: str, classifier: CharClassifier = DEFAULT_CLASSIFIER) -> List[str]:
    return classifier.word_pattern.findall(sentence)


def _match_entry(word: str, lexicon: Lexicon) -> Optional[Tuple[Pos, str]]:
    entry = lexicon.lookup(word)
    if entry is None:
        return None
    if entry.pos is Pos.STOP:
        return Pos.STOP, ""
    if entry.lemma:
        return entry.pos, entry.lemma
    # tagged but without lemma: not reliable enough
    return None


def classify_word(word: str, lexicon: Lexicon,
                  classifier: CharClassifier = DEFAULT_CLASSIFIER) -> Tuple[Pos, str]:
    """
    POS tag and lemma of a token.

    Short tokens and tokens without any letter are stop words. Otherwise the
    word is looked up as is, then lower-cased; an unknown word is its own lemma.
    """
    if len(word) < MIN_WORD_LENGTH:
        return Pos.STOP, ""
    if not any(classifier.is_alpha(ch) for ch in word):
        return Pos.STOP, ""
    match = _match_entry(word, lexicon)
    if match is None:
        match = _match_entry(classifier.lower(word), lexicon)
    if match is None:
        return Pos.UNKNOWN, word
    return match


def preprocess_text(text: str, lexicon: Lexicon,
                    classifier: Optional[CharClassifier] = None) -> List[Sentence]:
    classifier = classifier or DEFAULT_CLASSIFIER
    sentences: List[Sentence] = []
    for raw in split_sentences(text):
        tokens = []
        for word in split_words(raw, classifier):
            pos, lemma = classify_word(word, lexicon, classifier)
            tokens.append(Token(surface=word, pos=pos, lemma=lemma))
        sentences.append(tokens)
    return sentences
