from __future__ import annotations
import logging
from bisect import bisect_left
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .datatypes import LexiconRecord
from .lexicon import MAX_WORD_BYTES, encode_records

logger = logging.getLogger(__name__)


@dataclass
class RawEntry:
    tag: str
    lemma: str
    freq: Optional[float]


def normalize_tag(pos: str) -> str:
    """NOM -> N, ADJ -> A, empty stays empty (unknown), anything else -> S."""
    if pos == "NOM":
        return "N"
    if pos == "ADJ":
        return "A"
    if pos == "":
        return ""
    return "S"


def _should_replace(current: RawEntry, tag: str, lemma: str, freq: Optional[float]) -> bool:
    if current.freq is None and freq is not None:
        return True
    if current.freq is not None and current.freq < (freq or 0.0):
        return True
    return current.tag == "" and lemma != ""


def read_frequency_list(lines: Iterable[str]) -> Dict[str, RawEntry]:
    """
    Parse `word<TAB>pos<TAB>lemma<TAB>freq` lines; trailing columns may be missing.

    Keep one row per word: the most frequent, or the first that carries a lemma.
    """
    table: Dict[str, RawEntry] = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        cols = line.split("\t")
        cols += [""] * (4 - len(cols))
        word, pos, lemma, freq_text = cols[:4]
        try:
            freq = float(freq_text) if freq_text else None
        except ValueError:
            logger.warning(f"Line {lineno}: bad frequency {freq_text!r}, ignored")
            freq = None
        tag = normalize_tag(pos)
        current = table.get(word)
        if current is None:
            table[word] = RawEntry(tag=tag, lemma=lemma, freq=freq)
        elif _should_replace(current, tag, lemma, freq):
            current.tag, current.lemma, current.freq = tag, lemma, freq
    return table


def build_records(entries: Iterable[Tuple[str, str, str]]) -> List[LexiconRecord]:
    """
    Sort (word, tag, lemma) triples by word and resolve each lemma to the
    position of its own record, or -1 when empty, equal to the word or absent.
    """
    rows = []
    for word, tag, lemma in entries:
        if len(word.encode("utf-8")) > MAX_WORD_BYTES:
            logger.warning(f"Skipping word longer than {MAX_WORD_BYTES} bytes: {word[:40]!r}...")
            continue
        rows.append((word, tag, lemma))
    rows.sort(key=lambda r: r[0])
    words = [r[0] for r in rows]

    records: List[LexiconRecord] = []
    for word, tag, lemma in rows:
        index = -1
        if lemma and lemma != word:
            i = bisect_left(words, lemma)
            if i < len(words) and words[i] == lemma:
                index = i
        records.append(LexiconRecord(word=word, tag=tag, lemma_index=index))
    return records


def prepare_lexicon(source: Union[str, Path], target: Union[str, Path]) -> int:
    """Convert the frequency list at `source` into a binary lexicon at `target`."""
    with open(source, encoding="utf-8") as f:
        table = read_frequency_list(f)
    records = build_records((w, e.tag, e.lemma) for w, e in table.items())
    Path(target).write_bytes(encode_records(records))
    logger.info(f"Wrote {len(records)} lexicon records to {target}")
    return len(records)
