from __future__ import annotations
import logging
import struct
from bisect import bisect_left
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Union

from .datatypes import LexiconEntry, LexiconRecord, Pos

logger = logging.getLogger(__name__)

# pos tag (1 byte), lemma index (int32), word length (uint8); word bytes follow
_HEADER = struct.Struct("<ciB")
MAX_WORD_BYTES = 255


class LexiconError(ValueError):
    """The lexicon file breaks the producer contract."""


def encode_records(records: Iterable[LexiconRecord]) -> bytes:
    """Serialize records in file order. The caller is responsible for sorting."""
    chunks: List[bytes] = []
    for rec in records:
        raw = rec.word.encode("utf-8")
        if len(raw) > MAX_WORD_BYTES:
            raise LexiconError(f"word too long for the lexicon format: {rec.word!r}")
        tag = (rec.tag or " ").encode("ascii")[:1]
        chunks.append(_HEADER.pack(tag, rec.lemma_index, len(raw)))
        chunks.append(raw)
    return b"".join(chunks)


def iter_records(data: bytes) -> Iterator[LexiconRecord]:
    """
    Decode records until the end of the buffer.

    A short final record (header or word cut off) is dropped without error,
    like a streaming read that stops on the first failure.
    """
    offset = 0
    size = len(data)
    while offset < size:
        if offset + _HEADER.size > size:
            logger.debug(f"Dropping truncated lexicon header at byte {offset}")
            return
        tag, lemma_index, length = _HEADER.unpack_from(data, offset)
        start = offset + _HEADER.size
        end = start + length
        if end > size:
            logger.debug(f"Dropping truncated lexicon record at byte {offset}")
            return
        try:
            word = data[start:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise LexiconError(f"invalid UTF-8 in lexicon record at byte {offset}") from e
        yield LexiconRecord(word=word, tag=tag.decode("latin-1"), lemma_index=lemma_index)
        offset = end


class Lexicon:
    """
    Sorted word -> (POS, lemma) dictionary loaded from the binary format.

    Entries must appear sorted by word in the file; they are not re-sorted
    and lookup is only correct for a sorted file.
    """

    def __init__(self, records: Iterable[LexiconRecord]):
        records = list(records)
        n = len(records)
        # lemma indices may point forward, so the whole table is read first
        entries: List[LexiconEntry] = []
        for i, rec in enumerate(records):
            if rec.lemma_index == -1:
                lemma = rec.word
            elif 0 <= rec.lemma_index < n:
                lemma = records[rec.lemma_index].word
            else:
                raise LexiconError(
                    f"lemma index {rec.lemma_index} of record {i} ({rec.word!r}) "
                    f"is outside the table of {n} records"
                )
            entries.append(LexiconEntry(word=rec.word, pos=Pos.from_tag(rec.tag), lemma=lemma))
        self._entries = entries
        self._words = [e.word for e in entries]

    @classmethod
    def from_bytes(cls, data: bytes) -> "Lexicon":
        return cls(iter_records(data))

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Lexicon":
        """Read a lexicon file. OSError propagates if it cannot be opened."""
        data = Path(path).read_bytes()
        lexicon = cls.from_bytes(data)
        logger.info(f"Loaded {len(lexicon)} lexicon entries from {path}")
        return lexicon

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, word: str) -> Optional[LexiconEntry]:
        i = bisect_left(self._words, word)
        if i < len(self._words) and self._words[i] == word:
            return self._entries[i]
        return None

    def dump(self, out: IO[str]) -> None:
        """Write every entry as `word\t(POS,lemma)`; for debugging."""
        for e in self._entries:
            out.write(f"{e.word}\t({e.pos.value},{e.lemma})\n")
