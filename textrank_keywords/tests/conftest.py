from pathlib import Path

import pytest

from textrank_keywords.lexicon import Lexicon, encode_records
from textrank_keywords.prepare import build_records

FRENCH_ROWS = [
    ("chat", "N", "chat"),
    ("chats", "N", "chat"),
    ("le", "S", ""),
    ("les", "S", ""),
    ("sur", "S", ""),
    ("noir", "A", "noir"),
    ("noirs", "A", "noir"),
    ("dort", "", "dormir"),
    ("dorment", "", "dormir"),
    ("dormir", "", ""),
    ("tapis", "N", "tapis"),
]


def _lexicon_bytes(rows) -> bytes:
    return encode_records(build_records(rows))


@pytest.fixture
def make_lexicon():
    """Build an in-memory lexicon from (word, tag, lemma) rows."""
    def _make(rows) -> Lexicon:
        return Lexicon.from_bytes(_lexicon_bytes(rows))
    return _make


@pytest.fixture
def french_lexicon(make_lexicon) -> Lexicon:
    return make_lexicon(FRENCH_ROWS)


@pytest.fixture
def lexicon_path(tmp_path) -> Path:
    path = tmp_path / "lexicon.bin"
    path.write_bytes(_lexicon_bytes(FRENCH_ROWS))
    return path


@pytest.fixture
def french_rows():
    return list(FRENCH_ROWS)


@pytest.fixture
def encode_lexicon():
    """Encode (word, tag, lemma) rows in the binary lexicon format."""
    return _lexicon_bytes
