import io
import struct

import pytest

from textrank_keywords.datatypes import LexiconRecord, Pos
from textrank_keywords.lexicon import Lexicon, LexiconError, encode_records, iter_records



def test_encode_record_layout():
    data = encode_records([LexiconRecord(word="abc", tag="N", lemma_index=-1)])
    assert data == b"N" + (-1).to_bytes(4, "little", signed=True) + b"\x03abc"


def test_encode_counts_utf8_bytes():
    data = encode_records([LexiconRecord(word="été", tag="", lemma_index=2)])
    assert data[0:1] == b" "
    assert data[5] == len("été".encode("utf-8"))
    assert data[6:].decode("utf-8") == "été"


def test_lookup_resolves_lemmas(french_lexicon):
    entry = french_lexicon.lookup("chats")
    assert entry.pos is Pos.NOUN
    assert entry.lemma == "chat"

    own = french_lexicon.lookup("chat")
    assert own.lemma == "chat"

    verb = french_lexicon.lookup("dorment")
    assert verb.pos is Pos.UNKNOWN
    assert verb.lemma == "dormir"


def test_stop_entry_without_lemma_is_its_own_lemma(french_lexicon):
    entry = french_lexicon.lookup("le")
    assert entry.pos is Pos.STOP
    assert entry.lemma == "le"


def test_every_written_record_is_found(french_lexicon, french_rows):
    for word, _, lemma in french_rows:
        entry = french_lexicon.lookup(word)
        assert entry is not None
        assert entry.word == word
        assert entry.lemma == (lemma if lemma and lemma != word else word)


@pytest.mark.parametrize("word", ["", "cha", "chatte", "Chat", "zzz", "aaa"])
def test_lookup_missing_word(french_lexicon, word):
    assert french_lexicon.lookup(word) is None


def test_lemma_may_point_forward():
    records = [
        LexiconRecord(word="aime", tag="S", lemma_index=1),
        LexiconRecord(word="aimer", tag="V", lemma_index=-1),
    ]
    lexicon = Lexicon.from_bytes(encode_records(records))
    assert lexicon.lookup("aime").lemma == "aimer"
    assert lexicon.lookup("aimer").pos is Pos.UNKNOWN


@pytest.mark.parametrize("index", [2, 100, -2])
def test_out_of_range_lemma_index_fails(index):
    records = [
        LexiconRecord(word="a", tag="N", lemma_index=-1),
        LexiconRecord(word="b", tag="N", lemma_index=index),
    ]
    with pytest.raises(LexiconError):
        Lexicon.from_bytes(encode_records(records))


def test_truncated_trailing_record_is_dropped(encode_lexicon, french_rows):
    data = encode_lexicon(french_rows)
    extra = encode_records([LexiconRecord(word="zèbre", tag="N", lemma_index=-1)])

    for cut in (1, 3, len(extra) - 1):
        lexicon = Lexicon.from_bytes(data + extra[:cut])
        assert len(lexicon) == len(french_rows)
        assert lexicon.lookup("zèbre") is None


def test_invalid_utf8_word_fails():
    data = struct.pack("<ciB", b"N", -1, 2) + b"\xff\xfe"
    with pytest.raises(LexiconError):
        Lexicon.from_bytes(data)


def test_iter_records_reads_file_order(encode_lexicon):
    records = list(iter_records(encode_lexicon([("b", "A", ""), ("a", "N", "b")])))
    assert [r.word for r in records] == ["a", "b"]
    assert records[0].lemma_index == 1
    assert records[1].tag == "A"


def test_empty_lexicon():
    lexicon = Lexicon.from_bytes(b"")
    assert len(lexicon) == 0
    assert lexicon.lookup("chat") is None


def test_load_from_file(lexicon_path, french_rows):
    lexicon = Lexicon.load(lexicon_path)
    assert len(lexicon) == len(french_rows)
    assert lexicon.lookup("noirs").lemma == "noir"


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        Lexicon.load(tmp_path / "missing.bin")


def test_dump(make_lexicon):
    lexicon = make_lexicon([("chats", "N", "chat"), ("chat", "N", ""), ("le", "S", "")])
    out = io.StringIO()
    lexicon.dump(out)
    assert out.getvalue().splitlines() == [
        "chat\t(NOUN,chat)",
        "chats\t(NOUN,chat)",
        "le\t(STOP,le)",
    ]
