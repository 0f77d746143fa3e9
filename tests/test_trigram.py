import pytest

from carbonstore.trigram import TrigramIndex, extract, extract_trigrams


def _tri(text):
    a, b, c = text.encode("ascii")
    return a << 16 | b << 8 | c


@pytest.mark.parametrize(
    "query, want",
    [
        ("foo.bar.baz", ["foo", "oo.", "o.b", ".ba", "bar", "ar.", "r.b", "baz"]),
        ("foo.*.baz", ["foo", "oo.", ".ba", "baz"]),
        ("foo.bar[12]qux.*", ["foo", "oo.", "o.b", ".ba", "bar", "qux", "ux."]),
        ("foo.bar*.5*.qux.*", ["foo", "oo.", "o.b", ".ba", "bar", ".qu", "qux", "ux."]),
        ("foob[arzf", ["foo", "oob"]),
    ],
)
def test_extract_trigrams(query, want):
    assert extract_trigrams(query) == [_tri(w) for w in want]


def test_extract_trigrams_short_query():
    assert extract_trigrams("ab") == []


def test_trigram_packing_value():
    assert extract("foo") == [0x666F6F]


def test_extract_appends_only_new():
    first = extract("abc")
    assert extract("abcd", first) == [_tri("abc"), _tri("bcd")]
    assert first == [_tri("abc")]


def test_extract_short_text():
    assert extract("xy") == []


@pytest.fixture
def index():
    return TrigramIndex(["/foo/bar.wsp", "/foo/baz.wsp", "/qux/bar.wsp"])


def test_index_len(index):
    assert len(index) == len(
        set(extract("/foo/bar.wsp") + extract("/foo/baz.wsp") + extract("/qux/bar.wsp"))
    )


def test_query_single_match(index):
    assert index.query_trigrams(extract_trigrams("foo/baz")) == [1]


def test_query_multiple_matches(index):
    assert index.query_trigrams(extract_trigrams("bar")) == [0, 2]


def test_query_unknown_trigram(index):
    assert index.query_trigrams(extract_trigrams("zzz")) == []


def test_query_empty_matches_all(index):
    assert index.query_trigrams([]) == [0, 1, 2]


def test_prune_drops_common_trigrams(index):
    pruned = index.prune(0.5)
    common = _tri("wsp")
    assert pruned > 0
    # the pruned trigram no longer restricts the result
    assert index.query_trigrams([common]) == [0, 1, 2]
    assert index.query_trigrams([common, _tri("qux")]) == [2]


def test_prune_nothing_at_full_fraction(index):
    assert index.prune(1.0) == 0
    assert index.query_trigrams([_tri("foo")]) == [0, 1]


def test_prune_counts_only_once(index):
    first = index.prune(0.5)
    assert index.prune(0.5) == 0
    assert first >= 1
    assert len(index) > 0