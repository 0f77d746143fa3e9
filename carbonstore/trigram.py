"""Trigram extraction and an inverted trigram index over path names."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

_GLOB_STOPS = frozenset(b"[*?")
_CLOSE_BRACKET = ord("]")


def _trigrams_of(data: bytes) -> Iterable[int]:
    for i in range(len(data) - 2):
        yield data[i] << 16 | data[i + 1] << 8 | data[i + 2]


def extract(text: str | bytes, trigrams: Optional[Sequence[int]] = None) -> list[int]:
    """Return trigrams followed by the byte trigrams of text not already present.

    A trigram packs three consecutive bytes into one integer, first byte highest.
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    result = list(trigrams) if trigrams else []
    seen = set(result)
    for tri in _trigrams_of(data):
        if tri not in seen:
            seen.add(tri)
            result.append(tri)
    return result


def extract_trigrams(query: str) -> list[int]:
    """Return the trigrams of the literal runs in a glob query.

    Wildcards '*' and '?' and bracketed character classes split the query;
    trigrams are taken only from the text between them.
    """
    data = query.encode("utf-8")
    if len(data) < 3:
        return []

    trigrams: list[int] = []
    start = 0
    i = 0
    while i < len(data):
        if data[i] in _GLOB_STOPS:
            trigrams = extract(data[start:i], trigrams)
            if data[i] == ord("["):
                while i < len(data) and data[i] != _CLOSE_BRACKET:
                    i += 1
            start = i + 1
        i += 1

    if start < i:
        trigrams = extract(data[start:i], trigrams)
    return trigrams


class TrigramIndex:
    """Maps trigrams to the ids of the documents containing them.

    Document ids are positions in the sequence the index was built from.
    """

    def __init__(self, docs: Iterable[str]) -> None:
        self._postings: dict[int, Optional[list[int]]] = {}
        self._all_docs: list[int] = []
        for doc_id, doc in enumerate(docs):
            self._all_docs.append(doc_id)
            for tri in extract(doc):
                postings = self._postings.setdefault(tri, [])
                if postings is not None:
                    postings.append(doc_id)

    def __len__(self) -> int:
        """Number of distinct trigrams known, pruned ones included."""
        return len(self._postings)

    def query_trigrams(self, trigrams: Sequence[int]) -> list[int]:
        """Return, ascending, the ids of documents holding all the trigrams.

        Pruned trigrams are ignored; an unknown trigram matches nothing. With
        no usable trigram every document matches.
        """
        lists: list[list[int]] = []
        for tri in trigrams:
            if tri not in self._postings:
                return []
            postings = self._postings[tri]
            if postings is not None:
                lists.append(postings)

        if not lists:
            return list(self._all_docs)

        lists.sort(key=len)
        result = set(lists[0])
        for postings in lists[1:]:
            result.intersection_update(postings)
            if not result:
                return []
        return sorted(result)

    def prune(self, fraction: float) -> int:
        """Drop posting lists found in more than fraction of all documents.

        Return how many trigrams were pruned by this call.
        """
        max_docs = int(fraction * len(self._all_docs))
        pruned = 0
        for tri, postings in self._postings.items():
            if postings is not None and len(postings) > max_docs:
                self._postings[tri] = None
                pruned += 1
        return pruned