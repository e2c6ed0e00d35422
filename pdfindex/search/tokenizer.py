"""Search normalization built on ICU transliteration.

Index text and queries go through the same fold: NFC, any script to
Latin, strip diacritics to ASCII, lowercase. Tokens are ``\\w+`` runs
joined by single spaces, which is what the trigram index compares.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import ClassVar

import icu  # type: ignore[import-untyped]


@dataclass(frozen=True)
class Snippet:
    """Where a query matched inside a page and the text around it."""

    offset: int | None
    text: str


class SearchTokenizer:
    """Folds text into the token stream stored in the search index."""

    _ICU_TRANSFORM: ClassVar[str] = "Any-Latin; Latin-ASCII; Lower"
    _TOKEN_RE: ClassVar[re.Pattern[str]] = re.compile(r"\w+")

    def __init__(self) -> None:
        self._transliterator: icu.Transliterator = icu.Transliterator.createInstance(
            self._ICU_TRANSFORM
        )

    def tokenize(self, text: str) -> str:
        if not text:
            return ""
        folded = self._transliterator.transliterate(unicodedata.normalize("NFC", text))
        return " ".join(self._TOKEN_RE.findall(folded))

    def fold_with_mapping(self, text: str) -> tuple[str, list[int]]:
        """Fold *text* character by character, collapsing separators to one space.

        The text is NFC-normalized first, like ``tokenize`` does, so a base
        letter and its combining marks fold as one character.

        Returns:
            (folded_text, folded_to_orig) where folded_to_orig[j] is the
            index in *text* that produced folded char j.
        """
        normalized, norm_to_orig = _nfc_with_mapping(text)
        parts: list[str] = []
        folded_to_orig: list[int] = []
        last_was_space = True

        for norm_idx, ch in enumerate(normalized):
            orig_idx = norm_to_orig[norm_idx]
            for t in self._transliterator.transliterate(ch):
                if self._TOKEN_RE.match(t):
                    parts.append(t)
                    folded_to_orig.append(orig_idx)
                    last_was_space = False
                elif not last_was_space:
                    parts.append(" ")
                    folded_to_orig.append(orig_idx)
                    last_was_space = True

        return "".join(parts), folded_to_orig

    def find_snippet(self, text: str, query: str, radius: int = 60) -> Snippet:
        """Locate *query* in *text* ignoring case and accents.

        The offset points into the original *text*. When the query only
        matched fuzzily (trigram similarity) and has no literal occurrence,
        the offset is None and the snippet is the start of the page.
        """
        needle = self.tokenize(query)
        if not text or not needle:
            return Snippet(offset=None, text=text[: radius * 2].strip())

        folded, folded_to_orig = self.fold_with_mapping(text)
        idx = folded.find(needle)
        if idx == -1:
            return Snippet(offset=None, text=text[: radius * 2].strip())

        start = folded_to_orig[idx]
        end = folded_to_orig[idx + len(needle) - 1] + 1
        snippet = text[max(0, start - radius) : min(len(text), end + radius)]
        return Snippet(offset=start, text=snippet.strip())


def _nfc_with_mapping(text: str) -> tuple[str, list[int]]:
    """NFC-normalize *text* one base character plus its combining marks at a time.

    Returns:
        (normalized, norm_to_orig) where norm_to_orig[j] is the index in
        *text* of the base character that produced normalized char j.
    """
    parts: list[str] = []
    norm_to_orig: list[int] = []
    start = 0
    for idx in range(1, len(text) + 1):
        if idx < len(text) and unicodedata.combining(text[idx]):
            continue
        cluster = unicodedata.normalize("NFC", text[start:idx])
        parts.append(cluster)
        norm_to_orig.extend([start] * len(cluster))
        start = idx
    return "".join(parts), norm_to_orig
