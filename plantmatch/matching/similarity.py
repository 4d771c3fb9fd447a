"""Normalized string similarity used by every scoring component."""
import re

from rapidfuzz import fuzz
from rapidfuzz.distance import JaroWinkler, Levenshtein

DEFAULT_SCORER = "levenshtein"

# All scorers return 0.0-1.0
SCORERS = {
    "levenshtein": Levenshtein.normalized_similarity,
    "indel": lambda a, b: fuzz.ratio(a, b) / 100.0,
    "jaro_winkler": JaroWinkler.normalized_similarity,
}

_WORD_RE = re.compile(r"\w+")


def get_scorer(name: str):
    try:
        return SCORERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown similarity scorer {name!r}, expected one of {sorted(SCORERS)}"
        ) from None


def similarity(a: str, b: str, scorer: str = DEFAULT_SCORER) -> float:
    """Similarity of two strings in [0, 1].

    Symmetric, 1.0 for identical non-empty strings and 0.0 whenever
    either side is empty (missing data never counts as a match).
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    return float(get_scorer(scorer)(a, b))


def trigrams(text: str) -> set[str]:
    """Trigram set in PostgreSQL pg_trgm style.

    Each word is lowercased and padded with two spaces in front and one
    behind, so "rosa" yields "  r", " ro", "ros", "osa", "sa ".
    """
    grams: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        grams.update(padded[i : i + 3] for i in range(len(padded) - 2))
    return grams


def trigram_similarity(a: str | None, b: str | None) -> float:
    """Jaccard overlap of trigram sets, the storage pre-filter metric."""
    if not a or not b:
        return 0.0
    ga, gb = trigrams(a), trigrams(b)
    if not ga or not gb:
        return 0.0
    return len(ga & gb) / len(ga | gb)
