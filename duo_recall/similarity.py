"""
similarity.py
=============
Orthographic similarity between a word and its cross-language item, used
as the cognate status of a word.

    similarity(a, b) = 1 - levenshtein(a, b) / max(len(a), len(b))

1.0 means identical spellings, 0.0 means nothing in common.
"""

from functools import lru_cache

from nltk.metrics.distance import edit_distance
from nltk.stem.snowball import SnowballStemmer

_STEMMER = SnowballStemmer("english")


@lru_cache(maxsize=None)
def stem(word: str) -> str:
    """Strip inflectional suffixes from every whitespace-separated token ("cats" -> "cat")."""
    return " ".join(_STEMMER.stem(token) for token in word.split())


def similarity(a: str, b: str) -> float:
    """Normalized Levenshtein similarity in [0, 1]."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest


def cognate_similarity(item: str, base_form: str) -> float:
    """
    Similarity after stemming both words, so singular/plural (or other
    inflectional) variants are not penalized.

    ``base_form`` is stemmed as well as ``item``: stemming only ``item``
    would turn "animal" into "anim" and score identical words below 1.0.
    """
    return similarity(stem(item.lower()), stem(base_form.lower()))
