"""
lexeme_parser.py
================
Parses Duolingo lexeme strings into surface form, base form (lemma),
part-of-speech tag and modifier count.

Lexeme string format:  surface_form/lemma<tag1><tag2>...
Example:  lernt/lernen<vblex><pri><p3><sg>

The first tag is the fine-grained part of speech. Every bracketed tag,
the POS tag included, counts as one modifier.
"""

import logging
import re
from typing import NamedTuple

import pandas as pd

logger = logging.getLogger(__name__)

# surface (no '/' or '<') / base (up to first '<') <pos>
LEXEME_PATTERN = r'^(?P<surface_form>[^/<]*)/(?P<base_form>[^<]*)<(?P<part_of_speech>[^<>]+)>'
LEXEME_RE = re.compile(LEXEME_PATTERN)

PARSED_COLUMNS = ["surface_form", "base_form", "part_of_speech", "modifier_count"]

# ---------------------------------------------------------------------------
# Tag taxonomy  (Apertium morphological analyser conventions)
# ---------------------------------------------------------------------------

POS_MAP = {
    # Verbs
    "vblex":   "verb_lexical",
    "vbser":   "verb_ser",          # to be (ser/être/sein)
    "vbhaver": "verb_haver",        # to have (auxiliary)
    "vbmod":   "verb_modal",
    "vaux":    "verb_auxiliary",
    "vbdo":    "verb_do",
    # Nouns
    "n":       "noun",
    "np":      "proper_noun",
    "abbr":    "abbreviation",
    "acr":     "acronym",
    # Determiners / Articles
    "det":     "determiner",
    "predet":  "pre_determiner",
    # Adjectives / Adverbs
    "adj":     "adjective",
    "adv":     "adverb",
    "preadv":  "pre_adverb",
    # Pronouns
    "prn":     "pronoun",
    # Prepositions
    "pr":      "preposition",
    "prep":    "preposition",
    "pprep":   "post_preposition",
    # Conjunctions
    "cnj":     "conjunction",
    "cnjadv":  "conjunction_adverbial",
    "cnjcoo":  "conjunction_coordinating",
    "cnjsub":  "conjunction_subordinating",
    # Numbers
    "num":     "numeral",
    "ord":     "ordinal",
    # Other
    "ij":      "interjection",
    "sym":     "symbol",
    "pun":     "punctuation",
    "x":       "other",
}

# Readable label -> coarse category used by the default POS reference
LABEL_TYPES = {
    "noun":        "noun",
    "proper_noun": "noun",
    "adjective":   "adjective",
    "adverb":      "adverb",
    "pre_adverb":  "adverb",
}
FUNCTION_LABELS = (
    "determiner", "pre_determiner", "pronoun", "preposition",
    "post_preposition", "conjunction", "numeral", "ordinal",
)


class FormatError(ValueError):
    """A lexeme string violates the ``surface/base<pos>...`` contract."""

    def __init__(self, lexeme, reason, row=None):
        self.lexeme = lexeme
        self.reason = reason
        self.row = row
        where = f" at row {row}" if row is not None else ""
        super().__init__(f"Malformed lexeme string{where}: {lexeme!r} ({reason})")


class ParsedLexeme(NamedTuple):
    surface_form: str
    base_form: str
    part_of_speech: str
    modifier_count: int


def _diagnose(lexeme) -> str:
    """Describe why ``lexeme`` does not parse, or return '' if it does."""
    if not isinstance(lexeme, str):
        return f"expected a string, got {type(lexeme).__name__}"
    slash = lexeme.find("/")
    if slash < 0:
        return "missing '/'"
    first_tag = lexeme.find("<")
    if first_tag < 0:
        return "missing '<pos>' tag"
    if first_tag < slash:
        return "'/' appears after the first tag"
    if lexeme.count("<") != lexeme.count(">"):
        return "unbalanced '<' and '>'"
    tag_end = lexeme.find(">", first_tag)
    if 0 <= lexeme.find("<", first_tag + 1) < tag_end:
        return "nested '<' inside the POS tag"
    if LEXEME_RE.match(lexeme) is None:
        return "empty or unterminated '<pos>' tag"
    return ""


def parse_lexeme(lexeme: str) -> ParsedLexeme:
    """
    Parse a single lexeme string.

    >>> parse_lexeme("lernt/lernen<vblex><pres><3><sg>")
    ParsedLexeme(surface_form='lernt', base_form='lernen', part_of_speech='vblex', modifier_count=4)

    Raises
    ------
    FormatError
        if the string has no '/', no complete '<pos>' tag, or unbalanced
        angle brackets.
    """
    reason = _diagnose(lexeme)
    if reason:
        raise FormatError(lexeme, reason)
    m = LEXEME_RE.match(lexeme)
    return ParsedLexeme(
        surface_form=m.group("surface_form"),
        base_form=m.group("base_form"),
        part_of_speech=m.group("part_of_speech"),
        modifier_count=lexeme.count("<"),
    )


def parse_lexemes(lexemes: pd.Series) -> pd.DataFrame:
    """
    Vectorised parser: returns a DataFrame aligned with ``lexemes.index``
    holding the PARSED_COLUMNS.

    Each distinct lexeme string is parsed once (the 13M-row table has only
    ~20K of them) and the result is mapped back onto the rows. The first
    malformed string aborts the run with a FormatError naming its row.
    """
    unique = pd.Series(lexemes.unique(), dtype=object)
    is_str = unique.map(lambda v: isinstance(v, str)).astype(bool)
    text = unique.where(is_str, "")

    parsed = text.str.extract(LEXEME_PATTERN)
    opens = text.str.count("<")
    closes = text.str.count(">")

    bad = ~is_str | parsed["base_form"].isna() | (opens != closes)
    if bad.any():
        offending = lexemes[lexemes.isin(unique[bad])]
        row, value = offending.index[0], offending.iloc[0]
        row = getattr(row, "item", lambda: row)()
        raise FormatError(value, _diagnose(value), row=row)

    parsed["modifier_count"] = opens.astype("int64")
    parsed.index = unique.to_numpy()

    out = parsed.reindex(lexemes.to_numpy())[PARSED_COLUMNS]
    out.index = lexemes.index
    logger.debug("Parsed %s distinct lexeme strings", f"{len(unique):,}")
    return out


def enrich_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    Given a DataFrame with a 'lexeme_string' column, return a copy with
    the parsed lexeme columns added.
    """
    parsed = parse_lexemes(df["lexeme_string"])
    out = df.copy()
    for col in PARSED_COLUMNS:
        out[col] = parsed[col].to_numpy()
    return out


# ---------------------------------------------------------------------------
# Built-in POS reference
# ---------------------------------------------------------------------------

def coarse_type(tag: str) -> str:
    """Map a fine-grained Apertium tag to noun/verb/adjective/adverb/function/other."""
    label = POS_MAP.get(tag.lower())
    if label is None:
        return "other"
    if label.startswith("verb"):
        return "verb"
    if label.startswith("conjunction") or label in FUNCTION_LABELS:
        return "function"
    return LABEL_TYPES.get(label, "other")


def default_pos_reference() -> pd.DataFrame:
    """POS reference table (columns ``pos``, ``Type``) built from POS_MAP."""
    return pd.DataFrame(
        {"pos": list(POS_MAP), "Type": [coarse_type(t) for t in POS_MAP]}
    )
