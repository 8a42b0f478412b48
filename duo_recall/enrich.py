"""
enrich.py
=========
Joins the word-language summary against the two reference tables:

  POS reference   pos tag -> coarse Type   (rows without a usable Type are dropped)
  translations    (learning_language, lemma) -> item, then cognate_status

Both tables are turned into dicts once and passed in as a ReferenceTables
object, so the join is a constant-time lookup per row.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

import numpy as np
import pandas as pd

from duo_recall import config
from duo_recall.diagnostics import (
    DropReport,
    MISSING_TRANSLATION,
    NO_POS_CATEGORY,
    UNCATEGORIZED_POS,
)
from duo_recall.ingest import check_columns
from duo_recall.lexeme_parser import default_pos_reference
from duo_recall.similarity import cognate_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceTables:
    translations: Mapping[Tuple[str, str], str] = field(default_factory=dict)
    pos_categories: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_frames(cls, translations: pd.DataFrame, pos_reference: pd.DataFrame) -> "ReferenceTables":
        check_columns(translations.columns, config.TRANSLATION_COLUMNS, what="translation table")
        check_columns(pos_reference.columns, config.POS_REFERENCE_COLUMNS, what="POS reference")

        # first entry wins on duplicated keys
        tr = translations.dropna(subset=config.TRANSLATION_COLUMNS)
        tr = tr.drop_duplicates(subset=["learning_language", "lemma"], keep="first")
        lookup = dict(zip(zip(tr["learning_language"], tr["lemma"]), tr["item"]))

        pos = pos_reference.dropna(subset=config.POS_REFERENCE_COLUMNS)
        pos = pos.drop_duplicates(subset=["pos"], keep="first")
        categories = dict(zip(pos["pos"], pos["Type"]))

        return cls(MappingProxyType(lookup), MappingProxyType(categories))

    @classmethod
    def load(cls, translations_path, pos_reference_path=None, sep=","):
        """Read both reference CSVs; without a POS file the built-in Apertium table is used."""
        translations = pd.read_csv(translations_path, sep=sep, dtype=str, keep_default_na=False, na_values=[""])
        if pos_reference_path is None:
            pos_reference = default_pos_reference()
        else:
            pos_reference = pd.read_csv(pos_reference_path, sep=sep, dtype=str, keep_default_na=False, na_values=[""])
        tables = cls.from_frames(translations, pos_reference)
        logger.info("Loaded %s translations, %s POS tags",
                    f"{len(tables.translations):,}", f"{len(tables.pos_categories):,}")
        return tables


def normalize_categories(df: pd.DataFrame, pos_categories: Mapping[str, str],
                         uncategorized=config.UNCATEGORIZED, report=None) -> pd.DataFrame:
    """Add ``simple_pos``; drop rows whose tag is unknown or maps to ``uncategorized``."""
    if report is None:
        report = DropReport()

    out = df.copy()
    out["simple_pos"] = out["part_of_speech"].map(pos_categories.get)

    matched = out["simple_pos"].notna()
    report.add(NO_POS_CATEGORY, (~matched).sum())
    out = out[matched]

    categorized = out["simple_pos"] != uncategorized
    report.add(UNCATEGORIZED_POS, (~categorized).sum())
    return out[categorized].copy()


def attach_translations(df: pd.DataFrame, translations: Mapping[Tuple[str, str], str],
                        report=None) -> pd.DataFrame:
    """
    Add ``item`` and ``cognate_status``. Rows without a translation are kept
    with both left null.
    """
    if report is None:
        report = DropReport()

    out = df.copy()
    keys = zip(out["learning_language"], out["base_form"])
    items = [translations.get(k) for k in keys]
    out["item"] = pd.Series(items, index=out.index, dtype=object)

    scores = [
        cognate_similarity(item, base) if item is not None else np.nan
        for item, base in zip(items, out["base_form"])
    ]
    out["cognate_status"] = pd.Series(scores, index=out.index, dtype="float64")

    report.add(MISSING_TRANSLATION, out["item"].isna().sum())
    return out


def enrich(df: pd.DataFrame, tables: ReferenceTables, uncategorized=config.UNCATEGORIZED,
           report=None) -> pd.DataFrame:
    if report is None:
        report = DropReport()
    out = normalize_categories(df, tables.pos_categories, uncategorized=uncategorized, report=report)
    return attach_translations(out, tables.translations, report=report)


def require_cognate_status(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with a non-null cognate_status, for consumers that need complete cases."""
    return df[df["cognate_status"].notna()].copy()
