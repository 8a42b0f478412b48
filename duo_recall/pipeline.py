"""
pipeline.py
===========
Ingest -> parse -> deduplicate/aggregate -> normalize/enrich -> output table.

Every stage returns a new DataFrame; the caller's frames are never modified.
"""

import logging
import os
import time

import pandas as pd

from duo_recall import config
from duo_recall.aggregate import aggregate_word_language, summarize_user_words
from duo_recall.diagnostics import DropReport
from duo_recall.enrich import ReferenceTables, enrich, require_cognate_status
from duo_recall.ingest import filter_events, load_events, sample_users
from duo_recall.lexeme_parser import enrich_dataframe

logger = logging.getLogger(__name__)


def build_summary(events: pd.DataFrame, tables: ReferenceTables, *,
                  tie_policy=config.TIE_POLICY, uncategorized=config.UNCATEGORIZED,
                  report=None) -> pd.DataFrame:
    """
    Run every stage after ingest on an already filtered event table and
    return the WordLanguageSummary table with OUTPUT_COLUMNS.
    """
    if report is None:
        report = DropReport()

    logger.info("Parsing lexeme strings ...")
    parsed = enrich_dataframe(events)

    logger.info("Selecting latest history per (user, word) ...")
    user_words = summarize_user_words(parsed, tie_policy=tie_policy, report=report)

    summary = aggregate_word_language(user_words)

    logger.info("Normalizing POS categories and attaching translations ...")
    summary = enrich(summary, tables, uncategorized=uncategorized, report=report)

    summary = summary[config.OUTPUT_COLUMNS]
    return summary.reset_index(drop=True)


def run(raw: pd.DataFrame, tables: ReferenceTables, *, ui_language=config.UI_LANGUAGE,
        tie_policy=config.TIE_POLICY, uncategorized=config.UNCATEGORIZED,
        user_fraction=1.0, complete_only=False, report=None):
    """
    Full pipeline over an in-memory raw event table.

    Returns ``(summary, report)``.
    """
    if report is None:
        report = DropReport()
    report.rows_read += len(raw)

    events = filter_events(raw, ui_language=ui_language, report=report)
    events = sample_users(events, user_fraction)
    summary = build_summary(events, tables, tie_policy=tie_policy,
                            uncategorized=uncategorized, report=report)
    if complete_only:
        summary = require_cognate_status(summary).reset_index(drop=True)
    return summary, report


def run_files(input_path, translations_path, pos_reference_path=None, *,
              ui_language=config.UI_LANGUAGE, tie_policy=config.TIE_POLICY,
              uncategorized=config.UNCATEGORIZED, user_fraction=1.0,
              complete_only=False, chunksize=config.CHUNK_SIZE, sep=","):
    """Same as :func:`run` but streams the raw table from disk."""
    t0 = time.time()
    report = DropReport()

    tables = ReferenceTables.load(translations_path, pos_reference_path, sep=sep)
    events = load_events(input_path, ui_language=ui_language, chunksize=chunksize,
                         sep=sep, report=report)
    events = sample_users(events, user_fraction)

    summary = build_summary(events, tables, tie_policy=tie_policy,
                            uncategorized=uncategorized, report=report)
    if complete_only:
        summary = require_cognate_status(summary).reset_index(drop=True)

    logger.info("Done: %s output rows (%.0fs total)", f"{len(summary):,}", time.time() - t0)
    return summary, report


def write_output(summary: pd.DataFrame, path) -> None:
    """Write Parquet when ``path`` ends in .parquet, CSV otherwise."""
    directory = os.path.dirname(os.fspath(path))
    if directory:
        os.makedirs(directory, exist_ok=True)

    if os.fspath(path).endswith(".parquet"):
        summary.to_parquet(path, index=False)
    else:
        summary.to_csv(path, index=False)
    logger.info("Saved %s rows to %s", f"{len(summary):,}", path)
