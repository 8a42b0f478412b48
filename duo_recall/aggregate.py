"""
aggregate.py
============
Shrinks the event table to one row per (base_form, learning_language).

Step 1  keep, per (user_id, learning_language, lexeme_string), the event(s) carrying the
        largest history_seen: that row already contains the cumulative
        history of the pair, earlier ones are superseded.
Step 2  add per-row totals and recall, drop rows never seen.
Step 3  average the totals across users for each (base_form, learning_language).
"""

import logging

import pandas as pd

from duo_recall import config
from duo_recall.diagnostics import DropReport, SUPERSEDED_HISTORY, ZERO_TOTAL_SEEN

logger = logging.getLogger(__name__)

USER_WORD_KEY = ["user_id", "learning_language", "lexeme_string"]
WORD_LANGUAGE_KEY = ["base_form", "learning_language"]
MEAN_COLUMNS = ["total_seen", "total_correct", "total_recall", "modifier_count"]


def select_latest_history(df: pd.DataFrame, tie_policy=config.TIE_POLICY, report=None) -> pd.DataFrame:
    """
    Keep the row(s) with max(history_seen) inside each
    (user_id, learning_language, lexeme_string).

    tie_policy="all" keeps every row sharing the maximum; "single" keeps one,
    preferring the largest session_seen, then session_correct, then
    history_correct. Both rules depend only on row values, not row order.
    """
    if tie_policy not in config.TIE_POLICIES:
        raise ValueError(f"tie_policy must be one of {config.TIE_POLICIES}, got {tie_policy!r}")
    if report is None:
        report = DropReport()

    max_seen = df.groupby(USER_WORD_KEY, sort=False)["history_seen"].transform("max")
    latest = df[df["history_seen"] == max_seen]

    if tie_policy == "single":
        order = USER_WORD_KEY + ["session_seen", "session_correct", "history_correct"]
        ascending = [True] * len(USER_WORD_KEY) + [False, False, False]
        latest = (
            latest.sort_values(order, ascending=ascending, kind="mergesort")
                  .drop_duplicates(subset=USER_WORD_KEY, keep="first")
        )

    report.add(SUPERSEDED_HISTORY, len(df) - len(latest))
    return latest.copy()


def add_totals(df: pd.DataFrame, report=None) -> pd.DataFrame:
    """total_seen / total_correct / total_recall per row; rows with total_seen == 0 are dropped."""
    if report is None:
        report = DropReport()

    out = df.copy()
    out["total_seen"] = out["history_seen"] + out["session_seen"]
    out["total_correct"] = out["history_correct"] + out["session_correct"]

    seen = out["total_seen"] > 0
    report.add(ZERO_TOTAL_SEEN, (~seen).sum())
    out = out[seen].copy()

    out["total_recall"] = out["total_correct"] / out["total_seen"]
    return out


def _dominant_pos(df: pd.DataFrame) -> pd.Series:
    # most frequent tag per group, ties -> alphabetically first
    counts = (
        df.groupby(WORD_LANGUAGE_KEY + ["part_of_speech"])
          .size()
          .rename("n")
          .reset_index()
    )
    counts = counts.sort_values(
        WORD_LANGUAGE_KEY + ["n", "part_of_speech"],
        ascending=[True, True, False, True],
        kind="mergesort",
    )
    return counts.drop_duplicates(subset=WORD_LANGUAGE_KEY).set_index(WORD_LANGUAGE_KEY)["part_of_speech"]


def aggregate_word_language(df: pd.DataFrame) -> pd.DataFrame:
    """
    Average the user-word summaries across users, one row per
    (base_form, learning_language), sorted by that key.
    """
    numeric = df[WORD_LANGUAGE_KEY + MEAN_COLUMNS].copy()
    numeric[MEAN_COLUMNS] = numeric[MEAN_COLUMNS].astype("float64")

    summary = numeric.groupby(WORD_LANGUAGE_KEY, sort=True)[MEAN_COLUMNS].mean()
    summary["n_users"] = df.groupby(WORD_LANGUAGE_KEY, sort=True)["user_id"].nunique()
    summary["part_of_speech"] = _dominant_pos(df)

    summary = summary.reset_index()
    logger.info("Aggregated %s user-word rows into %s (base_form, language) rows",
                f"{len(df):,}", f"{len(summary):,}")
    return summary


def summarize_user_words(df: pd.DataFrame, tie_policy=config.TIE_POLICY, report=None) -> pd.DataFrame:
    """Steps 1 and 2: the UserWordSummary table."""
    if report is None:
        report = DropReport()
    latest = select_latest_history(df, tie_policy=tie_policy, report=report)
    return add_totals(latest, report=report)
