"""
ingest.py
=========
Reads the raw learning-traces table in chunks, strips unused columns and
drops rows outside the population of interest.

A row is dropped (and counted in the DropReport) when
  * any required column is null, or a count column is not numeric,
  * ui_language is not the population under study,
  * its counts are inconsistent (negative, or correct > seen).
"""

import logging

import numpy as np
import pandas as pd
from tqdm import tqdm

from duo_recall import config
from duo_recall.diagnostics import (
    DropReport,
    INCONSISTENT_COUNTS,
    MISSING_FIELD,
    WRONG_UI_LANGUAGE,
)

logger = logging.getLogger(__name__)

STRING_DTYPES = {
    "user_id": str,
    "learning_language": str,
    "ui_language": str,
    "lexeme_string": str,
}


def check_columns(columns, required, what="input table"):
    missing = [c for c in required if c not in columns]
    if missing:
        raise ValueError(f"{what} is missing required columns: {', '.join(missing)}")


def filter_events(df: pd.DataFrame, ui_language=config.UI_LANGUAGE, report=None) -> pd.DataFrame:
    """
    Apply the ingest predicates to one frame of raw events and return a new
    frame holding only REQUIRED_COLUMNS, counts cast to int64.
    """
    check_columns(df.columns, config.REQUIRED_COLUMNS)
    if report is None:
        report = DropReport()

    out = df[config.REQUIRED_COLUMNS].copy()
    for col in config.COUNT_COLUMNS:
        out[col] = pd.to_numeric(out[col], errors="coerce")

    complete = out.notna().all(axis=1)
    report.add(MISSING_FIELD, (~complete).sum())
    out = out[complete]

    in_population = out["ui_language"] == ui_language
    report.add(WRONG_UI_LANGUAGE, (~in_population).sum())
    out = out[in_population]

    counts = out[config.COUNT_COLUMNS]
    consistent = (
        (counts >= 0).all(axis=1)
        & (counts == np.floor(counts)).all(axis=1)
        & (out["history_seen"] >= out["history_correct"])
        & (out["session_seen"] >= out["session_correct"])
    )
    report.add(INCONSISTENT_COUNTS, (~consistent).sum())
    out = out[consistent].copy()

    out[config.COUNT_COLUMNS] = out[config.COUNT_COLUMNS].astype("int64")
    return out


def load_events(path, ui_language=config.UI_LANGUAGE, chunksize=config.CHUNK_SIZE,
                sep=",", report=None) -> pd.DataFrame:
    """
    Stream the raw CSV in chunks of ``chunksize`` rows, filtering each chunk
    before it is kept in memory.
    """
    if report is None:
        report = DropReport()

    header = pd.read_csv(path, sep=sep, nrows=0)
    check_columns(header.columns, config.REQUIRED_COLUMNS, what=str(path))

    logger.info("Reading %s (chunks of %s)", path, f"{chunksize:,}")
    reader = pd.read_csv(
        path,
        sep=sep,
        usecols=config.REQUIRED_COLUMNS,
        dtype=STRING_DTYPES,
        chunksize=chunksize,
        low_memory=False,
    )

    kept = []
    for chunk in tqdm(reader, desc="Ingest", unit="chunk", disable=not logger.isEnabledFor(logging.INFO)):
        report.rows_read += len(chunk)
        kept.append(filter_events(chunk, ui_language=ui_language, report=report))

    if kept:
        events = pd.concat(kept, ignore_index=True)
    else:
        events = filter_events(header.reindex(columns=config.REQUIRED_COLUMNS), ui_language, report)

    logger.info("Kept %s of %s rows (ui_language=%s)",
                f"{len(events):,}", f"{report.rows_read:,}", ui_language)
    return events


def sample_users(df: pd.DataFrame, fraction: float, seed=config.RANDOM_SEED) -> pd.DataFrame:
    """Keep all rows of a random ``fraction`` of users, for fast trials."""
    if not 0 < fraction <= 1:
        raise ValueError(f"user fraction must be in (0, 1], got {fraction}")
    if fraction == 1.0:
        return df

    unique_users = np.sort(df["user_id"].unique())
    np.random.seed(seed)
    sampled_users = np.random.choice(
        unique_users,
        size=int(len(unique_users) * fraction),
        replace=False,
    )
    sampled = df[df["user_id"].isin(sampled_users)].copy()
    logger.info("Shrunk dataset to %.0f%% of users: %s -> %s rows",
                fraction * 100, f"{len(df):,}", f"{len(sampled):,}")
    return sampled
