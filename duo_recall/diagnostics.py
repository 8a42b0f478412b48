"""Per-reason counters for rows silently dropped by the pipeline."""

import logging
from collections import Counter
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Drop reasons
MISSING_FIELD        = "missing_field"
WRONG_UI_LANGUAGE    = "wrong_ui_language"
INCONSISTENT_COUNTS  = "inconsistent_counts"
SUPERSEDED_HISTORY   = "superseded_history"
ZERO_TOTAL_SEEN      = "zero_total_seen"
NO_POS_CATEGORY      = "no_pos_category"
UNCATEGORIZED_POS    = "uncategorized_pos"
MISSING_TRANSLATION  = "missing_translation"

INGEST_REASONS = (MISSING_FIELD, WRONG_UI_LANGUAGE, INCONSISTENT_COUNTS)


@dataclass
class DropReport:
    """
    Accumulates how many rows each stage discarded, keyed by reason.

    ``MISSING_TRANSLATION`` is informational: those rows are kept with a
    null cognate status.
    """
    counts: Counter = field(default_factory=Counter)
    rows_read: int = 0

    def add(self, reason: str, n) -> None:
        n = int(n)
        if n:
            self.counts[reason] += n

    def __getitem__(self, reason: str) -> int:
        return self.counts[reason]

    @property
    def ingest_dropped(self) -> int:
        return sum(self.counts[r] for r in INGEST_REASONS)

    def as_dict(self) -> dict:
        return dict(sorted(self.counts.items()))

    def log_summary(self) -> None:
        logger.info("Rows read: %s", f"{self.rows_read:,}")
        for reason, n in sorted(self.counts.items()):
            logger.info("  %-22s %12s", reason, f"{n:,}")
