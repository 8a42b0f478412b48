"""
config.py
=========
Constants shared by every stage of the recall pipeline. Each value can be
overridden per call (keyword arguments) or from the command line.
"""

# Input file paths
RAW_DATA_PATH     = "data/learning_traces.13m.csv"
TRANSLATIONS_PATH = "data/translations.csv"
POS_REFERENCE_PATH = "data/pos_reference.csv"
OUTPUT_PATH       = "results/word_language_summary.csv"

CHUNK_SIZE = 500_000        # rows per chunk when streaming the raw CSV
RANDOM_SEED = 42

# Population under study: learners using the English interface
UI_LANGUAGE = "en"

# Raw event columns kept after ingest (everything else is stripped)
COUNT_COLUMNS = ["history_seen", "history_correct", "session_seen", "session_correct"]
REQUIRED_COLUMNS = [
    "user_id", "learning_language", "ui_language", "lexeme_string",
] + COUNT_COLUMNS

# Reference table columns
TRANSLATION_COLUMNS   = ["learning_language", "lemma", "item"]
POS_REFERENCE_COLUMNS = ["pos", "Type"]

# Coarse POS bucket that is dropped by the category normalizer
UNCATEGORIZED = "other"

# How ties at max(history_seen) within one (user, word) are resolved:
#   "all"    -> keep every tied row
#   "single" -> keep exactly one row per (user, word)
TIE_POLICY = "all"
TIE_POLICIES = ("all", "single")

OUTPUT_COLUMNS = [
    "base_form", "learning_language",
    "total_seen", "total_correct", "total_recall",
    "item", "cognate_status", "simple_pos", "modifier_count",
    "n_users",
]
