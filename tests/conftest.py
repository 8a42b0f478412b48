"""Shared fixtures for the recall pipeline tests."""

import sys
from pathlib import Path

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from duo_recall.enrich import ReferenceTables


def make_event(user, lexeme, hs, hc, ss, sc, lang="de", ui="en"):
    return {
        "user_id": user,
        "learning_language": lang,
        "ui_language": ui,
        "lexeme_string": lexeme,
        "history_seen": hs,
        "history_correct": hc,
        "session_seen": ss,
        "session_correct": sc,
        "timestamp": 1362076081,
        "lexeme_id": "76390c1350a8dac31186187e2fe1e178",
    }


@pytest.fixture
def reference_tables():
    translations = pd.DataFrame(
        {
            "learning_language": ["de", "de", "fr", "es"],
            "lemma": ["lernen", "katze", "chat", "perro"],
            "item": ["learn", "cats", "cat", "dog"],
        }
    )
    pos_reference = pd.DataFrame(
        {
            "pos": ["vblex", "n", "adj", "ij", "det"],
            "Type": ["verb", "noun", "adjective", "other", "function"],
        }
    )
    return ReferenceTables.from_frames(translations, pos_reference)


@pytest.fixture
def lernen_events():
    """User A once, user B twice (the second row supersedes the first)."""
    return pd.DataFrame(
        [
            make_event("A", "lernen/lernen<vblex><inf>", 0, 0, 5, 4),
            make_event("B", "lernen/lernen<vblex><inf>", 0, 0, 5, 3),
            make_event("B", "lernen/lernen<vblex><inf>", 5, 3, 2, 1),
        ]
    )
