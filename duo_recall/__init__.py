"""Recall and cognate aggregation over the Duolingo learning-traces table."""

from duo_recall.diagnostics import DropReport
from duo_recall.enrich import ReferenceTables
from duo_recall.lexeme_parser import FormatError, ParsedLexeme, parse_lexeme
from duo_recall.pipeline import build_summary, run, run_files, write_output
from duo_recall.similarity import similarity

__all__ = [
    "DropReport",
    "FormatError",
    "ParsedLexeme",
    "ReferenceTables",
    "build_summary",
    "parse_lexeme",
    "run",
    "run_files",
    "similarity",
    "write_output",
]
