"""
Services package - diffing, classification and merge resolution.
"""

from semdiff.services.tokenizer import tokenize, count_words
from semdiff.services.differ import diff_words, diff_tokens, compact_operations, extract_spans
from semdiff.services.similarity import levenshtein, similarity
from semdiff.services.classifier import classify, explain_impact
from semdiff.services.moves import detect_moves
from semdiff.services.rules import apply_rules, merge_stats, rules_from_dicts, rule_to_dict
from semdiff.services.presets import MERGE_PRESETS, get_preset
from semdiff.services.analysis import analyze_diff, summarize_changes
from semdiff.services.pipeline import compare_documents, merge_documents, filter_in_bounds
from semdiff.services.parser import parse_document, blocks_to_text

__all__ = [
    "tokenize",
    "count_words",
    "diff_words",
    "diff_tokens",
    "compact_operations",
    "extract_spans",
    "levenshtein",
    "similarity",
    "classify",
    "explain_impact",
    "detect_moves",
    "apply_rules",
    "merge_stats",
    "rules_from_dicts",
    "rule_to_dict",
    "MERGE_PRESETS",
    "get_preset",
    "analyze_diff",
    "summarize_changes",
    "compare_documents",
    "merge_documents",
    "filter_in_bounds",
    "parse_document",
    "blocks_to_text",
]
