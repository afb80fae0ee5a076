"""Scoring, hard rules and compatibility lookups."""

from .compatibility import CompatibilityEngine, normalized_partial_key
from .duplicates import DuplicateReport
from .rules_engine import RulesEngine
from .scorer import LayerAdjustment, LayerReason, ScoreBreakdown, score_combination

__all__ = [
    "CompatibilityEngine",
    "DuplicateReport",
    "LayerAdjustment",
    "LayerReason",
    "RulesEngine",
    "ScoreBreakdown",
    "normalized_partial_key",
    "score_combination",
]
