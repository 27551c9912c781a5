"""Heuristic spam scoring for blog comments."""

from __future__ import annotations

from .engine import (
    Comment,
    ConfigError,
    RuleHit,
    ScoreResult,
    ScoringConfig,
    SnookerError,
    Status,
    evaluate,
)
from .rule_engine import RuleEngine

__all__ = [
    "Comment",
    "ConfigError",
    "RuleEngine",
    "RuleHit",
    "ScoreResult",
    "ScoringConfig",
    "SnookerError",
    "Status",
    "evaluate",
]
