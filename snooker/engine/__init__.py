from __future__ import annotations

from .errors import ConfigError, SnookerError
from .evaluator import CommentEvaluator, evaluate, prepare_comment
from .rules import RULES, Rule
from .scoring_config import ScoringConfig
from .types import Comment, Link, RuleHit, ScoreResult, Status, ValidationIssue

__all__ = [
    "Comment",
    "CommentEvaluator",
    "ConfigError",
    "Link",
    "RULES",
    "Rule",
    "RuleHit",
    "ScoreResult",
    "ScoringConfig",
    "SnookerError",
    "Status",
    "ValidationIssue",
    "evaluate",
    "prepare_comment",
]
