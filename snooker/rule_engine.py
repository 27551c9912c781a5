from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from .engine.evaluator import CommentEvaluator
from .engine.loader import load_scoring_config
from .engine.rules import rule_ids
from .engine.scoring_config import ScoringConfig
from .engine.types import Comment, ConfigMode, ScoreResult


class RuleEngine:
    """Score comments against a scoring configuration.

    Built-in defaults are used when neither ``config_path`` nor ``config`` is
    given. ``overrides`` is a mapping shaped like the YAML file and is applied
    on top of whichever base was selected.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        *,
        config: ScoringConfig | None = None,
        mode: ConfigMode | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        if config_path is not None and config is not None:
            raise ValueError("pass either config_path or config, not both")
        if config_path is not None:
            resolved = load_scoring_config(config_path, mode=mode)
            self._source: Optional[str] = str(config_path)
        else:
            resolved = config or ScoringConfig.default()
            self._source = None
        if overrides:
            resolved = ScoringConfig.from_mapping(overrides, base=resolved, strict=mode != "warn")
        self._evaluator = CommentEvaluator(resolved)

    def evaluate(self, comment: Comment) -> ScoreResult:
        return self._evaluator.evaluate(comment)

    def evaluate_many(self, comments: Iterable[Comment]) -> list[ScoreResult]:
        return self._evaluator.evaluate_many(comments)

    def describe_config(self, *, as_one_line: bool = False) -> str:
        config = self.config
        source = self._source or "defaults"
        if as_one_line:
            return f"config={source}, rules={len(self.rule_ids)}"
        return (
            f"config={source}\n"
            f"keywords={len(config.keywords)} phrases={len(config.phrases)} "
            f"leading_words={len(config.leading_words)} tlds={len(config.tlds)}\n"
            f"min_body_length={config.min_body_length} long_url_length={config.long_url_length} "
            f"consonant_run_length={config.consonant_run_length} history_cap={config.history_cap}"
        )

    @property
    def config(self) -> ScoringConfig:
        return self._evaluator.config

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return rule_ids(self._evaluator.rules)
