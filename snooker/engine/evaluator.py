from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .links import extract_links, url_candidates
from .rules import RULES, Rule
from .scoring_config import ScoringConfig
from .text_norm import parse_markup, visible_text
from .types import Comment, PreparedComment, RuleHit, ScoreResult

logger = logging.getLogger(__name__)

__all__ = ["CommentEvaluator", "evaluate", "prepare_comment"]


def prepare_comment(comment: Comment) -> PreparedComment:
    """Parse the body once so every rule sees the same links and text."""

    soup = parse_markup(comment.body)
    links = extract_links(soup)
    return PreparedComment(
        comment=comment,
        text=visible_text(soup),
        links=links,
        urls=url_candidates(comment.url, links),
    )


class CommentEvaluator:
    def __init__(
        self,
        config: ScoringConfig | None = None,
        rules: Sequence[Rule] = RULES,
    ) -> None:
        self._config = config or ScoringConfig.default()
        self._rules = tuple(rules)

    @property
    def config(self) -> ScoringConfig:
        return self._config

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def evaluate(self, comment: Comment) -> ScoreResult:
        prepared = prepare_comment(comment)
        hits: list[RuleHit] = []
        for rule in self._rules:
            delta = int(rule.apply(prepared, self._config))
            if delta:
                hits.append(RuleHit(rule_id=rule.id, delta=delta, detail=rule.description))
        score = sum(hit.delta for hit in hits)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "scored comment: score=%d links=%d hits=%s",
                score,
                len(prepared.links),
                ", ".join(f"{hit.rule_id}{hit.delta:+d}" for hit in hits) or "none",
            )
        return ScoreResult(score=score, hits=tuple(hits))

    def evaluate_many(self, comments: Iterable[Comment]) -> list[ScoreResult]:
        return [self.evaluate(comment) for comment in comments]


def evaluate(comment: Comment, config: ScoringConfig | None = None) -> ScoreResult:
    """Score ``comment`` with ``config`` (built-in defaults when omitted)."""

    return CommentEvaluator(config).evaluate(comment)
