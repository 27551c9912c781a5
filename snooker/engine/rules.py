from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from .links import strip_urls, url_host
from .scoring_config import ScoringConfig
from .text_norm import first_word, normalize_body, normalize_term
from .types import PreparedComment

RuleFn = Callable[[PreparedComment, ScoringConfig], int]

__all__ = ["Rule", "RuleFn", "RULES", "rule_ids"]

LEADING_WORD_PENALTY = -10
AUTHOR_URL_PENALTY = -2
_CONSONANTS = "bcdfghjklmnpqrstvwxz"


@dataclass(frozen=True, slots=True)
class Rule:
    id: str
    description: str
    apply: RuleFn


@lru_cache(maxsize=64)
def _term_pattern(terms: tuple[str, ...]) -> re.Pattern[str] | None:
    if not terms:
        return None
    ordered = sorted(terms, key=len, reverse=True)
    return re.compile("|".join(re.escape(term) for term in ordered))


@lru_cache(maxsize=16)
def _consonant_pattern(run_length: int) -> re.Pattern[str]:
    return re.compile(rf"[{_CONSONANTS}]{{{run_length},}}", re.IGNORECASE)


def _count_terms(terms: tuple[str, ...], text: str) -> int:
    """Occurrences of any term in ``text``; overlapping matches count once."""

    pattern = _term_pattern(terms)
    if pattern is None:
        return 0
    return len(pattern.findall(normalize_term(text)))


def link_count(prepared: PreparedComment, config: ScoringConfig) -> int:
    return 2 if len(prepared.links) < 2 else 0


def link_with_length(prepared: PreparedComment, config: ScoringConfig) -> int:
    if len(prepared.links) == 1 and len(prepared.text) >= config.min_body_length:
        return 1
    return 0


def keyword_in_link(prepared: PreparedComment, config: ScoringConfig) -> int:
    pattern = _term_pattern(config.keywords)
    if pattern is None:
        return 0
    matching = 0
    for link in prepared.links:
        if pattern.search(normalize_term(link.href)) or pattern.search(normalize_term(link.text)):
            matching += 1
    return -matching


def spam_phrase(prepared: PreparedComment, config: ScoringConfig) -> int:
    return -_count_terms(config.phrases, prepared.text)


def leading_word(prepared: PreparedComment, config: ScoringConfig) -> int:
    word = first_word(prepared.text)
    if word and word in config.leading_words:
        return LEADING_WORD_PENALTY
    return 0


def author_url(prepared: PreparedComment, config: ScoringConfig) -> int:
    author = prepared.comment.author
    if not author:
        return 0
    lowered = author.casefold()
    if "http://" in lowered or "https://" in lowered:
        return AUTHOR_URL_PENALTY
    return 0


def keyword_in_url(prepared: PreparedComment, config: ScoringConfig) -> int:
    url = prepared.comment.url
    if not url:
        return 0
    return -_count_terms(config.keywords, url)


def spam_tld(prepared: PreparedComment, config: ScoringConfig) -> int:
    if not config.tlds:
        return 0
    matching = 0
    for url in prepared.urls:
        host = url_host(url)
        if host and host.endswith(config.tlds):
            matching += 1
    return -matching


def long_url(prepared: PreparedComment, config: ScoringConfig) -> int:
    return -sum(1 for url in prepared.urls if len(url) > config.long_url_length)


def consonant_run(prepared: PreparedComment, config: ScoringConfig) -> int:
    pattern = _consonant_pattern(config.consonant_run_length)
    return -len(pattern.findall(strip_urls(prepared.text)))


def history(prepared: PreparedComment, config: ScoringConfig) -> int:
    """Signed accepted-minus-rejected difference, clamped to ``history_cap``.

    One missing count reads as zero; both missing means no history.
    """

    accepted = prepared.comment.previously_accepted_for_email
    rejected = prepared.comment.previously_rejected_for_email
    if accepted is None and rejected is None:
        return 0
    difference = (accepted or 0) - (rejected or 0)
    cap = config.history_cap
    return max(-cap, min(cap, difference))


def duplicate_body(prepared: PreparedComment, config: ScoringConfig) -> int:
    previous = prepared.comment.previous_comment_bodies
    if not previous:
        return 0
    current = normalize_body(prepared.comment.body)
    if not current:
        return 0
    return -sum(1 for body in previous if normalize_body(body) == current)


RULES: tuple[Rule, ...] = (
    Rule("link_count", "fewer than two links", link_count),
    Rule("link_with_length", "single link in a substantial body", link_with_length),
    Rule("keyword_in_link", "spam keyword in link", keyword_in_link),
    Rule("spam_phrase", "spam phrase in body", spam_phrase),
    Rule("leading_word", "spammy leading word", leading_word),
    Rule("author_url", "URL in author name", author_url),
    Rule("keyword_in_url", "spam keyword in submitted URL", keyword_in_url),
    Rule("spam_tld", "spammy top-level domain", spam_tld),
    Rule("long_url", "long URL", long_url),
    Rule("consonant_run", "consonant run in body", consonant_run),
    Rule("history", "submission history for email", history),
    Rule("duplicate_body", "duplicate of a previous comment", duplicate_body),
)


def rule_ids(rules: tuple[Rule, ...] = RULES) -> tuple[str, ...]:
    return tuple(rule.id for rule in rules)
