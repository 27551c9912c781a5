"""Term lists and numeric limits that drive the scoring rules.

Defaults follow the classic blog-comment heuristics: flattery openers,
pharmacy/casino vocabulary, a handful of TLDs that historically carried
most comment spam, and a 30-character ceiling for legitimate URLs.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from ..config.rules_dicts import LIST_KINDS, RulesDictError, extract_spam_lists, normalize_terms

__all__ = [
    "DEFAULT_KEYWORDS",
    "DEFAULT_PHRASES",
    "DEFAULT_LEADING_WORDS",
    "DEFAULT_TLDS",
    "DEFAULT_LIMITS",
    "LIMIT_KEYS",
    "ScoringConfig",
]

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "free",
    "viagra",
    "cialis",
    "levitra",
    "casino",
    "poker",
    "pills",
    "pharmacy",
    "payday",
    "loan",
    "replica",
    "porn",
    "xxx",
    "lottery",
    "cheap",
)

DEFAULT_PHRASES: tuple[str, ...] = (
    "limited time only",
    "click here",
    "buy now",
    "act now",
    "order now",
    "make money",
    "earn money",
    "work from home",
    "risk free",
    "100% free",
    "no credit check",
    "special promotion",
    "best price",
)

DEFAULT_LEADING_WORDS: tuple[str, ...] = (
    "interesting",
    "sorry",
    "nice",
    "cool",
)

DEFAULT_TLDS: tuple[str, ...] = (
    ".de",
    ".pl",
    ".cn",
    ".ru",
    ".info",
    ".biz",
)

DEFAULT_LIMITS: dict[str, int] = {
    "min_body_length": 20,
    "long_url_length": 30,
    "consonant_run_length": 5,
    "history_cap": 5,
}

LIMIT_KEYS: frozenset[str] = frozenset(DEFAULT_LIMITS)


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    phrases: tuple[str, ...] = DEFAULT_PHRASES
    leading_words: tuple[str, ...] = DEFAULT_LEADING_WORDS
    tlds: tuple[str, ...] = DEFAULT_TLDS
    min_body_length: int = DEFAULT_LIMITS["min_body_length"]
    long_url_length: int = DEFAULT_LIMITS["long_url_length"]
    consonant_run_length: int = DEFAULT_LIMITS["consonant_run_length"]
    history_cap: int = DEFAULT_LIMITS["history_cap"]

    def __post_init__(self) -> None:
        for name in LIMIT_KEYS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        for kind in LIST_KINDS:
            terms, _, _ = normalize_terms(kind, getattr(self, kind))
            object.__setattr__(self, kind, terms)

    @classmethod
    def default(cls) -> "ScoringConfig":
        return cls()

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any] | None,
        *,
        base: "ScoringConfig | None" = None,
        strict: bool = True,
    ) -> "ScoringConfig":
        """Overlay a mapping shaped like the YAML config file onto ``base``.

        Lists present in ``payload["lists"]`` replace the base lists unless
        ``extend_lists`` is true, in which case they are appended.
        """

        config = base or cls.default()
        if not payload:
            return config

        lists = extract_spam_lists(payload, strict=strict)
        if payload.get("extend_lists"):
            lists = {kind: config.extended_list(kind, terms) for kind, terms in lists.items()}

        limits_raw = payload.get("limits") or {}
        if not isinstance(limits_raw, Mapping):
            if strict:
                raise RulesDictError("'limits' must be a mapping")
            limits_raw = {}
        limits: dict[str, int] = {}
        for key, value in limits_raw.items():
            if key not in LIMIT_KEYS:
                if strict:
                    raise RulesDictError(f"unknown limit: {key!r}")
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                if strict:
                    raise RulesDictError(f"limits.{key} must be a positive integer, got {value!r}")
                continue
            limits[key] = value

        return replace(config, **lists, **limits)

    def with_overrides(self, **changes: Any) -> "ScoringConfig":
        return replace(self, **changes)

    def extended_list(self, kind: str, extra: tuple[str, ...]) -> tuple[str, ...]:
        current = getattr(self, kind)
        return current + tuple(term for term in extra if term not in current)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
