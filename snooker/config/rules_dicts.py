from __future__ import annotations

from typing import Callable, Iterable, Mapping, Sequence

from snooker.engine.text_norm import normalize_term, normalize_tld

__all__ = [
    "LIST_KINDS",
    "RulesDictError",
    "normalize_terms",
    "extract_spam_lists",
]

LIST_KINDS: tuple[str, ...] = ("keywords", "phrases", "leading_words", "tlds")


class RulesDictError(ValueError):
    """Raised when spam term lists fail validation."""


def _normalizer_for(kind: str) -> Callable[[str], str]:
    if kind not in LIST_KINDS:
        raise RulesDictError(f"unknown term list: {kind!r}")
    return normalize_tld if kind == "tlds" else normalize_term


def _coerce_iterable(value: object) -> Sequence[object] | None:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    return None


def normalize_terms(
    kind: str,
    items: Iterable[object],
) -> tuple[tuple[str, ...], list[object], list[str]]:
    """Normalise the entries of one term list.

    Returns ``(terms, rejected, duplicates)``: the canonical terms in
    first-seen order, the entries that were not strings or normalised to
    nothing, and the raw entries dropped as duplicates.
    """

    normalize = _normalizer_for(kind)
    terms: list[str] = []
    seen: set[str] = set()
    rejected: list[object] = []
    duplicates: list[str] = []
    for item in items:
        if not isinstance(item, str):
            rejected.append(item)
            continue
        canonical = normalize(item)
        if not canonical:
            rejected.append(item)
            continue
        if canonical in seen:
            duplicates.append(item)
            continue
        seen.add(canonical)
        terms.append(canonical)
    return tuple(terms), rejected, duplicates


def extract_spam_lists(
    cfg: Mapping[str, object] | None,
    *,
    strict: bool = True,
) -> dict[str, tuple[str, ...]]:
    """Extract the term lists present under ``cfg["lists"]``.

    Only the lists actually present are returned, so callers can overlay them
    on defaults. With ``strict`` a list that is not a sequence, or that holds
    non-string entries, raises :class:`RulesDictError`; otherwise offending
    values are skipped.
    """

    if not isinstance(cfg, Mapping):
        return {}
    lists_raw = cfg.get("lists")
    if lists_raw is None:
        return {}
    if not isinstance(lists_raw, Mapping):
        if strict:
            raise RulesDictError("'lists' must be a mapping of list name -> terms")
        return {}

    result: dict[str, tuple[str, ...]] = {}
    for kind in LIST_KINDS:
        if kind not in lists_raw:
            continue
        items = _coerce_iterable(lists_raw[kind])
        if items is None:
            if strict:
                raise RulesDictError(f"lists.{kind} must be a list of strings")
            continue
        terms, rejected, _ = normalize_terms(kind, items)
        non_strings = [item for item in rejected if not isinstance(item, str)]
        if non_strings and strict:
            raise RulesDictError(f"lists.{kind} contains non-string entries: {non_strings!r}")
        result[kind] = terms
    return result
