from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from ..config.rules_dicts import LIST_KINDS, normalize_terms
from .errors import ConfigError
from .scoring_config import LIMIT_KEYS, ScoringConfig
from .types import ConfigMode, LoadResult, ValidationIssue

__all__ = [
    "CONFIG_VERSION",
    "load_config_result",
    "load_scoring_config",
]

CONFIG_VERSION = 1

_ALLOWED_KEYS = {"version", "mode", "extend_lists", "lists", "limits"}

logger = logging.getLogger("snooker.engine.config")


def _record_issue(
    issues: list[ValidationIssue],
    counts: dict[str, int],
    level: str,
    code: str,
    where: str,
    msg: str,
    hint: str | None = None,
) -> None:
    issues.append(ValidationIssue(level=level, code=code, where=where, msg=msg, hint=hint))
    counts["errors" if level == "error" else "warnings"] += 1


def _new_counts() -> dict[str, int]:
    return {
        "lists": 0,
        "terms": 0,
        "limits": 0,
        "errors": 0,
        "warnings": 0,
        "unknown_keys": 0,
        "collisions": 0,
    }


def _resolve_mode(raw_data: Mapping[str, Any], override_mode: ConfigMode | None) -> ConfigMode:
    yaml_mode = str(raw_data.get("mode", "")).strip().lower() or None
    if yaml_mode not in {"warn", "strict"}:
        yaml_mode = None
    return (override_mode or yaml_mode or "warn")  # type: ignore[return-value]


def _check_unknown(
    keys: Sequence[Any],
    allowed: set[str] | frozenset[str],
    where: str,
    *,
    strict: bool,
    issues: list[ValidationIssue],
    counts: dict[str, int],
) -> bool:
    unknown = sorted(str(key) for key in keys if key not in allowed)
    if not unknown:
        return False
    counts["unknown_keys"] += len(unknown)
    level = "error" if strict else "warning"
    _record_issue(
        issues,
        counts,
        level,
        "SC-K001",
        where,
        f"Unknown keys detected: {', '.join(unknown)}",
        "They are ignored. Remove them or check for typos.",
    )
    return strict


def _load_lists(
    lists_raw: Any,
    *,
    strict: bool,
    issues: list[ValidationIssue],
    counts: dict[str, int],
) -> tuple[dict[str, tuple[str, ...]], bool]:
    fatal = False
    lists: dict[str, tuple[str, ...]] = {}
    if lists_raw is None:
        return lists, fatal
    if not isinstance(lists_raw, Mapping):
        level = "error" if strict else "warning"
        _record_issue(issues, counts, level, "SC-L001", "lists", "lists must be a mapping of list name -> terms")
        return lists, strict

    if _check_unknown(list(lists_raw.keys()), set(LIST_KINDS), "lists", strict=strict, issues=issues, counts=counts):
        fatal = True

    for kind in LIST_KINDS:
        if kind not in lists_raw:
            continue
        where = f"lists.{kind}"
        items = lists_raw[kind]
        if items is None:
            items = []
        if not isinstance(items, Sequence) or isinstance(items, (str, bytes, bytearray)):
            level = "error" if strict else "warning"
            _record_issue(issues, counts, level, "SC-L001", where, f"{where} must be a list of strings; list skipped")
            fatal = fatal or strict
            continue

        terms, rejected, duplicates = normalize_terms(kind, items)
        for item in rejected:
            if isinstance(item, str):
                _record_issue(issues, counts, "warning", "SC-L002", where, "Empty entry after normalization was skipped")
            else:
                level = "error" if strict else "warning"
                _record_issue(issues, counts, level, "SC-L001", where, f"Non-string entry skipped: {item!r}")
                fatal = fatal or strict
        if duplicates:
            counts["collisions"] += len(duplicates)
            _record_issue(
                issues,
                counts,
                "warning",
                "SC-L003",
                where,
                f"Duplicate entries after normalization: {', '.join(repr(d) for d in duplicates)}",
            )
        lists[kind] = terms
        counts["lists"] += 1
        counts["terms"] += len(terms)
    return lists, fatal


def _load_limits(
    limits_raw: Any,
    *,
    strict: bool,
    issues: list[ValidationIssue],
    counts: dict[str, int],
) -> tuple[dict[str, int], bool, bool]:
    fatal = False
    invalid = False
    limits: dict[str, int] = {}
    if limits_raw is None:
        return limits, fatal, invalid
    if not isinstance(limits_raw, Mapping):
        _record_issue(issues, counts, "error", "SC-N001", "limits", "limits must be a mapping of name -> integer")
        return limits, strict, not strict

    if _check_unknown(list(limits_raw.keys()), LIMIT_KEYS, "limits", strict=strict, issues=issues, counts=counts):
        fatal = True

    for key in sorted(LIMIT_KEYS):
        if key not in limits_raw:
            continue
        value = limits_raw[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            _record_issue(
                issues,
                counts,
                "error",
                "SC-N001",
                f"limits.{key}",
                f"limits.{key} must be a positive integer, got {value!r}",
            )
            if strict:
                fatal = True
            else:
                invalid = True
            continue
        limits[key] = value
        counts["limits"] += 1
    return limits, fatal, invalid


def load_config_result(
    path: str | Path,
    *,
    override_mode: ConfigMode | None = None,
    base: ScoringConfig | None = None,
) -> LoadResult:
    """Read and validate a scoring configuration file.

    Problems are collected as :class:`ValidationIssue` entries instead of
    raised. ``status`` is ``ok`` when a usable config was built, ``invalid``
    when errors were found in warn mode, and ``error`` when the file could
    not be read or strict mode rejected it.
    """

    counts = _new_counts()
    issues: list[ValidationIssue] = []
    fallback_mode: ConfigMode = override_mode or "warn"

    try:
        with Path(path).open("r", encoding="utf-8") as fp:
            raw_data = yaml.safe_load(fp) or {}
    except OSError as exc:
        _record_issue(issues, counts, "error", "SC-IO", "top-level", f"Failed to read config file: {exc}")
        return LoadResult(status="error", mode=fallback_mode, config=None, issues=issues, counts=counts)
    except yaml.YAMLError as exc:
        _record_issue(issues, counts, "error", "SC-YAML", "top-level", f"Failed to parse YAML: {exc}")
        return LoadResult(status="error", mode=fallback_mode, config=None, issues=issues, counts=counts)

    if not isinstance(raw_data, Mapping):
        _record_issue(issues, counts, "error", "SC-V000", "top-level", "Scoring configuration must be a mapping")
        return LoadResult(status="error", mode=fallback_mode, config=None, issues=issues, counts=counts)

    mode = _resolve_mode(raw_data, override_mode)
    strict = mode == "strict"
    fatal = False
    invalid = False

    if _check_unknown(list(raw_data.keys()), _ALLOWED_KEYS, "top-level", strict=strict, issues=issues, counts=counts):
        fatal = True

    if raw_data.get("version") != CONFIG_VERSION:
        _record_issue(
            issues,
            counts,
            "error",
            "SC-V001",
            "version",
            f"config must declare version: {CONFIG_VERSION}",
        )
        if strict:
            fatal = True
        else:
            invalid = True

    lists, lists_fatal = _load_lists(raw_data.get("lists"), strict=strict, issues=issues, counts=counts)
    limits, limits_fatal, limits_invalid = _load_limits(
        raw_data.get("limits"), strict=strict, issues=issues, counts=counts
    )
    fatal = fatal or lists_fatal or limits_fatal
    invalid = invalid or limits_invalid

    for issue in issues:
        if issue.level == "warning":
            logger.warning("%s %s: %s", issue.code, issue.where, issue.msg)

    if fatal:
        return LoadResult(status="error", mode=mode, config=None, issues=issues, counts=counts)

    config = base or ScoringConfig.default()
    if raw_data.get("extend_lists"):
        lists = {kind: config.extended_list(kind, terms) for kind, terms in lists.items()}
    config = replace(config, **lists, **limits)

    status = "invalid" if invalid else "ok"
    return LoadResult(status=status, mode=mode, config=config, issues=issues, counts=counts)


def load_scoring_config(
    path: str | Path,
    *,
    mode: ConfigMode | None = None,
    base: ScoringConfig | None = None,
) -> ScoringConfig:
    """Load ``path`` and return its config, raising :class:`ConfigError` unless it is clean."""

    result = load_config_result(path, override_mode=mode, base=base)
    if result.status != "ok" or result.config is None:
        errors = [issue for issue in result.issues if issue.level == "error"]
        summary = "; ".join(f"{issue.code} {issue.where}: {issue.msg}" for issue in errors)
        raise ConfigError(f"invalid scoring config {path}: {summary or result.status}", result.issues)
    return result.config
