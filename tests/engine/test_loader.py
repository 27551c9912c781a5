from __future__ import annotations

from pathlib import Path

import pytest

from snooker.engine.errors import ConfigError
from snooker.engine.loader import load_config_result, load_scoring_config
from snooker.engine.scoring_config import DEFAULT_KEYWORDS, DEFAULT_PHRASES

BASE = """
version: 1
lists:
  keywords: ["Bargain", "free"]
  tlds: ["DE", ".PL "]
limits:
  long_url_length: 40
"""


def _codes(result) -> list[str]:  # type: ignore[no-untyped-def]
    return [issue.code for issue in result.issues]


def test_valid_config_overlays_defaults(write_config) -> None:  # type: ignore[no-untyped-def]
    result = load_config_result(write_config(BASE))

    assert result.status == "ok"
    assert result.mode == "warn"
    assert result.issues == []
    config = result.config
    assert config is not None
    assert config.keywords == ("bargain", "free")
    assert config.tlds == (".de", ".pl")
    assert config.phrases == DEFAULT_PHRASES
    assert config.long_url_length == 40
    assert config.min_body_length == 20
    assert result.counts["lists"] == 2
    assert result.counts["terms"] == 4
    assert result.counts["limits"] == 1


def test_extend_lists_appends_to_defaults(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(
        """
        version: 1
        extend_lists: true
        lists:
          keywords: ["bargain", "FREE"]
        """
    )
    config = load_scoring_config(path)
    assert config.keywords == DEFAULT_KEYWORDS + ("bargain",)


def test_version_mismatch_warn_invalid(write_config) -> None:  # type: ignore[no-untyped-def]
    result = load_config_result(write_config(BASE.replace("version: 1", "version: 2")))
    assert result.status == "invalid"
    assert result.counts["errors"] == 1
    assert _codes(result) == ["SC-V001"]


def test_version_mismatch_strict_error(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(BASE.replace("version: 1", "version: 2"))
    result = load_config_result(path, override_mode="strict")
    assert result.status == "error"
    assert result.config is None


def test_unknown_keys_warn(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(BASE + "thresholds:\n  spam: -1\n")
    result = load_config_result(path)
    assert result.status == "ok"
    assert result.counts["unknown_keys"] == 1
    assert result.counts["warnings"] == 1
    assert _codes(result) == ["SC-K001"]


def test_unknown_keys_strict_error(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(BASE + "thresholds:\n  spam: -1\n")
    result = load_config_result(path, override_mode="strict")
    assert result.status == "error"


def test_unknown_list_name_warns(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(
        """
        version: 1
        lists:
          keywrods: ["typo"]
        """
    )
    result = load_config_result(path)
    assert result.status == "ok"
    assert _codes(result) == ["SC-K001"]
    assert result.issues[0].where == "lists"


def test_mode_from_file_and_override_priority(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(BASE + "mode: strict\n")
    assert load_config_result(path).mode == "strict"
    assert load_config_result(path, override_mode="warn").mode == "warn"


def test_duplicates_and_empty_entries_warn(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(
        """
        version: 1
        lists:
          phrases: ["Buy Now", "buy   now", "   "]
        """
    )
    result = load_config_result(path)
    assert result.status == "ok"
    assert result.config is not None
    assert result.config.phrases == ("buy now",)
    assert result.counts["collisions"] == 1
    assert sorted(_codes(result)) == ["SC-L002", "SC-L003"]


def test_non_string_entries(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(
        """
        version: 1
        lists:
          keywords: ["spam", 42]
        """
    )
    warn = load_config_result(path)
    assert warn.status == "ok"
    assert warn.config is not None
    assert warn.config.keywords == ("spam",)
    assert _codes(warn) == ["SC-L001"]

    strict = load_config_result(path, override_mode="strict")
    assert strict.status == "error"
    assert strict.issues[0].level == "error"


def test_list_must_be_a_sequence(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config(
        """
        version: 1
        lists:
          keywords: free
        """
    )
    result = load_config_result(path)
    assert result.status == "ok"
    assert result.config is not None
    assert result.config.keywords == DEFAULT_KEYWORDS
    assert _codes(result) == ["SC-L001"]


@pytest.mark.parametrize("value", ["0", "-3", "'long'", "true"])
def test_bad_limits(write_config, value: str) -> None:  # type: ignore[no-untyped-def]
    path = write_config(f"version: 1\nlimits:\n  history_cap: {value}\n")
    result = load_config_result(path)
    assert result.status == "invalid"
    assert _codes(result) == ["SC-N001"]
    assert load_config_result(path, override_mode="strict").status == "error"


def test_missing_file(tmp_path: Path) -> None:
    result = load_config_result(tmp_path / "missing.yaml")
    assert result.status == "error"
    assert _codes(result) == ["SC-IO"]


def test_broken_yaml(write_config) -> None:  # type: ignore[no-untyped-def]
    result = load_config_result(write_config("version: [1\n"))
    assert result.status == "error"
    assert _codes(result) == ["SC-YAML"]


def test_top_level_must_be_mapping(write_config) -> None:  # type: ignore[no-untyped-def]
    result = load_config_result(write_config("- a\n- b\n"))
    assert result.status == "error"
    assert _codes(result) == ["SC-V000"]


def test_empty_file_is_invalid_version(write_config) -> None:  # type: ignore[no-untyped-def]
    result = load_config_result(write_config(""))
    assert result.status == "invalid"
    assert _codes(result) == ["SC-V001"]


def test_load_scoring_config_raises_with_issues(write_config) -> None:  # type: ignore[no-untyped-def]
    path = write_config("version: 3\n")
    with pytest.raises(ConfigError) as excinfo:
        load_scoring_config(path)
    assert [issue.code for issue in excinfo.value.issues] == ["SC-V001"]
    assert "SC-V001" in str(excinfo.value)


def test_shipped_config_is_clean() -> None:
    shipped = Path(__file__).resolve().parents[2] / "configs" / "snooker.yaml"
    result = load_config_result(shipped, override_mode="strict")
    assert result.status == "ok"
    assert result.issues == []
    assert result.config is not None
    assert result.config.keywords == DEFAULT_KEYWORDS
