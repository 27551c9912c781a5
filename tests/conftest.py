from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from snooker.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep host environment and .env files out of settings-driven code."""

    for name in ("SNOOKER_CONFIG", "SNOOKER_CONFIG_MODE", "SNOOKER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    def _write(content: str, name: str = "snooker.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
        return path

    return _write
