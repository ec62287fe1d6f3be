from pathlib import Path

import pytest

from config import AppSettings
from domain.path_solver import SameVertexPolicy


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BEST_RATES_SAME_VERTEX_POLICY", raising=False)
    monkeypatch.delenv("BEST_RATES_DEBUG_DUMP_DIR", raising=False)

    settings = AppSettings(_env_file=None)  # type: ignore[call-arg]

    assert settings.same_vertex_policy == SameVertexPolicy.TRIVIAL
    assert settings.debug_dump_dir is None


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BEST_RATES_SAME_VERTEX_POLICY", "self_edge")
    monkeypatch.setenv("BEST_RATES_DEBUG_DUMP_DIR", str(tmp_path))
    monkeypatch.setenv("BEST_RATES_LOG_LEVEL", "DEBUG")

    settings = AppSettings(_env_file=None)  # type: ignore[call-arg]

    assert settings.same_vertex_policy == SameVertexPolicy.SELF_EDGE
    assert settings.debug_dump_dir == tmp_path
    assert settings.log_level == "DEBUG"
