from __future__ import annotations

from pathlib import Path

import pytest

from deposit_calc.config import _deep_merge, load_config


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for var in ("CALC_ASYNC", "CALC_MAX_WORKERS", "CALC_UTC_OFFSET_HOURS", "LOG_LEVEL", "LOG_FILE", "CALC_TEST_LEVEL", "CALCULATOR_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_yaml(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.yaml")
    assert cfg.pipeline.enabled is True
    assert cfg.pipeline.max_workers == 0
    assert cfg.order.utc_offset_hours == 8
    assert cfg.logging.level == "INFO"
    assert cfg.logging.file_path == ""
    assert cfg.logging.calculator_level == "INFO"


def test_env_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("CALC_ASYNC", "no")
    monkeypatch.setenv("CALC_MAX_WORKERS", "3")
    monkeypatch.setenv("CALC_UTC_OFFSET_HOURS", "-5")
    monkeypatch.setenv("CALCULATOR_LOG_LEVEL", "DEBUG")
    cfg = load_config()
    assert cfg.pipeline.enabled is False
    assert cfg.pipeline.max_workers == 3
    assert cfg.order.utc_offset_hours == -5
    assert cfg.logging.calculator_level == "DEBUG"


def test_yaml_merges_over_env_and_expands_vars(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CALC_MAX_WORKERS", "3")
    monkeypatch.setenv("CALC_TEST_LEVEL", "DEBUG")
    cfg_path = _write(
        tmp_path,
        "cfg.yaml",
        """
pipeline:
  enabled: false
logging:
  level: "${CALC_TEST_LEVEL}"
  file_path: "logs/calc.log"
""",
    )
    cfg = load_config(cfg_path)
    assert cfg.pipeline.enabled is False
    assert cfg.pipeline.max_workers == 3  # untouched by YAML, still from env
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.file_path == "logs/calc.log"


def test_invalid_offset_rejected(tmp_path: Path) -> None:
    cfg_path = _write(tmp_path, "cfg.yaml", "order:\n  utc_offset_hours: 30\n")
    with pytest.raises(Exception):
        _ = load_config(cfg_path)


def test_bad_worker_count_in_env_rejected(monkeypatch) -> None:
    monkeypatch.setenv("CALC_MAX_WORKERS", "lots")
    with pytest.raises(ValueError):
        _ = load_config()


def test_deep_merge_keeps_unrelated_keys() -> None:
    merged = _deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1}
