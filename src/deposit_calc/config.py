from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, model_validator


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _expand_env_vars(value: object) -> object:
    if isinstance(value, str):
        def repl(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, "")

        return _ENV_VAR_PATTERN.sub(repl, value)
    if isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name, "") or "").strip().lower()
    if not raw:
        return bool(default)
    return raw in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None


def _deep_merge(base: object, override: object) -> object:
    if isinstance(base, dict) and isinstance(override, dict):
        out = dict(base)
        for k, v in override.items():
            if k in out:
                out[k] = _deep_merge(out[k], v)
            else:
                out[k] = v
        return out
    return override


def _default_config_from_env() -> dict:
    """
    Env-only defaults so the calculator runs without any YAML file.

    A YAML config, when present, is deep-merged on top of these.
    """
    return {
        "pipeline": {
            "enabled": _env_bool("CALC_ASYNC", default=True),
            "max_workers": _env_int("CALC_MAX_WORKERS", 0),
        },
        "order": {
            "utc_offset_hours": _env_int("CALC_UTC_OFFSET_HOURS", 8),
        },
        "logging": {
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "file_path": os.getenv("LOG_FILE", ""),
            "calculator_level": os.getenv("CALCULATOR_LOG_LEVEL", "INFO"),
        },
    }


class PipelineConfig(BaseModel):
    # When disabled, every recalculation runs inline on the caller's thread.
    enabled: bool = True
    # 0 lets ThreadPoolExecutor pick its own default.
    max_workers: int = Field(default=0, ge=0)


class OrderDefaultsConfig(BaseModel):
    # "Today" for the default order is taken in this fixed UTC offset.
    utc_offset_hours: int = 8

    @model_validator(mode="after")
    def _validate_offset(self) -> "OrderDefaultsConfig":
        if not -23 <= self.utc_offset_hours <= 23:
            raise ValueError("order.utc_offset_hours must be between -23 and 23")
        return self


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file_path: str = ""
    # Level for deposit_calc.calculator on its own; its overflow notes are DEBUG.
    calculator_level: str = "INFO"


class AppConfig(BaseModel):
    pipeline: PipelineConfig = PipelineConfig()
    order: OrderDefaultsConfig = OrderDefaultsConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    raw: dict = {}
    if path:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            raw = _expand_env_vars(raw)  # supports ${ENV_VAR} in YAML

    merged = _deep_merge(_default_config_from_env(), raw)
    return AppConfig.model_validate(merged)
