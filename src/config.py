from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.path_solver import SameVertexPolicy


class AppSettings(BaseSettings):
    log_level: str = "INFO"
    same_vertex_policy: SameVertexPolicy = SameVertexPolicy.TRIVIAL
    debug_dump_dir: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="BEST_RATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@cache
def config() -> AppSettings:
    return AppSettings()
