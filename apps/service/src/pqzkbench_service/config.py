from __future__ import annotations
"""Environment-driven settings for the benchmark services."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _env(env: Mapping[str, str], name: str, default: str) -> str:
    v = env.get(name)
    return v if (v is not None and str(v).strip() != "") else default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = _env(env, name, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class ServiceSettings:
    lattice_host: str = "0.0.0.0"
    lattice_port: int = 8000
    zk_host: str = "127.0.0.1"
    zk_port: int = 8001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServiceSettings":
        env_map = env if env is not None else os.environ
        return cls(
            lattice_host=_env(env_map, "PQZKBENCH_LATTICE_HOST", cls.lattice_host),
            lattice_port=_env_int(env_map, "PQZKBENCH_LATTICE_PORT", cls.lattice_port),
            zk_host=_env(env_map, "PQZKBENCH_ZK_HOST", cls.zk_host),
            zk_port=_env_int(env_map, "PQZKBENCH_ZK_PORT", cls.zk_port),
            log_level=_env(env_map, "PQZKBENCH_LOG_LEVEL", cls.log_level).upper(),
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
