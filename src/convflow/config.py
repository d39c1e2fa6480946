"""
Centralized configuration loader for the convflow runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_BLOCK_DEPTH = 64


@dataclass
class ConvflowConfig:
    max_block_depth: int = DEFAULT_MAX_BLOCK_DEPTH
    one_of_seed: Optional[int] = None


def _env_int(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def env_bool(name: str, default: bool = True, env: Optional[Mapping[str, str]] = None) -> bool:
    environ = os.environ if env is None else env
    val = environ.get(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def load_config(env: Optional[Mapping[str, str]] = None) -> ConvflowConfig:
    environ = os.environ if env is None else env
    max_depth = _env_int(environ, "CF_MAX_BLOCK_DEPTH", DEFAULT_MAX_BLOCK_DEPTH)
    if max_depth is None or max_depth < 1:
        max_depth = DEFAULT_MAX_BLOCK_DEPTH
    return ConvflowConfig(
        max_block_depth=max_depth,
        one_of_seed=_env_int(environ, "CF_ONE_OF_SEED", None),
    )
