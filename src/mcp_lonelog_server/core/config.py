"""Session log loading configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

ENCODING_ENV = "LONELOG_ENCODING"
MAX_WORKERS_ENV = "LONELOG_MAX_WORKERS"

# utf-8-sig also reads plain UTF-8 and drops a leading byte order mark.
DEFAULT_ENCODING = "utf-8-sig"


@dataclass(frozen=True, slots=True)
class SessionLogConfig:
    # None -> LONELOG_ENCODING or DEFAULT_ENCODING.
    encoding: str | None = None
    decode_errors: str = "replace"

    # Concurrent decodes when loading several files. None -> env or CPU count.
    max_workers: int | None = None


def _env_int(name: str) -> int | None:
    env = os.getenv(name)
    if env is None or env == "":
        return None
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


def resolve_session_log_config(cfg: SessionLogConfig | None) -> SessionLogConfig:
    """Return config with optional env overrides applied.

    Explicit values win: ``max_workers`` over ``LONELOG_MAX_WORKERS`` and
    ``encoding`` over ``LONELOG_ENCODING``.
    """
    if cfg is None:
        cfg = SessionLogConfig()

    if cfg.max_workers is not None:
        if cfg.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
    else:
        env_workers = _env_int(MAX_WORKERS_ENV)
        if env_workers is not None:
            cfg = replace(cfg, max_workers=env_workers)

    if cfg.encoding is None:
        cfg = replace(cfg, encoding=os.getenv(ENCODING_ENV) or DEFAULT_ENCODING)

    return cfg


def resolve_max_workers(cfg: SessionLogConfig) -> int:
    """Return the worker count for a resolved config."""
    if cfg.max_workers is not None:
        return cfg.max_workers
    cpu_count = os.cpu_count() or 1
    return min(32, cpu_count)
