"""Session log parsing, loading and decoding.

This module is the main integration point: it splits a session-log block
into header and Lonelog body, tokenizes the body and extracts deltas, and
reads session logs from disk.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import re
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .config import SessionLogConfig, resolve_max_workers, resolve_session_log_config
from .deltas import extract_deltas
from .models import EntityDelta, LogEntry, ProgressChange, ThreadChange
from .notation import LineParser, default_line_parser

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "default-log"
BOM = "\ufeff"

_SEPARATOR_RE = re.compile(r"^---$", re.MULTILINE)
_QUOTES_RE = re.compile(r"^[\"']|[\"']$")


@dataclass(frozen=True, slots=True)
class EntityReference:
    """Entity note referenced from a session-log header."""

    file: str


@dataclass(slots=True)
class SessionLogBlock:
    """Header fields plus the raw Lonelog body."""

    body: str
    state_key: str = DEFAULT_STATE_KEY
    scene: str | None = None
    entities: list[EntityReference] | None = None


@dataclass(frozen=True, slots=True)
class SessionLogData:
    """Everything decoded from one session-log block."""

    entries: list[LogEntry]
    entity_deltas: list[EntityDelta]
    progress_changes: list[ProgressChange]
    thread_changes: list[ThreadChange]
    state_key: str = DEFAULT_STATE_KEY
    scene: str | None = None
    entities: list[EntityReference] = field(default_factory=list)


def parse_lonelog(body: str, *, parser: LineParser | None = None) -> list[LogEntry]:
    """Tokenize Lonelog text into one entry per non-blank line."""
    if not isinstance(body, str) or not body:
        return []

    body = body.removeprefix(BOM)
    parser = parser or default_line_parser()
    entries: list[LogEntry] = []
    for line in body.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        entry = parser.parse(trimmed)
        if entry is not None:
            entries.append(entry)
    return entries


def _unquote(value: str) -> str:
    return _QUOTES_RE.sub("", value)


def parse_session_log_block(source: str) -> SessionLogBlock:
    """Split an optional header from the Lonelog body.

    The header sits above a line consisting of ``---``; without a separator
    the whole source is the body.
    """
    source = source.removeprefix(BOM)
    parts = _SEPARATOR_RE.split(source)
    if len(parts) < 2:
        return SessionLogBlock(body=source)

    header = parts[0].strip()
    block = SessionLogBlock(body="---".join(parts[1:]).strip())

    for line in header.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("state_key:"):
            block.state_key = trimmed.replace("state_key:", "", 1).strip()
        elif trimmed.startswith("scene:"):
            block.scene = _unquote(trimmed.replace("scene:", "", 1).strip())
        elif trimmed.startswith("entities:"):
            block.entities = []
        elif trimmed.startswith("- file:"):
            if block.entities is None:
                block.entities = []
            path = _unquote(trimmed.replace("- file:", "", 1).strip())
            block.entities.append(EntityReference(file=path))

    return block


def process_session_log(
    block: SessionLogBlock, *, parser: LineParser | None = None
) -> SessionLogData:
    """Tokenize a block body and extract its deltas."""
    entries = parse_lonelog(block.body, parser=parser)
    deltas = extract_deltas(entries)
    return SessionLogData(
        entries=entries,
        entity_deltas=deltas.entity_deltas,
        progress_changes=deltas.progress_changes,
        thread_changes=deltas.thread_changes,
        state_key=block.state_key,
        scene=block.scene,
        entities=list(block.entities or []),
    )


def decode_session_log(source: str, *, parser: LineParser | None = None) -> SessionLogData:
    """Parse a session-log block (header optional) and extract its deltas."""
    return process_session_log(parse_session_log_block(source), parser=parser)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a session log for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


async def read_session_log(
    log_path: str | Path, *, cfg: SessionLogConfig | None = None
) -> str:
    """Read a session log file (plain text or .gz)."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Session log not found: {path}")

    cfg = resolve_session_log_config(cfg)
    async with _open_text(path, encoding=cfg.encoding, decode_errors=cfg.decode_errors) as f:
        return await f.read()


async def load_session_log(
    log_path: str | Path, *, cfg: SessionLogConfig | None = None
) -> SessionLogData:
    """Read and decode one session log file."""
    source = await read_session_log(log_path, cfg=cfg)
    data = decode_session_log(source)
    logger.debug("Decoded %s: %d entries", log_path, len(data.entries))
    return data


async def load_session_logs(
    log_paths: Sequence[str | Path], *, cfg: SessionLogConfig | None = None
) -> list[SessionLogData]:
    """Read and decode several session logs concurrently, keeping input order."""
    if not log_paths:
        raise ValueError("At least one session log path is required")

    cfg = resolve_session_log_config(cfg)
    worker_count = resolve_max_workers(cfg)
    loop = asyncio.get_running_loop()
    limiter = asyncio.Semaphore(worker_count)

    async def load_one(log_path: str | Path) -> SessionLogData:
        async with limiter:
            source = await read_session_log(log_path, cfg=cfg)
            data = await loop.run_in_executor(executor, decode_session_log, source)
        logger.debug("Decoded %s: %d entries", log_path, len(data.entries))
        return data

    executor = ThreadPoolExecutor(max_workers=worker_count)
    try:
        # Every load settles before the pool shuts down; the first failure wins.
        results = await asyncio.gather(
            *(load_one(p) for p in log_paths), return_exceptions=True
        )
    finally:
        executor.shutdown(wait=True)

    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)
