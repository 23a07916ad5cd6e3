"""Line parser interface and composition."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from ..models import LogEntry


class LineParser(Protocol):
    """Parser interface: return a LogEntry if the line matches, else None."""

    def parse(self, line: str) -> LogEntry | None:
        """Parse a trimmed, non-blank line into a LogEntry if recognized."""
        ...


def strip_prefix(line: str, prefix: str) -> str | None:
    """Return the trimmed text after ``prefix``, or None if the line lacks it."""
    if not line.startswith(prefix):
        return None
    return line[len(prefix) :].strip()


@dataclass(frozen=True, slots=True)
class CompositeLineParser:
    """Try parsers in order and return the first successful parse."""

    parsers: Sequence[LineParser]

    def parse(self, line: str) -> LogEntry | None:
        """Return the first successful parse from the configured parsers."""
        for p in self.parsers:
            out = p.parse(line)
            if out is not None:
                return out
        return None
