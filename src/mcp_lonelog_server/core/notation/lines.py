"""Parsers for the individual Lonelog line shapes.

Each parser recognizes exactly one shape and returns None for anything else;
``default_line_parser`` chains them in priority order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import (
    ActionEntry,
    ConsequenceEntry,
    DialogueEntry,
    GeneratorEntry,
    LogEntry,
    MetaNoteEntry,
    NarrativeEntry,
    OracleAnswerEntry,
    OracleQuestionEntry,
    RollEntry,
    SceneEntry,
    TableRollEntry,
)
from .base import CompositeLineParser, LineParser, strip_prefix
from .tags import extract_tags


@dataclass(frozen=True, slots=True)
class SceneParser:
    """Parse 'S1 context', 'S1a', 'S1.2', 'T1-S3' scene markers."""

    _re = re.compile(
        r"(?P<number>T[0-9]+-S[0-9]+[a-z]?|S[0-9]+(?:\.[0-9]+|[a-z])?)\s+(?P<context>.*)",
        re.IGNORECASE,
    )
    _stars_re = re.compile(r"^\*|\*$")

    def parse(self, line: str) -> LogEntry | None:
        m = self._re.fullmatch(line)
        if not m:
            return None
        context = self._stars_re.sub("", m.group("context")).strip()
        return SceneEntry(number=m.group("number"), context=context)


@dataclass(frozen=True, slots=True)
class ActionParser:
    """Parse '@ text' action lines."""

    prefix: str = "@"

    def parse(self, line: str) -> LogEntry | None:
        text = strip_prefix(line, self.prefix)
        if text is None:
            return None
        return ActionEntry(text=text)


@dataclass(frozen=True, slots=True)
class OracleQuestionParser:
    """Parse '? question' lines."""

    prefix: str = "?"

    def parse(self, line: str) -> LogEntry | None:
        text = strip_prefix(line, self.prefix)
        if text is None:
            return None
        return OracleQuestionEntry(text=text)


@dataclass(frozen=True, slots=True)
class OracleAnswerParser:
    """Parse '-> answer (roll)' lines; the trailing roll group is optional."""

    prefix: str = "->"

    _roll_re = re.compile(r"\((?P<roll>[^)]+)\)$")

    def parse(self, line: str) -> LogEntry | None:
        text = strip_prefix(line, self.prefix)
        if text is None:
            return None

        m = self._roll_re.search(text)
        if not m:
            return OracleAnswerEntry(text=text)
        return OracleAnswerEntry(text=text[: m.start()].strip(), roll=m.group("roll"))


@dataclass(frozen=True, slots=True)
class RollParser:
    """Parse 'd: expression -> outcome' lines."""

    prefix: str = "d:"
    success_words: tuple[str, ...] = ("success", "hit")
    failure_words: tuple[str, ...] = ("fail", "miss")

    def _success(self, result: str) -> bool | None:
        lower = result.lower()
        if any(w in lower for w in self.success_words):
            return True
        if any(w in lower for w in self.failure_words):
            return False
        return None

    def parse(self, line: str) -> LogEntry | None:
        rest = strip_prefix(line, self.prefix)
        if rest is None:
            return None

        roll, _, result = rest.partition("->")
        roll = roll.strip() or rest
        result = result.strip()
        return RollEntry(roll=roll, result=result, success=self._success(result))


@dataclass(frozen=True, slots=True)
class ConsequenceParser:
    """Parse '=> text [tags]' lines and extract their persistent tags."""

    prefix: str = "=>"

    def parse(self, line: str) -> LogEntry | None:
        text = strip_prefix(line, self.prefix)
        if text is None:
            return None
        return ConsequenceEntry(text=text, tags=extract_tags(text))


@dataclass(frozen=True, slots=True)
class DialogueParser:
    """Parse 'N (Name): "text"' and 'PC: "text"' lines."""

    _re = re.compile(r'(?:N\s*\((?P<speaker>[^)]+)\)|PC):\s*"(?P<text>[^"]*)"')

    def parse(self, line: str) -> LogEntry | None:
        m = self._re.fullmatch(line)
        if not m:
            return None
        return DialogueEntry(speaker=m.group("speaker") or "PC", text=m.group("text"))


@dataclass(frozen=True, slots=True)
class TableRollParser:
    """Parse 'tbl: source roll result...' lines."""

    prefix: str = "tbl:"

    def parse(self, line: str) -> LogEntry | None:
        rest = strip_prefix(line, self.prefix)
        if rest is None:
            return None

        parts = rest.split()
        source = parts[0] if parts else ""
        roll = parts[1] if len(parts) > 1 else ""
        return TableRollEntry(source=source, roll=roll, result=" ".join(parts[2:]))


@dataclass(frozen=True, slots=True)
class GeneratorParser:
    """Parse 'gen: source result...' lines."""

    prefix: str = "gen:"

    def parse(self, line: str) -> LogEntry | None:
        rest = strip_prefix(line, self.prefix)
        if rest is None:
            return None

        parts = rest.split()
        source = parts[0] if parts else ""
        return GeneratorEntry(source=source, result=" ".join(parts[1:]))


@dataclass(frozen=True, slots=True)
class MetaNoteParser:
    """Parse '(note: text)' lines."""

    _re = re.compile(r"\(note:\s*(?P<text>.+)\)")

    def parse(self, line: str) -> LogEntry | None:
        m = self._re.fullmatch(line)
        if not m:
            return None
        return MetaNoteEntry(text=m.group("text"))


@dataclass(frozen=True, slots=True)
class NarrativeParser:
    """Fallback parser: every line is narrative prose."""

    def parse(self, line: str) -> LogEntry | None:
        return NarrativeEntry(text=line)


def default_line_parser() -> LineParser:
    """Default Lonelog parser chain (first match wins)."""
    return CompositeLineParser(
        parsers=[
            SceneParser(),
            ActionParser(),
            OracleQuestionParser(),
            OracleAnswerParser(),
            RollParser(),
            ConsequenceParser(),
            DialogueParser(),
            TableRollParser(),
            GeneratorParser(),
            MetaNoteParser(),
            NarrativeParser(),
        ]
    )
