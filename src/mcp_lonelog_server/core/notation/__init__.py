"""Lonelog notation parsers.

Contains the line tokenizer, the persistent tag extractor and the change
token parser.
"""

from __future__ import annotations

from .base import CompositeLineParser, LineParser
from .changes import STATUS_KEYWORDS, parse_change
from .lines import (
    ActionParser,
    ConsequenceParser,
    DialogueParser,
    GeneratorParser,
    MetaNoteParser,
    NarrativeParser,
    OracleAnswerParser,
    OracleQuestionParser,
    RollParser,
    SceneParser,
    TableRollParser,
    default_line_parser,
)
from .tags import extract_tags

__all__ = [
    "STATUS_KEYWORDS",
    "ActionParser",
    "CompositeLineParser",
    "ConsequenceParser",
    "DialogueParser",
    "GeneratorParser",
    "LineParser",
    "MetaNoteParser",
    "NarrativeParser",
    "OracleAnswerParser",
    "OracleQuestionParser",
    "RollParser",
    "SceneParser",
    "TableRollParser",
    "default_line_parser",
    "extract_tags",
    "parse_change",
]
