"""
Step 3 — Question Parser

Turns the raw completion text into an ordered list of Question objects.

The completion format is fixed by the system prompt:

    1. Question text
    a) Option 1
    b) Option 2 (ok)
    c) Option 3

Blocks are separated by a blank line. The correct option can sit on any of the
three lines, so each block is matched against one pattern per marker position.
A block matching none of them becomes a format-error placeholder, which keeps
len(output) == number of blocks.
"""

import enum
import logging
import re
from typing import Dict, List, NamedTuple, Optional

from llmquiz.generation.schemas import OPTION_KEYS, Question, QuestionBatch

log = logging.getLogger(__name__)

_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")

# Lines are stripped before matching, so every line starts and ends on a
# non-space character and each construct below has a single way to match.
_LINE_TEXT = r"\S(?:[^\n]*\S)?"
_NUMBERING = r"\d+[ \t]*[.)][ \t]*"
# A question may wrap onto several lines, up to the "a)" line
_QUESTION = rf"(?P<question>{_LINE_TEXT}(?:\n(?!a\)){_LINE_TEXT})*)"
# Option text never contains the marker, so at most one pattern can match
_OPTION_TEXT = r"(?P<{key}>(?!\(ok\))\S(?:(?:(?!\(ok\))[^\n])*\S)?)"


class MarkerPosition(str, enum.Enum):
    """Which option line carries the correctness marker."""

    ON_A = "a"
    ON_B = "b"
    ON_C = "c"
    NO_MATCH = "none"


class BlockMatch(NamedTuple):
    position: MarkerPosition
    question: Optional[str] = None
    options: Optional[Dict[str, str]] = None


def _option_line(key: str, marked: bool) -> str:
    line = rf"{key}\)[ \t]*" + _OPTION_TEXT.format(key=key)
    if marked:
        line += r"[ \t]*\(ok\)"
    return line


def _compile_pattern(marked_key: str) -> "re.Pattern[str]":
    options = r"\n".join(_option_line(key, key == marked_key) for key in OPTION_KEYS)
    return re.compile(_NUMBERING + _QUESTION + options, re.IGNORECASE)


_PATTERNS = {
    MarkerPosition.ON_A: _compile_pattern("a"),
    MarkerPosition.ON_B: _compile_pattern("b"),
    MarkerPosition.ON_C: _compile_pattern("c"),
}


def split_blocks(raw: str) -> List[str]:
    """Split a completion on blank lines; whitespace-only blocks are dropped."""
    normalized = raw.replace("\r\n", "\n").replace("\r", "\n")
    return [b.strip() for b in _BLOCK_SEPARATOR.split(normalized) if b.strip()]


def match_block(block: str) -> BlockMatch:
    """Classify one block by marker position, extracting its fields on success."""
    lines = "\n".join(line.strip() for line in block.split("\n"))
    for position, pattern in _PATTERNS.items():
        m = pattern.fullmatch(lines)
        if m:
            return BlockMatch(
                position=position,
                question=" ".join(m.group("question").split("\n")),
                options={key: m.group(key) for key in OPTION_KEYS},
            )
    return BlockMatch(position=MarkerPosition.NO_MATCH)


def parse_questions(raw: str) -> QuestionBatch:
    """
    Parse a raw completion into one Question per block, in block order.

    Never raises on malformed content: unparseable blocks yield the
    format-error sentinel instead.
    """
    questions: QuestionBatch = []
    for idx, block in enumerate(split_blocks(raw or ""), start=1):
        result = match_block(block)
        if result.position is MarkerPosition.NO_MATCH:
            log.warning("[PARSE] block %s did not match any question shape: %r", idx, block[:120])
            questions.append(Question.format_error_sentinel())
            continue
        questions.append(
            Question(
                text=result.question,
                options=result.options,
                correct_key=result.position.value,
            )
        )

    errors = sum(1 for q in questions if q.format_error)
    log.info("[PARSE] %s question(s), %s format error(s)", len(questions), errors)
    return questions


class QuestionParser:
    """Object wrapper around parse_questions()."""

    def parse(self, raw_completion: str) -> QuestionBatch:
        return parse_questions(raw_completion)
