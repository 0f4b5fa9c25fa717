"""
Numeric Literal Grammar & Normalization.

Finds candidate amounts like "$1,234.56", "(1,234)", "2.5 million" or "3K"
and turns them into signed floats.
"""

import math
import re
from dataclasses import dataclass

# Currency marker, optional accounting parentheses, comma-grouped digits with
# up to two decimals, optional scale word. The scale word must end the word
# so "10 Marketing" is not read as ten million.
NUMBER_PATTERN = re.compile(
    r"(?:\$|USD|EUR|GBP)?\s*"
    r"\(?[\d,]+(?:\.\d{1,2})?\)?"
    r"(?:\s*(?:million|billion|thousand|M|B|K)(?![a-z]))?",
    re.IGNORECASE,
)

CURRENCY_PATTERN = re.compile(r"\$|USD|EUR|GBP", re.IGNORECASE)

# Checked in order; the first scale word found wins
SCALE_WORDS: list[tuple[re.Pattern[str], float]] = [
    (re.compile(r"(?:million|m)$", re.IGNORECASE), 1_000_000.0),
    (re.compile(r"(?:billion|b)$", re.IGNORECASE), 1_000_000_000.0),
    (re.compile(r"(?:thousand|k)$", re.IGNORECASE), 1_000.0),
]


@dataclass(frozen=True)
class NumberCandidate:
    """A literal matched in a line or cell, before normalization."""

    raw: str
    start: int
    end: int


def find_candidates(text: str) -> list[NumberCandidate]:
    """
    Find numeric literals in a line of text or a table cell.

    Matching is leftmost and non-overlapping.

    Args:
        text: Line or cell content

    Returns:
        Candidates in order of appearance
    """
    return [
        NumberCandidate(raw=match.group(0), start=match.start(), end=match.end())
        for match in NUMBER_PATTERN.finditer(text)
    ]


def parse_amount(literal: str) -> float | None:
    """
    Normalize a matched literal to a signed, scale-expanded float.

    Args:
        literal: Text matched by NUMBER_PATTERN

    Returns:
        The value, or None when it does not parse or is zero
    """
    cleaned = CURRENCY_PATTERN.sub("", literal)
    cleaned = re.sub(r"[,\s]", "", cleaned)

    # Accounting convention: (1,234) is a negative amount
    negative = "(" in cleaned and ")" in cleaned
    cleaned = cleaned.replace("(", "").replace(")", "")

    multiplier = 1.0
    for pattern, scale in SCALE_WORDS:
        if pattern.search(cleaned):
            multiplier = scale
            cleaned = pattern.sub("", cleaned)
            break

    try:
        value = float(cleaned)
    except ValueError:
        return None

    value *= multiplier
    if negative:
        value = -value

    if value == 0 or not math.isfinite(value):
        return None
    return value


def extract_amounts(text: str) -> list[tuple[NumberCandidate, float]]:
    """Find and normalize every amount in a line or cell, dropping unparseable ones."""
    amounts: list[tuple[NumberCandidate, float]] = []
    for candidate in find_candidates(text):
        value = parse_amount(candidate.raw)
        if value is not None:
            amounts.append((candidate, value))
    return amounts
