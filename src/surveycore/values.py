"""
Answer value helpers shared by the condition evaluator and the score calculator.

Answers arrive from the player runtime as text, numbers, booleans, lists
or nothing at all. Published engines read them as text the way the
runtime prints them, so both the logic and scoring engines go through
these helpers.
"""

import re
from typing import Optional, Union

from surveycore.model import AnswerValue

# A whole string that is a plain decimal number
NUMBER_RE = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')

# The numeric prefix of a string, after leading whitespace
LEADING_NUMBER_RE = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

_INTEGER_RE = re.compile(r'^[+-]?\d+$')


def answer_text(value: AnswerValue) -> str:
    """
    Text form of an answer.

    None is "", booleans are "true"/"false", whole floats print without
    a fraction and lists are comma-joined.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(answer_text(v) for v in value)
    return str(value)


def to_number(text: str) -> Optional[Union[int, float]]:
    """Parse text that is entirely a number; None otherwise."""
    if not NUMBER_RE.match(text):
        return None
    if _INTEGER_RE.match(text):
        return int(text)
    return float(text)


def leading_number(text: str) -> Optional[float]:
    """
    Parse the numeric prefix of text: "4 stars" is 4, "stars" is None.
    """
    match = LEADING_NUMBER_RE.match(text)
    if not match:
        return None
    return float(match.group(1))
