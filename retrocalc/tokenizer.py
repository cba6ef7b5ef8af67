"""Expression tokenizer for the step display.

This is a display-only lexical pass: the expression is split on the four
operator characters and each fragment is tagged. There is no grammar here;
a leading minus stays a lone operator step and parentheses stay glued to
their operands.
"""

import re
from typing import List

from .models import Number, Step, StepType, format_number

OPERATORS = ("+", "-", "*", "/")

_SPLIT_PATTERN = re.compile(r"([+\-*/])")


def tokenize(expression: str) -> List[Step]:
    """Split an expression into operator and operand steps.

    Args:
        expression: Raw expression text.

    Returns:
        Steps in left-to-right order. Empty fragments are dropped.
    """
    steps = []
    for fragment in _SPLIT_PATTERN.split(expression):
        if not fragment:
            continue
        if fragment in OPERATORS:
            steps.append(Step(value=fragment, type=StepType.OPERATOR))
        else:
            steps.append(Step(value=fragment, type=StepType.OPERAND))
    return steps


def build_steps(expression: str, result: Number) -> List[Step]:
    """Tokenize an expression and append its result step."""
    steps = tokenize(expression)
    steps.append(Step(value=format_number(result), type=StepType.RESULT))
    return steps
