"""Retro Calculator - terminal arithmetic with persisted history.

A retro-styled calculator with:
- Live expression evaluation (bounded arithmetic grammar, no eval)
- Step display (operator / operand / result tags)
- Persisted calculation history with a recent-first viewer
- Scripted animation demos for the four operations
"""

__version__ = "1.0.0"

from .errors import (
    CalculatorError,
    DivisionByZero,
    InvalidExpression,
    PersistenceReadFailure,
)
from .models import (
    CalculationRecord,
    Step,
    StepType,
    format_number,
)
from .tokenizer import tokenize, build_steps
from .evaluator import evaluate, calculate
from .store import LocalStorage, RecordStore, get_record_store

__all__ = [
    # Errors
    "CalculatorError",
    "DivisionByZero",
    "InvalidExpression",
    "PersistenceReadFailure",
    # Models
    "CalculationRecord",
    "Step",
    "StepType",
    "format_number",
    # Evaluation
    "tokenize",
    "build_steps",
    "evaluate",
    "calculate",
    # Storage
    "LocalStorage",
    "RecordStore",
    "get_record_store",
]
