"""Data models for retrocalc.

Step and CalculationRecord are the structures that flow through
tokenizer -> flow -> store -> history viewer.
"""

import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Union

Number = Union[int, float]

_EXPONENT_PATTERN = re.compile(r"e([+-])0*(\d)")


def format_number(value: Number) -> str:
    """Format a result the way a browser prints numbers.

    Integral values print without a fraction and exponents drop their
    leading zeros, so 4.0 gives "4" and 1e-07 gives "1e-7".
    """
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _EXPONENT_PATTERN.sub(r"e\1\2", repr(value))
    return str(value)


class StepType(str, Enum):
    """Kinds of calculation step."""

    OPERATOR = "operator"
    OPERAND = "operand"
    RESULT = "result"


@dataclass(frozen=True)
class Step:
    """One lexical fragment of an expression, or its result."""

    value: str
    type: StepType

    def to_dict(self) -> dict:
        return {"value": self.value, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Step":
        return cls(value=str(data["value"]), type=StepType(data["type"]))


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    text = str(value)
    # Browsers serialise dates as "2024-01-01T00:00:00.000Z"
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class CalculationRecord:
    """A single persisted calculation."""

    id: int
    expression: str
    steps: List[Step]
    result: Number
    timestamp: datetime

    @classmethod
    def create(
        cls,
        expression: str,
        steps: List[Step],
        result: Number,
        clock: Optional[Callable[[], float]] = None,
    ) -> "CalculationRecord":
        """Create a record stamped with the current time.

        The id is the creation time in epoch milliseconds, so two records
        created within the same millisecond share an id.

        Args:
            expression: Expression as typed.
            steps: Tokenized steps, including the result step.
            result: Numeric result.
            clock: Optional replacement for time.time (seconds).

        Returns:
            New CalculationRecord.
        """
        now = (clock or time.time)()
        return cls(
            id=int(now * 1000),
            expression=expression,
            steps=list(steps),
            result=result,
            timestamp=datetime.fromtimestamp(now, tz=timezone.utc),
        )

    @property
    def result_step(self) -> Optional[Step]:
        """Return the trailing result step, if present."""
        for step in reversed(self.steps):
            if step.type is StepType.RESULT:
                return step
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "expression": self.expression,
            "steps": [s.to_dict() for s in self.steps],
            "result": self.result,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CalculationRecord":
        steps = [Step.from_dict(s) for s in data.get("steps", [])]
        return cls(
            id=int(data["id"]),
            expression=data.get("expression", ""),
            steps=steps,
            result=data["result"],
            timestamp=_parse_timestamp(data.get("timestamp", data["id"])),
        )
