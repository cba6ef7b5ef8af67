"""Scripted arithmetic animation demo.

Each operation has a fixed two-step script. Playback advances one step per
interval and wraps around; the space key toggles play/pause.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Operation(str, Enum):
    """Operations with an animation script."""

    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"

    @property
    def heading(self) -> str:
        return f"{self.value.capitalize()} demo"


@dataclass(frozen=True)
class AnimationStep:
    """One frame of an animation script."""

    graphic: str
    description: str


SCRIPTS: Dict[Operation, List[AnimationStep]] = {
    Operation.ADDITION: [
        AnimationStep("5 + 7 = 12", "Add the ones: 5 + 7 = 12, carry the 1"),
        AnimationStep("1 (carry)", "Add the carried 1 to the tens column"),
    ],
    Operation.SUBTRACTION: [
        AnimationStep("23 - 8 = ?", "3 is less than 8, so borrow 1 from the tens"),
        AnimationStep("13 - 8 = 5", "After borrowing the ones become 13, and 13 - 8 = 5"),
    ],
    Operation.MULTIPLICATION: [
        AnimationStep("3 × 4 = 12", "3 times 4 is 12"),
        AnimationStep("12 × 10 = 120", "12 times 10 (the tens) is 120"),
    ],
    Operation.DIVISION: [
        AnimationStep("15 ÷ 3 = ?", "Split 15 into 3 groups"),
        AnimationStep("5 in each group", "Each group holds 5, so 15 ÷ 3 = 5"),
    ],
}

# Number-key shortcuts in the animation screen
OPERATION_KEYS = {str(i): op for i, op in enumerate(Operation, start=1)}


class AnimationDemo:
    """Play/pause state over one operation's script."""

    def __init__(self, operation: Operation = Operation.ADDITION, interval: float = 1.5):
        self.interval = interval
        self.operation = operation
        self.steps: List[AnimationStep] = SCRIPTS[operation]
        self.current_step = 0
        self.is_playing = True
        self._elapsed = 0.0

    def select(self, operation: Operation):
        """Switch operation, restarting playback from the first step."""
        self.operation = operation
        self.steps = SCRIPTS[operation]
        self.current_step = 0
        self.is_playing = True
        self._elapsed = 0.0

    def toggle(self):
        """Toggle play/pause."""
        self.is_playing = not self.is_playing

    def handle_key(self, key: str) -> bool:
        """Handle the space key and operation number keys."""
        if key == " ":
            self.toggle()
            return True
        operation = OPERATION_KEYS.get(key)
        if operation is not None:
            self.select(operation)
            return True
        return False

    def tick(self):
        """Advance one step if playing, wrapping to the start."""
        if not self.is_playing or not self.steps:
            return
        if self.current_step >= len(self.steps) - 1:
            self.current_step = 0
        else:
            self.current_step += 1

    def advance(self, elapsed: float) -> int:
        """Run the timer forward by elapsed seconds.

        Returns:
            Number of ticks fired.
        """
        if not self.is_playing or self.interval <= 0:
            return 0
        self._elapsed += elapsed
        ticks = 0
        while self._elapsed >= self.interval:
            self._elapsed -= self.interval
            self.tick()
            ticks += 1
        return ticks

    @property
    def current(self) -> Optional[AnimationStep]:
        if not self.steps:
            return None
        return self.steps[self.current_step]

    @property
    def status(self) -> str:
        action = "pause" if self.is_playing else "resume"
        return f"Space: {action} | Step {self.current_step + 1}/{len(self.steps)}"
