"""Calculator screen state machine.

Modes:
- command: every input change is tokenized and evaluated immediately
- menu: operation selection (handled by the app's menu prompt)
- help: key reference

F1/F2/F3 switch modes from any state.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from .errors import CalculatorError
from .evaluator import calculate
from .models import CalculationRecord, Number, Step
from .store import RecordStore

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Calculator modes."""

    COMMAND = "command"
    MENU = "menu"
    HELP = "help"


MODE_KEYS = {
    "F1": Mode.COMMAND,
    "F2": Mode.MENU,
    "F3": Mode.HELP,
}


class CalculatorFlow:
    """Binds input events to evaluation and history recording."""

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Callable[[], float]] = None,
        blink_interval: float = 0.5,
    ):
        self.store = store
        self.clock = clock
        self.blink_interval = blink_interval
        self.mode = Mode.COMMAND
        self.input = ""
        self.result: Optional[Number] = None
        self.steps: List[Step] = []
        self.error = ""
        self.cursor_visible = True
        self._blink_elapsed = 0.0

    def handle_key(self, key: str) -> bool:
        """Handle a mode key.

        Returns:
            True if the key switched mode.
        """
        mode = MODE_KEYS.get(key)
        if mode is None:
            return False
        self.mode = mode
        return True

    def handle_input(self, text: str) -> Optional[CalculationRecord]:
        """Handle an input change.

        In command mode the text is evaluated at once. A successful result
        is shown and recorded; a failure clears the display and sets the
        error message without touching stored history.

        Args:
            text: Full current input text.

        Returns:
            The stored record on success, otherwise None.
        """
        self.input = text
        if self.mode is not Mode.COMMAND:
            return None

        if not text.strip():
            self._clear_display()
            return None

        try:
            result, steps = calculate(text)
        except CalculatorError as e:
            logger.debug("Evaluation of %r failed: %s", text, e)
            self._clear_display()
            self.error = type(e).message
            return None

        self.result = result
        self.steps = steps
        self.error = ""

        record = CalculationRecord.create(text, steps, result, clock=self.clock)
        self.store.append(record)
        return record

    def blink(self, elapsed: float):
        """Advance the cursor blink timer by elapsed seconds."""
        if self.blink_interval <= 0:
            return
        self._blink_elapsed += elapsed
        while self._blink_elapsed >= self.blink_interval:
            self._blink_elapsed -= self.blink_interval
            self.cursor_visible = not self.cursor_visible

    def _clear_display(self):
        self.result = None
        self.steps = []
        self.error = ""
