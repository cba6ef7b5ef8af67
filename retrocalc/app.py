"""Interactive retrocalc application.

Three routes share one AppContext:
- "/": calculator (command / menu / help modes)
- "/history": recent calculations
- "/animation": scripted arithmetic demo

Input is line based. Key presses are typed by name (F1, up, esc, ...),
a line holding a single space is the space bar, and ":"-commands navigate.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import questionary
from rich.console import Console, RenderableType

from .animation import AnimationDemo, Operation
from .config import CalcConfig
from .flow import CalculatorFlow, Mode
from .history import HistoryViewer
from .render import render_animation, render_calculator, render_history
from .store import RecordStore

logger = logging.getLogger(__name__)

ROUTE_CALCULATOR = "/"
ROUTE_HISTORY = "/history"
ROUTE_ANIMATION = "/animation"
ROUTES = (ROUTE_CALCULATOR, ROUTE_HISTORY, ROUTE_ANIMATION)

QUIT = "quit"

NAV_COMMANDS = {
    ":calc": ROUTE_CALCULATOR,
    ":c": ROUTE_CALCULATOR,
    ":history": ROUTE_HISTORY,
    ":h": ROUTE_HISTORY,
    ":animation": ROUTE_ANIMATION,
    ":a": ROUTE_ANIMATION,
    ":quit": QUIT,
    ":q": QUIT,
}

KEY_ALIASES = {
    "f1": "F1",
    "f2": "F2",
    "f3": "F3",
    "up": "ArrowUp",
    "k": "ArrowUp",
    "down": "ArrowDown",
    "j": "ArrowDown",
    "esc": "Escape",
    "escape": "Escape",
    "space": " ",
}

PROMPTS = {
    ROUTE_CALCULATOR: "calc> ",
    ROUTE_HISTORY: "history> ",
    ROUTE_ANIMATION: "anim> ",
}

MENU_CHOICES = [
    ("Command mode", "command"),
    ("View history", "history"),
    ("Animation: addition", "animation:addition"),
    ("Animation: subtraction", "animation:subtraction"),
    ("Animation: multiplication", "animation:multiplication"),
    ("Animation: division", "animation:division"),
    ("Help", "help"),
]


def to_key(line: str) -> Optional[str]:
    """Map an input line to a key name, or None if it is not a key."""
    if line == " ":
        return " "
    return KEY_ALIASES.get(line.strip().lower())


def prompt_menu() -> Optional[str]:
    """Ask for a menu choice with number-key shortcuts.

    Returns:
        The chosen value, or None if the prompt was cancelled.
    """
    return questionary.select(
        "Select operation",
        choices=[questionary.Choice(title, value=value) for title, value in MENU_CHOICES],
        use_shortcuts=True,
    ).ask()


@dataclass
class AppContext:
    """Shared state passed to every screen."""

    config: CalcConfig
    store: RecordStore
    console: Console


class App:
    """Routes input lines to the active screen."""

    def __init__(
        self,
        context: AppContext,
        menu: Optional[Callable[[], Optional[str]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.context = context
        self.menu = menu or prompt_menu
        self.clock = clock
        self.route = ROUTE_CALCULATOR
        self.calculator = CalculatorFlow(
            context.store, blink_interval=context.config.cursor_blink_interval
        )
        self.history: Optional[HistoryViewer] = None
        self.animation = AnimationDemo(interval=context.config.animation_interval)
        self._last_tick = clock()

    def navigate(self, route: str, operation: Optional[Operation] = None):
        """Switch to a route, resetting that screen's state."""
        if route not in ROUTES:
            raise ValueError(f"Unknown route: {route}")

        if route == ROUTE_HISTORY:
            records = self.context.store.load_recent(self.context.config.history_limit)
            self.history = HistoryViewer(records)
        elif route == ROUTE_ANIMATION:
            self.animation.select(operation or Operation.ADDITION)

        logger.debug("Navigating %s -> %s", self.route, route)
        self.route = route

    def handle_line(self, line: str) -> bool:
        """Handle one input line.

        Returns:
            False when the app should exit.
        """
        target = NAV_COMMANDS.get(line.strip().lower())
        if target == QUIT:
            return False
        if target:
            self.navigate(target)
            return True

        key = to_key(line)
        if self.route == ROUTE_CALCULATOR:
            self._handle_calculator(line, key)
        elif self.route == ROUTE_HISTORY:
            if key:
                route = self.history.handle_key(key)
                if route:
                    self.navigate(route)
        elif self.route == ROUTE_ANIMATION:
            if key == "Escape":
                self.navigate(ROUTE_CALCULATOR)
            else:
                self.animation.handle_key(key or line.strip())
        return True

    def _handle_calculator(self, line: str, key: Optional[str]):
        if key and self.calculator.handle_key(key):
            if self.calculator.mode is Mode.MENU:
                self._open_menu()
            return
        self.calculator.handle_input(line)

    def _open_menu(self):
        choice = self.menu()
        if choice == "help":
            self.calculator.handle_key("F3")
            return

        self.calculator.handle_key("F1")
        if choice == "history":
            self.navigate(ROUTE_HISTORY)
        elif choice and choice.startswith("animation:"):
            self.navigate(ROUTE_ANIMATION, Operation(choice.split(":", 1)[1]))

    def render(self) -> RenderableType:
        """Advance timers and render the active screen."""
        now = self.clock()
        elapsed, self._last_tick = now - self._last_tick, now

        if self.route == ROUTE_HISTORY:
            return render_history(self.history)
        if self.route == ROUTE_ANIMATION:
            self.animation.advance(elapsed)
            return render_animation(self.animation)
        self.calculator.blink(elapsed)
        return render_calculator(self.calculator)

    def run(self, read_line: Optional[Callable[[str], str]] = None):
        """Run the interactive loop until :quit, EOF or Ctrl-C."""
        console = self.context.console
        read_line = read_line or console.input

        while True:
            console.print(self.render())
            try:
                line = read_line(PROMPTS[self.route])
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            if not self.handle_line(line):
                break

        console.print("[dim]Bye.[/dim]")
