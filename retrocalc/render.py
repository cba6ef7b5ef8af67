"""Rich renderables for the retrocalc screens."""

from typing import List

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .animation import AnimationDemo
from .flow import CalculatorFlow, Mode
from .history import HistoryViewer
from .models import CalculationRecord, Step, StepType, format_number

STEP_STYLES = {
    StepType.OPERATOR: "bold white on red",
    StepType.OPERAND: "bold white on blue",
    StepType.RESULT: "bold white on green",
}

HELP_TEXT = """\
# Retro Calculator

Type an expression such as `3+5*2` and press Enter.

| Key | Action |
|-----|--------|
| `F1` | Command mode |
| `F2` | Menu mode |
| `F3` | Help |
| `:history` | View history |
| `:animation` | Animation demo |
| `:quit` | Exit |

In history use `up`/`down` (or `k`/`j`) and `esc`.
In the animation demo a single space toggles play/pause and `1`-`4` pick an operation.
"""


def render_steps(steps: List[Step]) -> Text:
    """Render steps as coloured tags."""
    text = Text()
    for i, step in enumerate(steps):
        if i:
            text.append(" ")
        text.append(f" {step.value} ", style=STEP_STYLES[step.type])
    return text


def _status_bar(flow: CalculatorFlow) -> Table:
    bar = Table.grid(expand=True)
    bar.add_column(justify="left")
    bar.add_column(justify="right")
    bar.add_row(
        f"Mode: [bold]{flow.mode.value.upper()}[/bold]",
        "F1: Command   F2: Menu   F3: Help",
    )
    return bar


def render_calculator(flow: CalculatorFlow) -> RenderableType:
    """Render the calculator screen."""
    parts: List[RenderableType] = [
        Panel(_status_bar(flow), style="white on dark_blue"),
    ]

    if flow.mode is Mode.COMMAND:
        cursor = "█" if flow.cursor_visible else " "
        if flow.input:
            prompt = Text.assemble("> ", flow.input, cursor)
        else:
            prompt = Text.assemble("> ", (cursor, ""), ("Enter expression (e.g. 3+5*2)", "dim"))
        parts.append(Panel(prompt, border_style="blue"))
    elif flow.mode is Mode.MENU:
        parts.append(Panel("Menu mode - Select operation with number keys", border_style="blue"))
    else:
        parts.append(Panel(render_help(), border_style="blue"))

    if flow.result is not None:
        parts.append(Panel(Text(f"= {format_number(flow.result)}", style="bold"), style="black on green"))

    if flow.error:
        parts.append(Panel(f"Error: {flow.error}", style="white on red"))

    if flow.steps:
        parts.append(Text("Calculation steps:", style="dim"))
        parts.append(render_steps(flow.steps))

    parts.append(Text(":history  View History    :animation  Animation Demo", style="dim"))
    return Group(*parts)


def _history_entry(record: CalculationRecord, selected: bool) -> RenderableType:
    header = Table.grid(expand=True)
    header.add_column(justify="left")
    header.add_column(justify="right")
    local_time = record.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(Text(record.expression, style="bold"), Text(local_time, style="dim"))

    body: List[RenderableType] = [header, Text(f"= {format_number(record.result)}", style="bold green")]
    if selected:
        body.append(Text("Calculation steps:", style="dim"))
        body.append(render_steps(record.steps))

    return Panel(
        Group(*body),
        border_style="bold yellow" if selected else "yellow",
        style="black on yellow" if selected else "",
    )


def render_history(viewer: HistoryViewer) -> RenderableType:
    """Render the history screen."""
    parts: List[RenderableType] = [
        Panel(Text("History", style="bold"), style="black on yellow"),
    ]
    if viewer.is_empty:
        parts.append(Panel(Text("No history yet", justify="center"), border_style="yellow"))
    else:
        for i, record in enumerate(viewer.records):
            parts.append(_history_entry(record, i == viewer.selected_index))
    parts.append(Text("up/down: select record | esc: back", style="dim"))
    return Group(*parts)


def render_animation(demo: AnimationDemo) -> RenderableType:
    """Render the animation screen."""
    current = demo.current
    stage = Group(
        Text(current.graphic if current else "", style="bold", justify="center"),
        Text(""),
        Text(current.description if current else "", justify="center"),
    )
    choices = "  ".join(
        f"{i}: {op.value}" for i, op in enumerate(type(demo.operation), start=1)
    )
    return Group(
        Panel(Text(demo.operation.heading, style="bold"), style="white on dark_blue"),
        Text(choices, style="dim"),
        Panel(stage, border_style="green", padding=(1, 4)),
        Panel(demo.status, style="white on grey23"),
    )


def render_help() -> RenderableType:
    return Markdown(HELP_TEXT)
