"""CLI interface for retrocalc.

Commands:
- (none): start the interactive calculator
- calc: evaluate one expression
- history: show, export or clear calculation history
- animate: play an arithmetic animation
"""

import json
import logging
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .animation import AnimationDemo, Operation
from .app import App, AppContext
from .config import load_config
from .errors import CalculatorError
from .evaluator import calculate
from .history import export_markdown
from .models import CalculationRecord, format_number
from .render import render_animation, render_steps
from .store import get_record_store


console = Console()


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="retrocalc")
@click.option(
    "--path",
    "-p",
    default=".",
    help="Project path holding .retrocalc/ (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, path: str, verbose: bool):
    """Retro Calculator - terminal arithmetic with history.

    Run without a command to start the interactive calculator:
    - F1/F2/F3 switch command, menu and help modes
    - :history and :animation open the other screens
    """
    _setup_logging(verbose)

    project_path = Path(path).resolve()
    if not project_path.is_dir():
        console.print(f"[red]Error: Path does not exist: {project_path}[/red]")
        sys.exit(1)

    config = load_config(str(project_path))
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["store"] = get_record_store(config)

    if ctx.invoked_subcommand is None:
        context = AppContext(config=config, store=ctx.obj["store"], console=console)
        App(context).run()


# --- Calc Command ---


@main.command()
@click.argument("expression")
@click.option("--no-save", is_flag=True, help="Do not record the calculation in history")
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON")
@click.pass_context
def calc(ctx, expression: str, no_save: bool, as_json: bool):
    """Evaluate an expression.

    Examples:
        retrocalc calc "3+5*2"
        retrocalc calc "(1+2)/4" --no-save
    """
    try:
        result, steps = calculate(expression)
    except CalculatorError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    record = CalculationRecord.create(expression, steps, result)
    if not no_save:
        ctx.obj["store"].append(record)

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
        return

    console.print(f"[bold green]= {format_number(result)}[/bold green]")
    console.print(render_steps(steps))


# --- History Command ---


@main.command()
@click.option("--count", "-n", type=int, default=None, help="Number of entries to show")
@click.option("--json", "as_json", is_flag=True, help="Print records as JSON")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write a Markdown report")
@click.option("--clear", is_flag=True, help="Delete all stored history")
@click.pass_context
def history(ctx, count: int, as_json: bool, export_path: str, clear: bool):
    """Show recent calculations, most recent first.

    Examples:
        retrocalc history
        retrocalc history -n 3 --json
        retrocalc history --export history.md
    """
    store = ctx.obj["store"]
    config = ctx.obj["config"]

    if clear:
        store.clear()
        console.print("[green]History cleared.[/green]")
        return

    records = store.load_recent(count if count is not None else config.history_limit)

    if export_path:
        Path(export_path).write_text(export_markdown(records))
        console.print(f"[green]Exported {len(records)} record(s) to {export_path}[/green]")
        return

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        console.print("[yellow]No history yet.[/yellow]")
        return

    console.print(f"[bold]Last {len(records)} calculation(s):[/bold]")
    for i, record in enumerate(records, 1):
        local_time = record.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        console.print(
            f"  {i}. {escape(record.expression)} = [green]{format_number(record.result)}[/green] "
            f"[dim]{local_time}[/dim]"
        )


# --- Animate Command ---


@main.command()
@click.argument(
    "operation",
    type=click.Choice([op.value for op in Operation]),
    default=Operation.ADDITION.value,
)
@click.option("--cycles", "-c", default=1, type=click.IntRange(min=1), help="Times to play the script")
@click.option("--interval", "-i", type=click.FloatRange(min=0), default=None, help="Seconds per step")
@click.pass_context
def animate(ctx, operation: str, cycles: int, interval: float):
    """Play an arithmetic animation demo.

    Press Ctrl-C to stop early.
    """
    config = ctx.obj["config"]
    demo = AnimationDemo(
        Operation(operation),
        interval=interval if interval is not None else config.animation_interval,
    )
    frames = len(demo.steps) * cycles

    try:
        with Live(render_animation(demo), console=console, auto_refresh=False) as live:
            for _ in range(1, frames):
                time.sleep(demo.interval)
                demo.tick()
                live.update(render_animation(demo), refresh=True)
            time.sleep(demo.interval)
    except KeyboardInterrupt:
        console.print("[yellow]Stopped.[/yellow]")


if __name__ == "__main__":
    main()
