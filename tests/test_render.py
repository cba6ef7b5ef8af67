"""Tests for render.py - Screen rendering."""

import pytest
from rich.console import Console

from retrocalc.animation import AnimationDemo, Operation
from retrocalc.evaluator import calculate
from retrocalc.flow import CalculatorFlow
from retrocalc.history import HistoryViewer
from retrocalc.models import CalculationRecord, Step, StepType
from retrocalc.render import (
    STEP_STYLES,
    render_animation,
    render_calculator,
    render_help,
    render_history,
    render_steps,
)
from retrocalc.store import LocalStorage, RecordStore


def to_text(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


@pytest.fixture
def flow(tmp_path):
    return CalculatorFlow(RecordStore(LocalStorage(tmp_path / "storage.json")))


class TestRenderSteps:
    """Tests for render_steps()."""

    def test_values_in_order(self):
        _, steps = calculate("3+5*2")
        assert to_text(render_steps(steps)).split() == ["3", "+", "5", "*", "2", "13"]

    def test_styles_by_type(self):
        text = render_steps([Step("1", StepType.OPERAND), Step("+", StepType.OPERATOR)])
        styles = [str(span.style) for span in text.spans]
        assert styles == [STEP_STYLES[StepType.OPERAND], STEP_STYLES[StepType.OPERATOR]]


class TestRenderCalculator:
    """Tests for render_calculator()."""

    def test_placeholder(self, flow):
        output = to_text(render_calculator(flow))
        assert "Mode: COMMAND" in output
        assert "Enter expression (e.g. 3+5*2)" in output

    def test_result_and_steps(self, flow):
        flow.handle_input("3+5*2")
        output = to_text(render_calculator(flow))
        assert "= 13" in output
        assert "Calculation steps:" in output

    def test_error(self, flow):
        flow.handle_input("3+")
        output = to_text(render_calculator(flow))
        assert "Error: Invalid expression" in output
        assert "Calculation steps:" not in output

    def test_menu_mode(self, flow):
        flow.handle_key("F2")
        output = to_text(render_calculator(flow))
        assert "Mode: MENU" in output
        assert "Select operation with number keys" in output

    def test_help_mode(self, flow):
        flow.handle_key("F3")
        assert "Command mode" in to_text(render_calculator(flow))
        assert "Mode: HELP" in to_text(render_calculator(flow))


class TestRenderHistory:
    """Tests for render_history()."""

    def test_empty(self):
        assert "No history yet" in to_text(render_history(HistoryViewer([])))

    def test_selected_shows_steps(self):
        records = []
        for i, expression in enumerate(["1+1", "2*3"]):
            result, steps = calculate(expression)
            records.append(CalculationRecord.create(expression, steps, result, clock=lambda: 1000.0 + i))
        output = to_text(render_history(HistoryViewer(records)))
        assert "1+1" in output
        assert "= 6" in output
        assert output.count("Calculation steps:") == 1


class TestRenderAnimation:
    """Tests for render_animation()."""

    def test_current_frame(self):
        demo = AnimationDemo(Operation.DIVISION)
        output = to_text(render_animation(demo))
        assert "Division demo" in output
        assert "15 ÷ 3 = ?" in output
        assert "Space: pause | Step 1/2" in output

    def test_help(self):
        assert "F1" in to_text(render_help())
