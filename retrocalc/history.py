"""History viewer for retrocalc.

Shows the most recent calculations, newest first, with arrow-key selection.
Also exports history as a Markdown report.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from .models import CalculationRecord

HOME_ROUTE = "/"


class HistoryViewer:
    """Selection state over a list of records."""

    def __init__(self, records: List[CalculationRecord]):
        """Initialize with records already ordered newest first."""
        self.records = records
        self.selected_index = 0

    def handle_key(self, key: str) -> Optional[str]:
        """Handle a navigation key.

        Args:
            key: "ArrowUp", "ArrowDown" or "Escape".

        Returns:
            The route to navigate to, or None to stay.
        """
        if key == "ArrowUp":
            self.selected_index = max(0, self.selected_index - 1)
        elif key == "ArrowDown":
            self.selected_index = max(0, min(len(self.records) - 1, self.selected_index + 1))
        elif key == "Escape":
            return HOME_ROUTE
        return None

    @property
    def selected(self) -> Optional[CalculationRecord]:
        """Return the highlighted record."""
        if not self.records:
            return None
        return self.records[self.selected_index]

    @property
    def is_empty(self) -> bool:
        return not self.records


def _local_time(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _md_code(text: str) -> str:
    """Wrap text as an inline code span that is safe inside a table cell."""
    text = str(text).replace("|", "\\|")
    runs = [len(run) for run in re.findall(r"`+", text)]
    if not runs:
        return f"`{text}`"
    fence = "`" * (max(runs) + 1)
    return f"{fence} {text} {fence}"


def export_markdown(records: List[CalculationRecord]) -> str:
    """Render records as a Markdown report.

    Args:
        records: Records in the order they should be listed.

    Returns:
        Markdown text.
    """
    env = Environment(
        loader=PackageLoader("retrocalc", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["local_time"] = _local_time
    env.filters["md_code"] = _md_code
    template = env.get_template("history.md.j2")
    return template.render(
        records=records,
        generated_at=_local_time(datetime.now(timezone.utc)),
    )
