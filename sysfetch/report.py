from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Snapshot

console = Console()

# (bullet, colour) for each entry of Snapshot.lines()
_ITEMS = [
    ("👤", "bright_blue"),
    ("🖥️", "cyan"),
    ("⚙️", "yellow"),
    ("🖼️", "bright_magenta"),
    ("💾", "magenta"),
    ("🧠", "bright_yellow"),
]
# (label, colour) for each entry of Snapshot.utilizations()
_BARS = [
    ("CPU", "yellow"),
    ("GPU", "bright_magenta"),
    ("DSK", "magenta"),
    ("MEM", "bright_yellow"),
]
BAR_WIDTH = 50


def render_bar(value: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * max(0, min(100, value)) / 100)
    return "█" * filled + "░" * (width - filled)


def bar_chart(snapshot: Snapshot, width: int = BAR_WIDTH) -> Table:
    table = Table.grid(padding=(0, 1, 0, 0))
    for (label, colour), value in zip(_BARS, snapshot.utilizations()):
        table.add_row(
            Text(label, style=f"bold {colour}"),
            Text(render_bar(value, width), style=colour),
            Text(f"{value:>3}%"),
        )
    return table


def info_list(snapshot: Snapshot) -> Table:
    table = Table.grid(padding=(0, 2, 0, 0))
    for (bullet, colour), text in zip(_ITEMS, snapshot.lines()):
        table.add_row(bullet, Text(text, style=colour))
    return table


def layout(snapshot: Snapshot, width: int = BAR_WIDTH) -> Table:
    """Bar chart on the left, the six-line info list on the right."""
    panels = Table.grid(padding=(0, 4, 0, 0))
    panels.add_column(vertical="middle")
    panels.add_column(vertical="middle")
    panels.add_row(bar_chart(snapshot, width), info_list(snapshot))
    return panels
