from typing import Iterable, Optional

from rich.panel import Panel
from rich.table import Table

from cc_switch.tui.enums import UIStyle


class UISection:
    @staticmethod
    def wrap(title: str, body, style: str = UIStyle.BLUE.value, subtitle: Optional[str] = None) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, body: str, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def empty(title: str, message: str) -> Panel:
        return UISection.note(title, message, style=UIStyle.YELLOW.value)

    @staticmethod
    def details(
        title: str, rows: Iterable[tuple[str, str]], style: str = UIStyle.BLUE.value
    ) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold")
        grid.add_column(overflow="fold")
        for key, value in rows:
            grid.add_row(key, value)
        return UISection.wrap(title, grid, style=style)
