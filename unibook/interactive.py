"""
Interactive terminal UI.

A read-eval-print loop on top of LogicManager:
- read one command from the console
- run it, print the feedback (errors in red)
- redraw the person/module tables when the model reports a change
"""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from unibook.logic import CommandError, LogicManager
from unibook.logs import get_logger
from unibook.model import Person, Professor
from unibook.parse import ParseError


logger = get_logger(__name__)

PROMPT = "[bold cyan]unibook>[/] "


def _person_row(i: int, person: Person) -> list[str]:
    office = escape(str(person.office)) if isinstance(person, Professor) else ""
    return [
        str(i),
        str(person.name),
        person.kind,
        str(person.phone),
        str(person.email),
        office,
        ", ".join(sorted(str(c) for c in person.modules)),
        ", ".join(sorted(str(t) for t in person.tags)),
    ]


class UiManager:
    """
    The user-facing side of the application. The "window" handed to start()
    is the rich Console everything is printed on.
    """

    def __init__(self, logic: LogicManager) -> None:
        self.logic = logic
        self.console: Optional[Console] = None
        self._dirty = True

    def on_model_changed(self) -> None:
        self._dirty = True

    # --- rendering --------------------------------------------------------

    def _println(self, msg: str = "", style: Optional[str] = None, markup: bool = False) -> None:
        self.console.print(msg, style=style, markup=markup, highlight=False)

    def render_persons(self) -> None:
        persons = self.logic.get_filtered_person_list()
        limit = self.logic.get_user_prefs().max_results

        table = Table(title=f"People ({len(persons)})", box=box.SIMPLE)
        table.add_column("#", justify="right")
        for column in ("Name", "Type", "Phone", "Email", "Office", "Modules", "Tags"):
            table.add_column(column)
        for i, person in enumerate(persons[:limit], start=1):
            table.add_row(*_person_row(i, person))
        self.console.print(table)

        if len(persons) > limit:
            self._println(f"... and {len(persons) - limit} more")

    def render_modules(self) -> None:
        modules = self.logic.get_module_list()
        limit = self.logic.get_user_prefs().max_results

        table = Table(title=f"Modules ({len(modules)})", box=box.SIMPLE)
        table.add_column("Code", style="bold cyan")
        table.add_column("Name")
        table.add_column("Professors", justify="right")
        table.add_column("Students", justify="right")
        for m in modules[:limit]:
            table.add_row(str(m.code), escape(str(m.name)), str(len(m.professors)), str(len(m.students)))
        self.console.print(table)

    def refresh(self) -> None:
        if self._dirty:
            self.render_modules()
            self.render_persons()
            self._dirty = False

    # --- loop -------------------------------------------------------------

    def handle(self, command_text: str) -> bool:
        """
        Run one command and print its outcome. Returns False once the user
        asked to exit.
        """
        try:
            result = self.logic.execute(command_text)
        except (ParseError, CommandError) as e:
            self._println(str(e), style="red")
            return True

        self._println(result.feedback, style=None if result.show_help else "green")
        return not result.exit

    def start(self, window: Console) -> None:
        self.console = window
        self._println("[bold]=== UniBook ===[/]", markup=True)
        self._println("Type 'help' to see all commands, 'exit' to quit.")

        while True:
            self.refresh()
            try:
                line = self.console.input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self._println()
                logger.info("Input closed, leaving interactive mode")
                return
            if not line.strip():
                continue
            if not self.handle(line):
                return
