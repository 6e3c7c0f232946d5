"""
CLI (Command Line Interface).

    unibook [--config PATH] interactive       (default) start the interactive UI
    unibook [--config PATH] exec "<command>"  run a single command and exit

Examples:

    unibook exec "add o/module n/Software Engineering m/CS2103"
    unibook exec "add o/student n/Alex Yeoh p/87438807 e/alexyeoh@example.com m/CS2103"
    unibook exec list

Exit codes: 0 on success, 1 if the command was rejected.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from unibook.app import VERSION, MainApp
from unibook.logic import CommandError
from unibook.parse import ParseError


def _cmd_exec(app: MainApp, args: argparse.Namespace, console: Console) -> int:
    """
    Run one command and print its feedback.
    """
    command_text = " ".join(args.words).strip()
    if not command_text:
        console.print("Please provide a command.", style="red")
        return 1

    try:
        result = app.logic.execute(command_text)
    except (ParseError, CommandError) as e:
        console.print(str(e), style="red", markup=False, highlight=False)
        return 1

    console.print(result.feedback, markup=False, highlight=False)
    if command_text.split()[0].lower() in ("list", "find"):
        app.ui.console = console
        app.ui.render_persons()
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="unibook", description="UniBook CLI")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: config.json)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("interactive", help="Interactive mode")

    p_exec = sub.add_parser("exec", help="Run a single UniBook command")
    p_exec.add_argument("words", nargs=argparse.REMAINDER, help='Command text, e.g. "find alex"')

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> None:
    """
    CLI entry point. Boots the application, dispatches to the chosen mode,
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)
    console = console or Console()

    app = MainApp()
    app.init(args.config)
    try:
        if args.command == "exec":
            code = _cmd_exec(app, args, console)
        else:
            app.start(console)
            code = 0
    finally:
        app.stop()

    raise SystemExit(code)
