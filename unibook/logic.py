"""
Command logic.

Turns one line of user input into a change of the model, then saves the
book. Commands:

    add o/professor n/NAME p/PHONE e/EMAIL a/OFFICE [t/TAG]... [m/CODE]...
    add o/student n/NAME p/PHONE e/EMAIL [t/TAG]... [m/CODE]...
    add o/module n/MODULE_NAME m/CODE
    delete INDEX | delete m/CODE
    find KEYWORD [MORE_KEYWORDS]...
    list
    clear
    help
    exit

Two kinds of failure reach the caller:
- ParseError: the input is malformed (wrong format or invalid value)
- CommandError: the input is fine but cannot be applied (duplicates, ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from unibook.logs import get_logger
from unibook.model import Module, ModelManager, Person, Professor, Student, UniBook, UserPrefs, show_all
from unibook.parse import (
    ArgumentMultimap,
    ModuleEntry,
    ParseError,
    parse_email,
    parse_index,
    parse_module_code,
    parse_modules,
    parse_multiple_modules,
    parse_name,
    parse_office,
    parse_phone,
    parse_tags,
    tokenize,
)
from unibook.storage import StorageManager
from unibook.values import ModuleCode


logger = get_logger(__name__)


PREFIX_TYPE = "o/"
PREFIX_NAME = "n/"
PREFIX_PHONE = "p/"
PREFIX_EMAIL = "e/"
PREFIX_OFFICE = "a/"
PREFIX_TAG = "t/"
PREFIX_MODULE = "m/"

ALL_PREFIXES = (
    PREFIX_TYPE,
    PREFIX_NAME,
    PREFIX_PHONE,
    PREFIX_EMAIL,
    PREFIX_OFFICE,
    PREFIX_TAG,
    PREFIX_MODULE,
)

MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{usage}"
MESSAGE_INVALID_PERSON_INDEX = "The person index provided is invalid"
MESSAGE_DUPLICATE_PERSON = "This person already exists in the UniBook"
MESSAGE_DUPLICATE_MODULE = "This module already exists in the UniBook"
MESSAGE_MODULE_NOT_FOUND = "Module {code} does not exist in the UniBook, add it first"

ADD_USAGE = (
    "add: Adds a person or a module to the UniBook.\n"
    "Parameters: o/professor n/NAME p/PHONE e/EMAIL a/OFFICE [t/TAG]... [m/MODULE_CODE]...\n"
    "            o/student n/NAME p/PHONE e/EMAIL [t/TAG]... [m/MODULE_CODE]...\n"
    "            o/module n/MODULE_NAME m/MODULE_CODE\n"
    "Example: add o/student n/John Doe p/98765432 e/johnd@example.com t/friends m/CS2103"
)
DELETE_USAGE = (
    "delete: Deletes the person identified by the index number used in the displayed person list, "
    "or the module with the given code.\n"
    "Parameters: INDEX (must be a positive integer) | m/MODULE_CODE\n"
    "Example: delete 1"
)
FIND_USAGE = (
    "find: Finds all persons whose names contain any of the specified keywords (case-insensitive).\n"
    "Parameters: KEYWORD [MORE_KEYWORDS]...\n"
    "Example: find alice bob charlie"
)
HELP_MESSAGE = "\n\n".join(
    [ADD_USAGE, DELETE_USAGE, FIND_USAGE, "list: Lists everyone.", "clear: Clears all entries.", "exit: Exits."]
)


class CommandError(Exception):
    """Raised when a well-formed command cannot be carried out."""


@dataclass(frozen=True)
class CommandResult:
    feedback: str
    show_help: bool = False
    exit: bool = False


Command = Callable[[ModelManager], CommandResult]


def _invalid_format(usage: str) -> ParseError:
    return ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage=usage))


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def _parse_add(args: str) -> Command:
    tokens = tokenize(args, *ALL_PREFIXES)
    kind = (tokens.get_value(PREFIX_TYPE) or "").strip().lower()
    if tokens.get_preamble() or kind not in ("professor", "student", "module"):
        raise _invalid_format(ADD_USAGE)

    if kind == "module":
        if not tokens.has(PREFIX_NAME, PREFIX_MODULE):
            raise _invalid_format(ADD_USAGE)
        entry = ModuleEntry(tokens.get_value(PREFIX_NAME), tokens.get_value(PREFIX_MODULE))
        (module,) = parse_modules([entry])
        return lambda model: _add_module(model, module)

    required = [PREFIX_NAME, PREFIX_PHONE, PREFIX_EMAIL]
    if kind == "professor":
        required.append(PREFIX_OFFICE)
    if not tokens.has(*required):
        raise _invalid_format(ADD_USAGE)

    person = _person_from_tokens(kind, tokens)
    return lambda model: _add_person(model, person)


def _person_from_tokens(kind: str, tokens: ArgumentMultimap) -> Person:
    common = dict(
        name=parse_name(tokens.get_value(PREFIX_NAME)),
        phone=parse_phone(tokens.get_value(PREFIX_PHONE)),
        email=parse_email(tokens.get_value(PREFIX_EMAIL)),
        tags=frozenset(parse_tags(tokens.get_all_values(PREFIX_TAG))),
        modules=frozenset(parse_multiple_modules(tokens.get_all_values(PREFIX_MODULE))),
    )
    if kind == "professor":
        return Professor(office=parse_office(tokens.get_value(PREFIX_OFFICE)), **common)
    return Student(**common)


def _add_person(model: ModelManager, person: Person) -> CommandResult:
    if model.has_person(person):
        raise CommandError(MESSAGE_DUPLICATE_PERSON)
    for code in sorted(person.modules, key=str):
        if not model.has_module(code):
            raise CommandError(MESSAGE_MODULE_NOT_FOUND.format(code=code))
    model.add_person(person)
    return CommandResult(f"New {person.kind} added: {person.name}")


def _add_module(model: ModelManager, module: Module) -> CommandResult:
    if model.has_module(module.code):
        raise CommandError(MESSAGE_DUPLICATE_MODULE)
    model.add_module(module)
    return CommandResult(f"New module added: {module}")


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def _parse_delete(args: str) -> Command:
    tokens = tokenize(args, PREFIX_MODULE)
    code_text = tokens.get_value(PREFIX_MODULE)
    if code_text is not None:
        if tokens.get_preamble():
            raise _invalid_format(DELETE_USAGE)
        code = parse_module_code(code_text)
        return lambda model: _delete_module(model, code)

    try:
        index = parse_index(args)
    except ParseError as e:
        raise ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage=DELETE_USAGE)) from e
    return lambda model: _delete_person(model, index.zero_based)


def _delete_person(model: ModelManager, zero_based: int) -> CommandResult:
    shown = model.get_filtered_person_list()
    if zero_based >= len(shown):
        raise CommandError(MESSAGE_INVALID_PERSON_INDEX)
    person = shown[zero_based]
    model.delete_person(person)
    return CommandResult(f"Deleted {person.kind}: {person.name}")


def _delete_module(model: ModelManager, code: ModuleCode) -> CommandResult:
    if not model.has_module(code):
        raise CommandError(MESSAGE_MODULE_NOT_FOUND.format(code=code))
    module = model.delete_module(code)
    return CommandResult(f"Deleted module: {module}")


# ---------------------------------------------------------------------------
# find / list / clear / help / exit
# ---------------------------------------------------------------------------


def _parse_find(args: str) -> Command:
    keywords = [k.lower() for k in args.split()]
    if not keywords:
        raise _invalid_format(FIND_USAGE)

    def matches(person: Person) -> bool:
        words = str(person.name).lower().split()
        return any(k in words for k in keywords)

    def run(model: ModelManager) -> CommandResult:
        model.update_filtered_person_list(matches)
        return CommandResult(f"{len(model.get_filtered_person_list())} persons listed!")

    return run


def _list(model: ModelManager) -> CommandResult:
    model.update_filtered_person_list(show_all)
    return CommandResult("Listed all persons")


def _clear(model: ModelManager) -> CommandResult:
    model.set_unibook(UniBook())
    return CommandResult("UniBook has been cleared!")


def _no_args(command: Command) -> Callable[[str], Command]:
    def parse(args: str) -> Command:
        return command

    return parse


_PARSERS: dict[str, Callable[[str], Command]] = {
    "add": _parse_add,
    "delete": _parse_delete,
    "find": _parse_find,
    "list": _no_args(_list),
    "clear": _no_args(_clear),
    "help": _no_args(lambda model: CommandResult(HELP_MESSAGE, show_help=True)),
    "exit": _no_args(lambda model: CommandResult("Exiting UniBook as requested ...", exit=True)),
}


def parse_command(user_input: str) -> Command:
    """
    Split off the command word and hand the rest to the matching parser.
    """
    text = user_input.strip()
    if not text:
        raise _invalid_format(HELP_MESSAGE)
    word, *rest = text.split(maxsplit=1)
    parser = _PARSERS.get(word.lower())
    if parser is None:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND)
    return parser(rest[0] if rest else "")


# ---------------------------------------------------------------------------
# Logic manager
# ---------------------------------------------------------------------------


class LogicManager:
    """
    Runs commands against the model and saves the book afterwards.
    """

    def __init__(self, model: ModelManager, storage: StorageManager) -> None:
        self.model = model
        self.storage = storage

    def execute(self, command_text: str) -> CommandResult:
        logger.info("----------------[USER COMMAND][%s]", command_text)
        command = parse_command(command_text)
        try:
            result = command(self.model)
        except CommandError as e:
            logger.info("Command rejected: %s", e)
            raise

        try:
            self.storage.save_unibook(self.model.get_unibook())
        except OSError as e:
            raise CommandError(f"Could not save data to file: {e}") from e
        logger.info("Result: %s", result.feedback.splitlines()[0] if result.feedback else "")
        return result

    def get_filtered_person_list(self) -> list[Person]:
        return self.model.get_filtered_person_list()

    def get_module_list(self) -> list[Module]:
        return self.model.get_unibook().modules

    def get_user_prefs(self) -> UserPrefs:
        return self.model.get_user_prefs()
