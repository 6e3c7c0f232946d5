"""
Parsing (raw text -> validated values).

Every parse_* function:
- refuses None with TypeError (a programming error, never user input)
- trims leading/trailing spaces and ASCII control characters
- checks the value type's is_valid() and raises ParseError carrying that
  type's MESSAGE_CONSTRAINTS if the check fails

Batch parsers apply the single-value parser to every element, stop at the
first invalid element and return a set. An empty input gives an empty set.

The module also contains the prefix tokenizer used by the command parser:

    add o/student n/Alex Yeoh p/87438807 t/friend t/tutor
        -> preamble "add", {"o/": ["student"], "n/": ["Alex Yeoh"], ...}
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Iterable, NamedTuple, Optional, TypeVar

from unibook.model import Module
from unibook.values import (
    Email,
    Index,
    ModuleCode,
    ModuleName,
    Name,
    Office,
    Phone,
    StringValue,
    Tag,
    is_non_zero_unsigned_integer,
)


MESSAGE_INVALID_INDEX = "Index is not a non-zero unsigned integer."

# Only ASCII control characters and the space are trimmed; U+00A0 and other
# Unicode spaces stay part of the value.
_TRIM_CHARS = "".join(chr(c) for c in range(0x21))


class ParseError(Exception):
    """
    Raised when user input does not satisfy a value type's format.

    The message is meant to be shown to the user as-is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ModuleEntry(NamedTuple):
    """A module as typed by the user: its name and its code."""

    name: str
    code: str


V = TypeVar("V", bound=StringValue)


def _trim(text: str) -> str:
    return text.strip(_TRIM_CHARS)


def _require_non_null(value: object, what: str) -> None:
    if value is None:
        raise TypeError(f"{what} must not be None")


def _parse_value(value_type: type[V], raw: str) -> V:
    _require_non_null(raw, value_type.__name__)
    trimmed = _trim(raw)
    if not value_type.is_valid(trimmed):
        raise ParseError(value_type.MESSAGE_CONSTRAINTS)
    return value_type(trimmed)


# ---------------------------------------------------------------------------
# Single values
# ---------------------------------------------------------------------------


def parse_index(one_based_index: str) -> Index:
    """
    Parse a one-based index such as " 3 " into Index.from_one_based(3).
    """
    _require_non_null(one_based_index, "index")
    trimmed = _trim(one_based_index)
    if not is_non_zero_unsigned_integer(trimmed):
        raise ParseError(MESSAGE_INVALID_INDEX)
    return Index.from_one_based(int(trimmed))


def parse_name(name: str) -> Name:
    return _parse_value(Name, name)


def parse_phone(phone: str) -> Phone:
    return _parse_value(Phone, phone)


def parse_email(email: str) -> Email:
    return _parse_value(Email, email)


def parse_office(office: str) -> Office:
    return _parse_value(Office, office)


def parse_module_name(module_name: str) -> ModuleName:
    return _parse_value(ModuleName, module_name)


def parse_module_code(module_code: str) -> ModuleCode:
    """
    Module codes are case-insensitive on input: " cs2103t " -> "CS2103T".
    """
    _require_non_null(module_code, "ModuleCode")
    return _parse_value(ModuleCode, _trim(module_code).upper())


def parse_tag(tag: str) -> Tag:
    return _parse_value(Tag, tag)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def parse_tags(tags: Iterable[str]) -> set[Tag]:
    _require_non_null(tags, "tags")
    return {parse_tag(t) for t in tags}


def parse_multiple_modules(module_codes: Iterable[str]) -> set[ModuleCode]:
    _require_non_null(module_codes, "module codes")
    return {parse_module_code(c) for c in module_codes}


def parse_modules(entries: Iterable[ModuleEntry | tuple[str, str]]) -> set[Module]:
    """
    Build one Module (without members) per (name, code) entry.
    """
    _require_non_null(entries, "modules")
    modules: set[Module] = set()
    for entry in entries:
        name, code = entry
        modules.add(Module(parse_module_name(name), parse_module_code(code)))
    return modules


# ---------------------------------------------------------------------------
# Prefix tokenizer
# ---------------------------------------------------------------------------


class ArgumentMultimap:
    """
    Values typed after each prefix, in the order they appeared. The text
    before the first prefix is stored under the empty prefix ("preamble").
    """

    def __init__(self) -> None:
        self._values: dict[str, list[str]] = defaultdict(list)

    def put(self, prefix: str, value: str) -> None:
        self._values[prefix].append(value)

    def get_value(self, prefix: str) -> Optional[str]:
        """Last value given for prefix (later values override earlier ones)."""
        values = self._values.get(prefix)
        return values[-1] if values else None

    def get_all_values(self, prefix: str) -> list[str]:
        return list(self._values.get(prefix, []))

    def get_preamble(self) -> str:
        return self.get_value("") or ""

    def has(self, *prefixes: str) -> bool:
        return all(self.get_value(p) is not None for p in prefixes)


def tokenize(args: str, *prefixes: str) -> ArgumentMultimap:
    """
    Split args on the given prefixes. A prefix only counts when it starts the
    string or follows whitespace, so "e/a@b.com" inside a value is left alone
    unless preceded by a space.
    """
    _require_non_null(args, "args")
    positions: list[tuple[int, str]] = []
    for prefix in prefixes:
        for match in re.finditer(r"(?:^|\s)(" + re.escape(prefix) + r")", args):
            positions.append((match.start(1), prefix))
    positions.sort()

    multimap = ArgumentMultimap()
    preamble_end = positions[0][0] if positions else len(args)
    multimap.put("", _trim(args[:preamble_end]))

    for i, (start, prefix) in enumerate(positions):
        end = positions[i + 1][0] if i + 1 < len(positions) else len(args)
        multimap.put(prefix, _trim(args[start + len(prefix) : end]))

    return multimap
