"""
Value types used across UniBook.

Every value wraps exactly one string, is immutable and compares by value.
Each type exposes:
- MESSAGE_CONSTRAINTS: the text shown to users when input is rejected
- is_valid(text): the pure format check
- a constructor that refuses invalid text with ValueError(MESSAGE_CONSTRAINTS)

The parsing layer (unibook.parse) is the normal way to build values from
user input; constructing them directly is fine for trusted data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar


# Largest value a one-based index may take (signed 32-bit range).
MAX_INDEX = 2**31 - 1

_UNSIGNED_DIGITS = re.compile(r"[0-9]+")


def is_non_zero_unsigned_integer(text: str) -> bool:
    """
    True if text is a plain run of digits (no sign, no spaces) whose value is
    between 1 and MAX_INDEX.
    """
    if text is None:
        raise TypeError("text must not be None")
    if not _UNSIGNED_DIGITS.fullmatch(text):
        return False
    return 0 < int(text) <= MAX_INDEX


@dataclass(frozen=True)
class StringValue:
    """
    Base for all single-string value types.
    """

    value: str

    MESSAGE_CONSTRAINTS: ClassVar[str] = ""
    VALIDATION_REGEX: ClassVar[re.Pattern[str]] = re.compile(r".*")

    def __post_init__(self) -> None:
        if self.value is None:
            raise TypeError(f"{type(self).__name__} value must not be None")
        if not type(self).is_valid(self.value):
            raise ValueError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        if not isinstance(text, str):
            return False
        return cls.VALIDATION_REGEX.fullmatch(text) is not None

    def __str__(self) -> str:
        return self.value


class Name(StringValue):
    MESSAGE_CONSTRAINTS = "Names should only contain alphanumeric characters and spaces, and it should not be blank"
    VALIDATION_REGEX = re.compile(r"[A-Za-z0-9][A-Za-z0-9 ]*")


class Phone(StringValue):
    MESSAGE_CONSTRAINTS = "Phone numbers should only contain numbers, and it should be at least 3 digits long"
    VALIDATION_REGEX = re.compile(r"[0-9]{3,}")


# Email building blocks: alphanumeric runs, joined by a limited set of separators.
_ALNUM = r"[^\W_]+"
_LOCAL_PART = _ALNUM + r"(?:[+_.-]" + _ALNUM + r")*"
_DOMAIN_LABEL = _ALNUM + r"(?:-" + _ALNUM + r")*"
# last label must be at least 2 characters long
_DOMAIN = r"(?:" + _DOMAIN_LABEL + r"\.)*(?=[^.]{2,}$)" + _DOMAIN_LABEL


class Email(StringValue):
    MESSAGE_CONSTRAINTS = (
        "Emails should be of the format local-part@domain and adhere to the following constraints:\n"
        "1. The local-part should only contain alphanumeric characters and these special characters, "
        "excluding the parentheses, (+_.-). The local-part may not start or end with any special characters.\n"
        "2. This is followed by a '@' and then a domain name. The domain name is made up of domain labels "
        "separated by periods.\n"
        "The domain name must:\n"
        "    - end with a domain label at least 2 characters long\n"
        "    - have each domain label start and end with alphanumeric characters\n"
        "    - have each domain label consist of alphanumeric characters, separated only by hyphens, if any."
    )
    VALIDATION_REGEX = re.compile(_LOCAL_PART + "@" + _DOMAIN, re.ASCII)


class Office(StringValue):
    MESSAGE_CONSTRAINTS = "Offices can take any values, and it should not be blank"
    VALIDATION_REGEX = re.compile(r"[^\s].*", re.DOTALL)


class ModuleCode(StringValue):
    MESSAGE_CONSTRAINTS = (
        "Module codes should start with 2 to 3 uppercase letters, followed by 4 digits "
        "and an optional uppercase letter, e.g. CS2103T"
    )
    VALIDATION_REGEX = re.compile(r"[A-Z]{2,3}[0-9]{4}[A-Z]?")


class ModuleName(StringValue):
    MESSAGE_CONSTRAINTS = (
        "Module names should only contain alphanumeric characters and spaces, and it should not be blank"
    )
    VALIDATION_REGEX = re.compile(r"[A-Za-z0-9][A-Za-z0-9 ]*")


class Tag(StringValue):
    MESSAGE_CONSTRAINTS = "Tags names should be alphanumeric"
    VALIDATION_REGEX = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class Index:
    """
    A position in a list. Stored zero-based; users always see one-based numbers.
    """

    zero_based: int

    def __post_init__(self) -> None:
        if self.zero_based < 0:
            raise ValueError(f"Index must not be negative: {self.zero_based}")

    @classmethod
    def from_zero_based(cls, zero_based: int) -> "Index":
        return cls(zero_based)

    @classmethod
    def from_one_based(cls, one_based: int) -> "Index":
        if one_based < 1:
            raise ValueError(f"One-based index must be positive: {one_based}")
        return cls(one_based - 1)

    @property
    def one_based(self) -> int:
        return self.zero_based + 1
