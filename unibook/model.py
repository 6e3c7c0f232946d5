"""
Central data model definitions used across the project.

This module defines:
- the people kept in the book (Professor, Student)
- Module, which groups people under a unique module code
- UniBook, the container that enforces uniqueness
- UserPrefs, the small set of per-user settings that is persisted
- ModelManager, the in-memory state the logic layer works on

Membership rule:
- a person lists the codes of the modules they belong to
- the UniBook keeps every Module's member lists in sync with those codes
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from unibook.logs import get_logger
from unibook.values import Email, ModuleCode, ModuleName, Name, Office, Phone, Tag


logger = get_logger(__name__)


class DuplicateEntryError(Exception):
    """Raised when a person or module would break the book's uniqueness rules."""


class MissingModuleError(Exception):
    """Raised when a person refers to a module code the book does not contain."""


# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Person:
    name: Name
    phone: Phone
    email: Email
    tags: frozenset[Tag] = frozenset()
    modules: frozenset[ModuleCode] = frozenset()

    def is_same_person(self, other: Optional["Person"]) -> bool:
        """
        Weaker notion of equality used for duplicate detection: two people
        are the same if they share a name.
        """
        return other is not None and other.name == self.name

    def with_modules(self, modules: Iterable[ModuleCode]) -> "Person":
        return replace(self, modules=frozenset(modules))

    @property
    def kind(self) -> str:
        return type(self).__name__.lower()


@dataclass(frozen=True)
class Professor(Person):
    office: Optional[Office] = None

    def __post_init__(self) -> None:
        if self.office is None:
            raise ValueError("A professor needs an office")


@dataclass(frozen=True)
class Student(Person):
    pass


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Module:
    """
    Represents one university module and the people attached to it.

    The code is the unique key; the member lists are owned and mutated by the
    module itself.
    """

    name: ModuleName
    code: ModuleCode
    professors: list[Professor] = field(default_factory=list)
    students: list[Student] = field(default_factory=list)

    def _members_of(self, person: Person) -> list[Any]:
        return self.professors if isinstance(person, Professor) else self.students

    def has_member(self, person: Person) -> bool:
        return any(p.is_same_person(person) for p in self._members_of(person))

    def add_member(self, person: Person) -> None:
        if not self.has_member(person):
            self._members_of(person).append(person)

    def remove_member(self, person: Person) -> None:
        members = self._members_of(person)
        members[:] = [p for p in members if not p.is_same_person(person)]

    def is_same_module(self, other: Optional["Module"]) -> bool:
        return other is not None and other.code == self.code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Module):
            return NotImplemented
        return (
            self.name == other.name
            and self.code == other.code
            and self.professors == other.professors
            and self.students == other.students
        )

    def __hash__(self) -> int:
        return hash(self.code)

    def __str__(self) -> str:
        return f"{self.code} {self.name}"


# ---------------------------------------------------------------------------
# Book
# ---------------------------------------------------------------------------


class UniBook:
    """
    Holds all people and modules. At most one person per name and at most
    one module per module code.
    """

    def __init__(self, to_be_copied: Optional["UniBook"] = None) -> None:
        self._persons: list[Person] = []
        self._modules: list[Module] = []
        if to_be_copied is not None:
            self.reset_data(to_be_copied)

    @property
    def persons(self) -> list[Person]:
        return list(self._persons)

    @property
    def modules(self) -> list[Module]:
        return list(self._modules)

    def reset_data(self, other: "UniBook") -> None:
        """
        Replace the contents of this book with a deep enough copy of other:
        modules are rebuilt so that member lists are not shared.
        """
        if other is self:
            return
        persons = other.persons
        self._persons = []
        self._modules = [Module(m.name, m.code) for m in other.modules]
        for p in persons:
            self.add_person(p)

    # --- modules ----------------------------------------------------------

    def has_module(self, code: ModuleCode) -> bool:
        return self.get_module(code) is not None

    def get_module(self, code: ModuleCode) -> Optional[Module]:
        for m in self._modules:
            if m.code == code:
                return m
        return None

    def add_module(self, module: Module) -> None:
        """
        Add an empty module. People join modules through add_person only.
        """
        if self.has_module(module.code):
            raise DuplicateEntryError(f"Module {module.code} already exists")
        if module.professors or module.students:
            raise ValueError(f"Module {module.code} must be added without members")
        self._modules.append(module)

    def remove_module(self, code: ModuleCode) -> Module:
        module = self.get_module(code)
        if module is None:
            raise MissingModuleError(f"Module {code} does not exist")
        self._modules.remove(module)

        # detach the code from everyone who referenced it
        updated: list[Person] = []
        for p in self._persons:
            if code in p.modules:
                p = p.with_modules(c for c in p.modules if c != code)
            updated.append(p)
        self._persons = updated

        # member lists hold the updated person objects
        for m in self._modules:
            m.professors.clear()
            m.students.clear()
        for p in self._persons:
            for c in p.modules:
                self.get_module(c).add_member(p)
        return module

    # --- persons ----------------------------------------------------------

    def has_person(self, person: Person) -> bool:
        return any(p.is_same_person(person) for p in self._persons)

    def add_person(self, person: Person) -> None:
        if self.has_person(person):
            raise DuplicateEntryError(f"{person.name} already exists")
        missing = sorted(str(c) for c in person.modules if not self.has_module(c))
        if missing:
            raise MissingModuleError(f"Unknown module(s): {', '.join(missing)}")

        self._persons.append(person)
        for code in person.modules:
            self.get_module(code).add_member(person)

    def remove_person(self, person: Person) -> None:
        if not self.has_person(person):
            raise KeyError(str(person.name))
        self._persons = [p for p in self._persons if not p.is_same_person(person)]
        for m in self._modules:
            m.remove_member(person)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UniBook):
            return NotImplemented
        return self._persons == other._persons and self._modules == other._modules

    def __repr__(self) -> str:
        return f"UniBook({len(self._persons)} persons, {len(self._modules)} modules)"


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


@dataclass
class UserPrefs:
    """
    User settings that survive restarts (stored in preferences.json).
    """

    unibook_file_path: Path = field(default_factory=lambda: Path("data") / "unibook.json")
    max_results: int = 20

    def to_dict(self) -> dict[str, Any]:
        return {"unibook_file_path": str(self.unibook_file_path), "max_results": self.max_results}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPrefs":
        prefs = cls()
        if "unibook_file_path" in data:
            prefs.unibook_file_path = Path(str(data["unibook_file_path"]))
        if "max_results" in data:
            n = data["max_results"]
            if not isinstance(n, int) or isinstance(n, bool) or n < 1:
                raise ValueError(f"max_results must be a positive integer, got {n!r}")
            prefs.max_results = n
        return prefs


# ---------------------------------------------------------------------------
# Model manager
# ---------------------------------------------------------------------------


PersonPredicate = Callable[[Person], bool]


def show_all(_: Person) -> bool:
    return True


class ModelManager:
    """
    In-memory state of the running application: the book, the user
    preferences, and the person list currently on display.

    An attached UI is told about every change so it can redraw.
    """

    def __init__(self, unibook: Optional[UniBook] = None, user_prefs: Optional[UserPrefs] = None) -> None:
        self._unibook = UniBook(unibook) if unibook is not None else UniBook()
        self._user_prefs = replace(user_prefs) if user_prefs is not None else UserPrefs()
        self._predicate: PersonPredicate = show_all
        self._ui: Any = None
        logger.debug("Initializing model with %r and %r", self._unibook, self._user_prefs)

    def set_ui(self, ui: Any) -> None:
        self._ui = ui

    def _notify(self) -> None:
        if self._ui is not None:
            self._ui.on_model_changed()

    # --- prefs ------------------------------------------------------------

    def get_user_prefs(self) -> UserPrefs:
        return self._user_prefs

    # --- book -------------------------------------------------------------

    def get_unibook(self) -> UniBook:
        return self._unibook

    def set_unibook(self, unibook: UniBook) -> None:
        self._unibook.reset_data(unibook)
        self._notify()

    def has_person(self, person: Person) -> bool:
        return self._unibook.has_person(person)

    def add_person(self, person: Person) -> None:
        self._unibook.add_person(person)
        self._predicate = show_all
        self._notify()

    def delete_person(self, person: Person) -> None:
        self._unibook.remove_person(person)
        self._notify()

    def has_module(self, code: ModuleCode) -> bool:
        return self._unibook.has_module(code)

    def add_module(self, module: Module) -> None:
        self._unibook.add_module(module)
        self._notify()

    def delete_module(self, code: ModuleCode) -> Module:
        module = self._unibook.remove_module(code)
        self._notify()
        return module

    # --- filtered view ----------------------------------------------------

    def get_filtered_person_list(self) -> list[Person]:
        return [p for p in self._unibook.persons if self._predicate(p)]

    def update_filtered_person_list(self, predicate: PersonPredicate) -> None:
        self._predicate = predicate
        self._notify()
