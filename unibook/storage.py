"""
Persistent storage for the book and the user preferences.

Files:
- data/unibook.json   (people + modules, path comes from UserPrefs)
- preferences.json    (UserPrefs, path comes from Config)

Read contract:
- file missing          -> None (caller decides on a fallback)
- file not convertible  -> DataConversionError
- file not readable     -> OSError propagates unchanged

Module membership is not stored twice: modules are saved as name + code,
and people carry the codes of their modules. Loading rebuilds the member
lists through UniBook.add_person.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from unibook.logs import get_logger
from unibook.model import (
    DuplicateEntryError,
    MissingModuleError,
    Module,
    Person,
    Professor,
    Student,
    UniBook,
    UserPrefs,
)
from unibook.values import Email, ModuleCode, ModuleName, Name, Office, Phone, Tag


logger = get_logger(__name__)


class DataConversionError(Exception):
    """Raised when a stored file exists but cannot be turned into objects."""


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def read_json_file(path: str | Path) -> Optional[Any]:
    """
    Load JSON from a file. Returns None if the file does not exist.
    Any decoding failure, including oversized numbers or deep nesting, is
    reported as DataConversionError.
    """
    json_path = Path(path)
    if not json_path.exists():
        logger.info("JSON file %s not found", json_path)
        return None
    try:
        return json.loads(json_path.read_text(encoding="utf-8"))
    except (ValueError, RecursionError) as e:
        logger.warning("Error reading from JSON file %s: %s", json_path, e)
        raise DataConversionError(f"{json_path}: {e}") from e


def save_json_file(data: Any, path: str | Path) -> None:
    """
    Write data as pretty-printed JSON, creating parent directories if needed.
    """
    json_path = Path(path)
    json_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# Book <-> JSON
# ---------------------------------------------------------------------------


def _person_to_dict(person: Person) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": person.kind,
        "name": str(person.name),
        "phone": str(person.phone),
        "email": str(person.email),
        "tags": sorted(str(t) for t in person.tags),
        "modules": sorted(str(c) for c in person.modules),
    }
    if isinstance(person, Professor):
        data["office"] = str(person.office)
    return data


def _person_from_dict(data: dict[str, Any]) -> Person:
    kind = data.get("type")
    common = dict(
        name=Name(data["name"]),
        phone=Phone(data["phone"]),
        email=Email(data["email"]),
        tags=frozenset(Tag(t) for t in data.get("tags", [])),
        modules=frozenset(ModuleCode(c) for c in data.get("modules", [])),
    )
    if kind == "professor":
        return Professor(office=Office(data["office"]), **common)
    if kind == "student":
        return Student(**common)
    raise ValueError(f"Unknown person type: {kind!r}")


def unibook_to_dict(book: UniBook) -> dict[str, Any]:
    return {
        "modules": [{"name": str(m.name), "code": str(m.code)} for m in book.modules],
        "persons": [_person_to_dict(p) for p in book.persons],
    }


def unibook_from_dict(data: Any) -> UniBook:
    """
    Build a UniBook from its JSON form. Any invalid value, missing field or
    duplicate entry is reported as DataConversionError.
    """
    if not isinstance(data, dict):
        raise DataConversionError("UniBook data must be a JSON object")

    book = UniBook()
    try:
        for m in data.get("modules", []):
            book.add_module(Module(ModuleName(m["name"]), ModuleCode(m["code"])))
        for p in data.get("persons", []):
            book.add_person(_person_from_dict(p))
    except (AttributeError, KeyError, TypeError, ValueError, DuplicateEntryError, MissingModuleError) as e:
        raise DataConversionError(f"Illegal value in UniBook data: {e}") from e
    return book


# ---------------------------------------------------------------------------
# Storages
# ---------------------------------------------------------------------------


class JsonUniBookStorage:
    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)

    def read_unibook(self) -> Optional[UniBook]:
        data = read_json_file(self.file_path)
        if data is None:
            return None
        return unibook_from_dict(data)

    def save_unibook(self, book: UniBook) -> None:
        save_json_file(unibook_to_dict(book), self.file_path)


class JsonUserPrefsStorage:
    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)

    def read_user_prefs(self) -> Optional[UserPrefs]:
        data = read_json_file(self.file_path)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise DataConversionError("UserPrefs data must be a JSON object")
        try:
            return UserPrefs.from_dict(data)
        except ValueError as e:
            raise DataConversionError(f"Illegal value in UserPrefs data: {e}") from e

    def save_user_prefs(self, prefs: UserPrefs) -> None:
        save_json_file(prefs.to_dict(), self.file_path)


class StorageManager:
    """
    Single entry point for everything the application persists.
    """

    def __init__(self, unibook_storage: JsonUniBookStorage, user_prefs_storage: JsonUserPrefsStorage) -> None:
        self.unibook_storage = unibook_storage
        self.user_prefs_storage = user_prefs_storage

    # --- prefs ------------------------------------------------------------

    def read_user_prefs(self) -> Optional[UserPrefs]:
        return self.user_prefs_storage.read_user_prefs()

    def save_user_prefs(self, prefs: UserPrefs) -> None:
        self.user_prefs_storage.save_user_prefs(prefs)

    # --- book -------------------------------------------------------------

    @property
    def unibook_file_path(self) -> Path:
        return self.unibook_storage.file_path

    def read_unibook(self) -> Optional[UniBook]:
        logger.debug("Attempting to read data from file: %s", self.unibook_file_path)
        return self.unibook_storage.read_unibook()

    def save_unibook(self, book: UniBook) -> None:
        logger.debug("Attempting to write to data file: %s", self.unibook_file_path)
        self.unibook_storage.save_unibook(book)
