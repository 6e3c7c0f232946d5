"""
Sample data used on first start, when no data file exists yet.
"""

from __future__ import annotations

from unibook.model import Module, Person, Professor, Student, UniBook
from unibook.values import Email, ModuleCode, ModuleName, Name, Office, Phone, Tag


def _codes(*codes: str) -> frozenset[ModuleCode]:
    return frozenset(ModuleCode(c) for c in codes)


def _tags(*tags: str) -> frozenset[Tag]:
    return frozenset(Tag(t) for t in tags)


def get_sample_modules() -> list[Module]:
    return [
        Module(ModuleName("Software Engineering"), ModuleCode("CS2103")),
        Module(ModuleName("Effective Communication for Computing Professionals"), ModuleCode("CS2101")),
        Module(ModuleName("Data Structures and Algorithms"), ModuleCode("CS2040S")),
    ]


def get_sample_persons() -> list[Person]:
    return [
        Professor(
            name=Name("Damith Rajapakse"),
            phone=Phone("65164359"),
            email=Email("damith@comp.nus.edu.sg"),
            tags=_tags("coordinator"),
            modules=_codes("CS2103"),
            office=Office("COM2-02-57"),
        ),
        Professor(
            name=Name("Seth Gilbert"),
            phone=Phone("65167919"),
            email=Email("seth.gilbert@comp.nus.edu.sg"),
            modules=_codes("CS2040S"),
            office=Office("COM2-04-19"),
        ),
        Student(
            name=Name("Alex Yeoh"),
            phone=Phone("87438807"),
            email=Email("alexyeoh@example.com"),
            tags=_tags("friends"),
            modules=_codes("CS2103", "CS2101"),
        ),
        Student(
            name=Name("Bernice Yu"),
            phone=Phone("99272758"),
            email=Email("berniceyu@example.com"),
            tags=_tags("colleagues", "friends"),
            modules=_codes("CS2103"),
        ),
        Student(
            name=Name("Charlotte Oliveiro"),
            phone=Phone("93210283"),
            email=Email("charlotte@example.com"),
            modules=_codes("CS2040S"),
        ),
    ]


def get_sample_unibook() -> UniBook:
    book = UniBook()
    for m in get_sample_modules():
        book.add_module(m)
    for p in get_sample_persons():
        book.add_person(p)
    return book
