"""
Test helper: builds Module objects with sensible defaults.

    module = ModuleBuilder().with_module_code("CS2101").with_professor("Aaron").build()
"""

from __future__ import annotations

from typing import Optional

from unibook.model import Module, Professor, Student
from unibook.values import Email, ModuleCode, ModuleName, Name, Office, Phone


DEFAULT_CODE = "CS2103"
DEFAULT_NAME = "Software Engineering"
DEFAULT_PROFESSOR = "Damith"
DEFAULT_PHONE_NUMBER = Phone("12345678")
DEFAULT_EMAIL = Email("damith@nus.edu.sg")
DEFAULT_OFFICE = Office("COM1-1")


class ModuleBuilder:
    def __init__(self, module_to_copy: Optional[Module] = None) -> None:
        if module_to_copy is not None:
            self.module_name = module_to_copy.name
            self.module_code = module_to_copy.code
            self.professors: list[Professor] = list(module_to_copy.professors)
            self.students: list[Student] = list(module_to_copy.students)
            return

        self.module_name = ModuleName(DEFAULT_NAME)
        self.module_code = ModuleCode(DEFAULT_CODE)
        self.professors = [
            Professor(
                name=Name(DEFAULT_PROFESSOR),
                phone=Phone("98765432"),
                email=Email("test@nus.edu.sg"),
                office=Office("SOC"),
            )
        ]
        self.students = []

    def with_module_name(self, name: str) -> "ModuleBuilder":
        self.module_name = ModuleName(name)
        return self

    def with_module_code(self, code: str) -> "ModuleBuilder":
        self.module_code = ModuleCode(code)
        return self

    def with_professor(self, prof_name: str) -> "ModuleBuilder":
        """Replace the professors with a single one called prof_name."""
        self.professors = [
            Professor(
                name=Name(prof_name),
                phone=DEFAULT_PHONE_NUMBER,
                email=DEFAULT_EMAIL,
                office=DEFAULT_OFFICE,
            )
        ]
        return self

    def build(self) -> Module:
        return Module(self.module_name, self.module_code, list(self.professors), list(self.students))
