"""
Tests for command parsing and execution.

Every successful command is followed by a save of the book; the tests use a
temporary data file so that nothing outside the temp directory is touched.
"""

import json
import tempfile
import unittest
from pathlib import Path

from unibook.logic import (
    MESSAGE_DUPLICATE_MODULE,
    MESSAGE_DUPLICATE_PERSON,
    MESSAGE_INVALID_PERSON_INDEX,
    MESSAGE_UNKNOWN_COMMAND,
    CommandError,
    LogicManager,
    parse_command,
)
from unibook.model import ModelManager, Professor, UniBook, UserPrefs
from unibook.parse import ParseError
from unibook.sample_data import get_sample_unibook
from unibook.storage import JsonUniBookStorage, JsonUserPrefsStorage, StorageManager
from unibook.values import Email, ModuleCode, Phone


class LogicTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.data_path = Path(self._tmp.name) / "unibook.json"

        self.model = ModelManager(get_sample_unibook(), UserPrefs(unibook_file_path=self.data_path))
        self.storage = StorageManager(
            JsonUniBookStorage(self.data_path),
            JsonUserPrefsStorage(Path(self._tmp.name) / "preferences.json"),
        )
        self.logic = LogicManager(self.model, self.storage)

    def saved(self) -> dict:
        return json.loads(self.data_path.read_text(encoding="utf-8"))


class TestAddCommand(LogicTestCase):
    def test_add_module(self) -> None:
        result = self.logic.execute("add o/module n/Programming Methodology m/cs1101s")
        self.assertEqual(result.feedback, "New module added: CS1101S Programming Methodology")
        self.assertTrue(self.model.has_module(ModuleCode("CS1101S")))
        self.assertIn({"name": "Programming Methodology", "code": "CS1101S"}, self.saved()["modules"])

    def test_add_duplicate_module(self) -> None:
        with self.assertRaises(CommandError) as ctx:
            self.logic.execute("add o/module n/Another Name m/CS2103")
        self.assertEqual(str(ctx.exception), MESSAGE_DUPLICATE_MODULE)
        self.assertFalse(self.data_path.exists())

    def test_add_student_with_modules(self) -> None:
        self.logic.execute(
            "add o/student n/John Doe p/98765432 e/johnd@example.com t/friends t/owesMoney m/cs2103 m/CS2101"
        )
        module = self.model.get_unibook().get_module(ModuleCode("CS2101"))
        self.assertIn("John Doe", [str(s.name) for s in module.students])
        saved = [p for p in self.saved()["persons"] if p["name"] == "John Doe"][0]
        self.assertEqual(saved["tags"], ["friends", "owesMoney"])
        self.assertEqual(saved["modules"], ["CS2101", "CS2103"])

    def test_add_professor(self) -> None:
        self.logic.execute("add o/professor n/Martin Henz p/65166789 e/henz@comp.nus.edu.sg a/COM2-03-14")
        prof = self.model.get_filtered_person_list()[-1]
        self.assertIsInstance(prof, Professor)
        self.assertEqual(str(prof.office), "COM2-03-14")
        self.assertEqual(prof.phone, Phone("65166789"))
        self.assertEqual(prof.email, Email("henz@comp.nus.edu.sg"))

    def test_professor_needs_office(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            self.logic.execute("add o/professor n/Martin Henz p/65166789 e/henz@comp.nus.edu.sg")
        self.assertIn("Invalid command format!", str(ctx.exception))

    def test_add_duplicate_person(self) -> None:
        with self.assertRaises(CommandError) as ctx:
            self.logic.execute("add o/student n/Alex Yeoh p/123 e/alex@example.com")
        self.assertEqual(str(ctx.exception), MESSAGE_DUPLICATE_PERSON)

    def test_add_with_unknown_module(self) -> None:
        with self.assertRaises(CommandError) as ctx:
            self.logic.execute("add o/student n/John Doe p/98765432 e/johnd@example.com m/MA1521")
        self.assertIn("MA1521", str(ctx.exception))

    def test_invalid_values_report_constraints(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            self.logic.execute("add o/student n/John Doe p/98 e/johnd@example.com")
        self.assertEqual(str(ctx.exception), Phone.MESSAGE_CONSTRAINTS)

        with self.assertRaises(ParseError) as ctx:
            self.logic.execute("add o/module n/Some Module m/XYZ")
        self.assertEqual(str(ctx.exception), ModuleCode.MESSAGE_CONSTRAINTS)

    def test_missing_type(self) -> None:
        with self.assertRaises(ParseError):
            self.logic.execute("add n/John Doe p/98765432 e/johnd@example.com")


class TestOtherCommands(LogicTestCase):
    def test_delete_person_by_index(self) -> None:
        first = self.model.get_filtered_person_list()[0]
        result = self.logic.execute("delete 1")
        self.assertEqual(result.feedback, f"Deleted professor: {first.name}")
        self.assertFalse(self.model.has_person(first))

    def test_delete_index_out_of_range(self) -> None:
        with self.assertRaises(CommandError) as ctx:
            self.logic.execute("delete 99")
        self.assertEqual(str(ctx.exception), MESSAGE_INVALID_PERSON_INDEX)

    def test_delete_invalid_index(self) -> None:
        for args in ["delete 0", "delete -1", "delete abc", "delete"]:
            with self.assertRaises(ParseError, msg=args):
                self.logic.execute(args)

    def test_delete_module(self) -> None:
        self.logic.execute("delete m/cs2103")
        self.assertFalse(self.model.has_module(ModuleCode("CS2103")))
        for person in self.model.get_filtered_person_list():
            self.assertNotIn(ModuleCode("CS2103"), person.modules)

    def test_delete_unknown_module(self) -> None:
        with self.assertRaises(CommandError):
            self.logic.execute("delete m/MA1521")

    def test_find_and_list(self) -> None:
        result = self.logic.execute("find alex BERNICE")
        self.assertEqual(result.feedback, "2 persons listed!")
        self.assertEqual(
            [str(p.name) for p in self.logic.get_filtered_person_list()], ["Alex Yeoh", "Bernice Yu"]
        )

        # indexes refer to the displayed list
        self.logic.execute("delete 2")
        self.assertEqual([str(p.name) for p in self.logic.get_filtered_person_list()], ["Alex Yeoh"])

        self.logic.execute("list")
        self.assertEqual(len(self.logic.get_filtered_person_list()), 4)

    def test_command_word_split_on_any_whitespace(self) -> None:
        result = self.logic.execute("find\talex")
        self.assertEqual(result.feedback, "1 persons listed!")
        self.assertEqual([str(p.name) for p in self.logic.get_filtered_person_list()], ["Alex Yeoh"])

    def test_find_requires_keyword(self) -> None:
        with self.assertRaises(ParseError):
            self.logic.execute("find   ")

    def test_clear(self) -> None:
        self.logic.execute("clear")
        self.assertEqual(self.model.get_unibook(), UniBook())
        self.assertEqual(self.saved(), {"modules": [], "persons": []})

    def test_help_and_exit(self) -> None:
        self.assertTrue(self.logic.execute("help").show_help)
        self.assertTrue(self.logic.execute("exit").exit)

    def test_unknown_and_empty_commands(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse_command("frobnicate 1")
        self.assertEqual(str(ctx.exception), MESSAGE_UNKNOWN_COMMAND)
        with self.assertRaises(ParseError):
            parse_command("   ")

    def test_save_failure_becomes_command_error(self) -> None:
        self.data_path.mkdir()
        with self.assertRaises(CommandError) as ctx:
            self.logic.execute("list")
        self.assertIn("Could not save data to file", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
