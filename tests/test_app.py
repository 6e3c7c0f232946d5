"""
Tests for the startup fallback ladder and shutdown.

Startup never fails because of files:
- config / prefs missing or broken -> defaults, written back to disk
- data file missing -> sample data; broken or unreadable -> empty book
Shutdown saves the preferences and swallows a failed save.
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path

from unibook.app import MainApp
from unibook.config import Config, read_config
from unibook.interactive import UiManager
from unibook.model import UniBook, UserPrefs
from unibook.sample_data import get_sample_unibook
from unibook.storage import JsonUserPrefsStorage


def write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dir = Path(self._tmp.name)
        self.prefs_path = self.dir / "preferences.json"
        self.data_path = self.dir / "unibook.json"
        self.config_path = write_json(
            self.dir / "config.json",
            {"log_level": "INFO", "user_prefs_file_path": str(self.prefs_path), "log_file_path": None},
        )

    def write_prefs(self) -> None:
        write_json(self.prefs_path, {"unibook_file_path": str(self.data_path), "max_results": 10})

    def start_app(self) -> MainApp:
        app = MainApp()
        app.init(self.config_path)
        return app


class TestInitConfig(AppTestCase):
    def test_missing_config_uses_default_and_saves_it(self) -> None:
        path = self.dir / "new" / "config.json"
        config = MainApp().init_config(path)
        self.assertEqual(config, Config())
        self.assertEqual(read_config(path), Config())

    def test_broken_config_uses_default(self) -> None:
        path = self.dir / "broken.json"
        path.write_text("{oops", encoding="utf-8")
        with self.assertLogs("unibook.app", level="WARNING"):
            config = MainApp().init_config(path)
        self.assertEqual(config, Config())
        self.assertEqual(read_config(path), Config())

    def test_existing_config_is_used(self) -> None:
        config = MainApp().init_config(self.config_path)
        self.assertEqual(config.user_prefs_file_path, self.prefs_path)
        self.assertIsNone(config.log_file_path)


class TestInitPrefs(AppTestCase):
    def test_unreadable_prefs_file_gives_defaults(self) -> None:
        self.prefs_path.mkdir()
        with self.assertLogs("unibook.app", level="WARNING"):
            prefs = MainApp().init_prefs(JsonUserPrefsStorage(self.prefs_path))
        self.assertEqual(prefs, UserPrefs())

    def test_broken_prefs_file_gives_defaults_and_is_rewritten(self) -> None:
        self.prefs_path.write_text("not json", encoding="utf-8")
        prefs = MainApp().init_prefs(JsonUserPrefsStorage(self.prefs_path))
        self.assertEqual(prefs, UserPrefs())
        self.assertEqual(JsonUserPrefsStorage(self.prefs_path).read_user_prefs(), UserPrefs())

    @unittest.skipUnless(hasattr(sys, "get_int_max_str_digits"), "no integer string length limit")
    def test_oversized_number_in_prefs_gives_defaults(self) -> None:
        self.prefs_path.write_text('{"max_results": ' + "9" * 5000 + "}", encoding="utf-8")
        with self.assertLogs("unibook.app", level="WARNING"):
            prefs = MainApp().init_prefs(JsonUserPrefsStorage(self.prefs_path))
        self.assertEqual(prefs, UserPrefs())

    def test_missing_prefs_file_is_created(self) -> None:
        MainApp().init_prefs(JsonUserPrefsStorage(self.prefs_path))
        self.assertTrue(self.prefs_path.exists())


class TestInit(AppTestCase):
    def test_missing_data_file_starts_with_sample_data(self) -> None:
        self.write_prefs()
        app = self.start_app()
        self.assertEqual(app.model.get_unibook(), get_sample_unibook())
        self.assertEqual(app.model.get_user_prefs().max_results, 10)

    def test_broken_data_file_starts_empty(self) -> None:
        self.write_prefs()
        self.data_path.write_text('{"modules": [{"name": "x", "code": "lowercase"}]}', encoding="utf-8")
        with self.assertLogs("unibook.app", level="WARNING") as logs:
            app = self.start_app()
        self.assertEqual(app.model.get_unibook(), UniBook())
        self.assertTrue(any("not in the correct format" in line for line in logs.output))

    def test_deeply_nested_data_file_starts_empty(self) -> None:
        self.write_prefs()
        self.data_path.write_text("[" * 200000, encoding="utf-8")
        app = self.start_app()
        self.assertEqual(app.model.get_unibook(), UniBook())

    def test_unreadable_data_file_starts_empty(self) -> None:
        self.write_prefs()
        self.data_path.mkdir()
        app = self.start_app()
        self.assertEqual(app.model.get_unibook(), UniBook())

    def test_layers_are_wired(self) -> None:
        self.write_prefs()
        app = self.start_app()
        self.assertIsInstance(app.ui, UiManager)
        self.assertIs(app.logic.model, app.model)
        self.assertIs(app.ui.logic, app.logic)

        app.ui._dirty = False
        app.logic.execute("list")
        self.assertTrue(app.ui._dirty)


class TestStop(AppTestCase):
    def test_stop_saves_prefs(self) -> None:
        self.write_prefs()
        app = self.start_app()
        self.prefs_path.unlink()
        app.stop()
        self.assertEqual(JsonUserPrefsStorage(self.prefs_path).read_user_prefs().max_results, 10)

    def test_failed_save_is_logged_not_raised(self) -> None:
        self.write_prefs()
        app = self.start_app()
        self.prefs_path.unlink()
        self.prefs_path.mkdir()
        with self.assertLogs("unibook.app", level="ERROR"):
            app.stop()

    def test_stop_before_init_does_nothing(self) -> None:
        MainApp().stop()


if __name__ == "__main__":
    unittest.main()
