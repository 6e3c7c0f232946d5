"""
Application bootstrap.

MainApp.init() runs once at startup and never fails because of files:

    config.json       missing/broken -> default Config      (always re-saved)
    preferences.json  missing/broken -> default UserPrefs   (always re-saved)
    data file         missing        -> sample UniBook
                      broken/unreadable -> empty UniBook

Then it builds ModelManager -> LogicManager -> UiManager and attaches the
UI to the model. MainApp.stop() saves the preferences; a failure there is
logged and ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from unibook import logs
from unibook.config import DEFAULT_CONFIG_FILE, Config, read_config, save_config
from unibook.interactive import UiManager
from unibook.logic import LogicManager
from unibook.model import ModelManager, UniBook, UserPrefs
from unibook.sample_data import get_sample_unibook
from unibook.storage import DataConversionError, JsonUniBookStorage, JsonUserPrefsStorage, StorageManager


VERSION = (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()

logger = logs.get_logger(__name__)


class MainApp:
    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.storage: Optional[StorageManager] = None
        self.model: Optional[ModelManager] = None
        self.logic: Optional[LogicManager] = None
        self.ui: Optional[UiManager] = None

    def init(self, config_path: str | Path | None = None) -> None:
        logger.info("=============================[ Initializing UniBook ]===========================")

        self.config = self.init_config(config_path)
        logs.init(self.config)

        prefs_storage = JsonUserPrefsStorage(self.config.user_prefs_file_path)
        user_prefs = self.init_prefs(prefs_storage)
        unibook_storage = JsonUniBookStorage(user_prefs.unibook_file_path)
        self.storage = StorageManager(unibook_storage, prefs_storage)

        self.model = self.init_model_manager(self.storage, user_prefs)
        self.logic = LogicManager(self.model, self.storage)
        self.ui = UiManager(self.logic)
        self.model.set_ui(self.ui)

    def init_config(self, config_path: str | Path | None) -> Config:
        """
        Load the config at config_path (or DEFAULT_CONFIG_FILE), falling back
        to a default Config, and write it back so new fields show up in the file.
        """
        path = DEFAULT_CONFIG_FILE
        if config_path is not None:
            logger.info("Custom Config file specified %s", config_path)
            path = Path(config_path)
        logger.info("Using config file : %s", path)

        try:
            config = read_config(path) or Config()
        except DataConversionError:
            logger.warning("Config file at %s is not in the correct format. Using default config properties", path)
            config = Config()
        except OSError as e:
            logger.warning("Problem while reading config file %s: %s. Using default config properties", path, e)
            config = Config()

        try:
            save_config(config, path)
        except OSError as e:
            logger.warning("Failed to save config file : %s", e)
        return config

    def init_prefs(self, storage: JsonUserPrefsStorage) -> UserPrefs:
        """
        Load the user preferences, falling back to defaults, and write them back.
        """
        path = storage.file_path
        logger.info("Using prefs file : %s", path)

        try:
            prefs = storage.read_user_prefs() or UserPrefs()
        except DataConversionError:
            logger.warning("UserPrefs file at %s is not in the correct format. Using default user prefs", path)
            prefs = UserPrefs()
        except OSError as e:
            logger.warning("Problem while reading prefs file %s: %s. Using default user prefs", path, e)
            prefs = UserPrefs()

        try:
            storage.save_user_prefs(prefs)
        except OSError as e:
            logger.warning("Failed to save prefs file : %s", e)
        return prefs

    def init_model_manager(self, storage: StorageManager, user_prefs: UserPrefs) -> ModelManager:
        """
        Sample data if there is no data file yet, an empty book if the data
        file cannot be used.
        """
        try:
            book = storage.read_unibook()
            if book is None:
                logger.info("Data file not found. Will be starting with a sample UniBook")
                book = get_sample_unibook()
        except DataConversionError:
            logger.warning("Data file not in the correct format. Will be starting with an empty UniBook")
            book = UniBook()
        except OSError:
            logger.warning("Problem while reading from the file. Will be starting with an empty UniBook")
            book = UniBook()

        return ModelManager(book, user_prefs)

    def start(self, window) -> None:
        logger.info("Starting UniBook %s", VERSION)
        self.ui.start(window)

    def stop(self) -> None:
        logger.info("============================ [ Stopping UniBook ] =============================")
        if self.storage is None or self.model is None:
            return
        try:
            self.storage.save_user_prefs(self.model.get_user_prefs())
        except OSError as e:
            logger.error("Failed to save preferences %s", e)
