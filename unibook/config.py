"""
Application configuration (config.json).

The config file only points at other files and sets the log level; user
facing settings live in UserPrefs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from unibook.storage import DataConversionError, read_json_file, save_json_file


DEFAULT_CONFIG_FILE = Path("config.json")


@dataclass
class Config:
    log_level: str = "INFO"
    user_prefs_file_path: Path = Path("preferences.json")
    log_file_path: Optional[Path] = Path("unibook.log")

    def to_dict(self) -> dict[str, Any]:
        return {
            "log_level": self.log_level,
            "user_prefs_file_path": str(self.user_prefs_file_path),
            "log_file_path": str(self.log_file_path) if self.log_file_path is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        config = cls()
        if "log_level" in data:
            config.log_level = str(data["log_level"])
        if "user_prefs_file_path" in data:
            config.user_prefs_file_path = Path(str(data["user_prefs_file_path"]))
        if "log_file_path" in data:
            raw = data["log_file_path"]
            config.log_file_path = Path(str(raw)) if raw else None
        return config


def read_config(path: str | Path) -> Optional[Config]:
    """
    Return the Config stored at path, or None if there is no such file.
    Raises DataConversionError if the file is not a valid config.
    """
    data = read_json_file(path)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise DataConversionError(f"Config file {path} must contain a JSON object")
    return Config.from_dict(data)


def save_config(config: Config, path: str | Path) -> None:
    save_json_file(config.to_dict(), path)
