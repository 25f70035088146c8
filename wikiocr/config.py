# -*- coding: utf-8 -*-
"""
Module for handling application configuration.

Defaults cover the recognition setup (Japanese, accurate mode) and logging.
User overrides live in a config.ini in the per-user application directory,
which is created with the default values on first run.
"""

import configparser
import logging
import platform
from pathlib import Path
from typing import List, Optional, Union

from .ocr_engine import ENGINE_CHOICES, RECOGNITION_MODES, OCREngine

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "WikiOCR"
DEFAULT_CONFIG_FILENAME = "config.ini"


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/WikiOCR
    - macOS: ~/Library/Application Support/WikiOCR
    - Linux: ~/.config/WikiOCR
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        app_dir = Path.home() / ".config" / APP_NAME
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.
    """

    def __init__(self, config_file_path: Optional[Union[str, Path]] = None):
        self.parser = configparser.ConfigParser()
        if config_file_path is None:
            config_file_path = get_app_dir() / DEFAULT_CONFIG_FILENAME
        self.config_file_path = Path(config_file_path)

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        self.parser["General"] = {
            "log_level": "INFO",
            "dictionary_path": ""
        }
        self.parser["OCR"] = {
            "languages": "ja",
            "mode": "accurate",
            "engine": "auto",
            "use_gpu": "False",
            "preprocess": "False",
            "memory_limit_mb": ""
        }

    def _load_from_file(self):
        """
        Loads settings from the config file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self._save_defaults()
        else:
            try:
                self.parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                logger.warning(f"Ignoring malformed config file {self.config_file_path}: {e}")
                self._load_defaults()

    def _save_defaults(self):
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding="utf-8") as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except OSError as e:
            # Non-critical: the defaults stay in effect for this run
            logger.warning(f"Could not write config file at {self.config_file_path}: {e}")

    # --- Properties to access settings easily and with correct types ---

    @property
    def log_level(self) -> int:
        name = self.parser.get("General", "log_level", fallback="INFO").upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO

    @property
    def dictionary_path(self) -> Optional[Path]:
        """A dictionary file loaded at startup, if configured."""
        value = self.parser.get("General", "dictionary_path", fallback="").strip()
        return Path(value).expanduser() if value else None

    @property
    def languages(self) -> List[str]:
        value = self.parser.get("OCR", "languages", fallback="ja")
        return [lang.strip() for lang in value.split(",") if lang.strip()] or ["ja"]

    @property
    def mode(self) -> str:
        value = self.parser.get("OCR", "mode", fallback="accurate").strip().lower()
        if value not in RECOGNITION_MODES:
            raise ValueError(f"Invalid OCR mode in {self.config_file_path}: {value}")
        return value

    @property
    def engine(self) -> str:
        value = self.parser.get("OCR", "engine", fallback="auto").strip().lower()
        if value not in ENGINE_CHOICES:
            raise ValueError(f"Invalid OCR engine in {self.config_file_path}: {value}")
        return value

    @property
    def use_gpu(self) -> bool:
        return self.parser.getboolean("OCR", "use_gpu", fallback=False)

    @property
    def preprocess(self) -> bool:
        return self.parser.getboolean("OCR", "preprocess", fallback=False)

    @property
    def memory_limit_mb(self) -> Optional[int]:
        value = self.parser.get("OCR", "memory_limit_mb", fallback="").strip()
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid memory_limit_mb in {self.config_file_path}: {value}") from None

    def build_engine(self, **overrides) -> OCREngine:
        """
        Create an OCREngine from these settings; keyword overrides win.

        Only settings without an override are read from the file.

        Raises:
            ValueError: If a setting that is used holds an invalid value
        """
        settings = {
            'languages': 'languages',
            'mode': 'mode',
            'engine': 'engine',
            'use_gpu': 'use_gpu',
            'preprocess_images': 'preprocess',
            'memory_limit_mb': 'memory_limit_mb',
        }
        options = {}
        for option, setting in settings.items():
            value = overrides.get(option)
            options[option] = value if value is not None else getattr(self, setting)
        return OCREngine(**options)
