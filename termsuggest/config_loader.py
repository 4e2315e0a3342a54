"""Configuration file loading utilities.

This module handles loading, parsing, and merging TOML configuration files.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CONFIG_FILE
from .models import TermsuggestError

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader", "merge"]


def merge(merged: dict[str, Any], obj2: dict[str, Any]) -> dict[str, Any]:
    """Merge the content of obj2 into merged.

    Args:
        merged (dict): Dictionary to merge into
        obj2 (dict): Dictionary to merge from

    Returns:
        `merged` dictionary with the merged content

    Eg:
        merge({"a": {"b": 1}}, {"a": {"c": 2}}) == {"a": {"b": 1, "c": 2}}

    """
    for key, value in obj2.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merge(merged[key], value)
        elif key in merged and isinstance(merged[key], list) and isinstance(value, list):
            merged[key] += value
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Handles loading and merging configuration files.

    Supports:
    - TOML configuration files
    - Directory-based config (multiple .toml files merged)
    - Include directives for modular configuration
    """

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log
        self._config: dict[str, Any] = {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    def load(self, config_filename: str = "") -> dict[str, Any]:
        """Load configuration from file or directory.

        Args:
            config_filename: Optional path to config file or directory.
                           If empty, uses the default CONFIG_FILE location,
                           which may be absent.

        Returns:
            The loaded and merged configuration dictionary.

        Raises:
            TermsuggestError: If an explicit config file is not found or a
                file has syntax errors.
        """
        if config_filename:
            config = self._open_config(Path(os.path.expandvars(config_filename)).expanduser())
        elif CONFIG_FILE.exists():
            config = self._open_config(CONFIG_FILE)
        else:
            self.log.debug("No configuration file at %s, using defaults", CONFIG_FILE)
            config = {}
        merge(self._config, config)
        return self._config

    def _open_config(self, fname: Path, seen: frozenset[Path] = frozenset()) -> dict[str, Any]:
        """Load config file(s) into a dictionary, following includes.

        Args:
            fname: Configuration file or directory path
            seen: Files already being loaded, to stop include loops
        """
        if fname.is_dir():
            return self._load_config_directory(fname)
        config = self._load_config_file(fname)
        for extra_config in list(config.get("termsuggest", {}).get("include", [])):
            extra = Path(os.path.expandvars(extra_config)).expanduser()
            if not extra.is_absolute():
                extra = fname.parent / extra
            if extra in seen or extra == fname:
                self.log.warning("Ignoring recursive include of %s", extra)
                continue
            merge(config, self._open_config(extra, seen | {fname}))
        return config

    def _load_config_directory(self, directory: Path) -> dict[str, Any]:
        """Load and merge all .toml files from a directory.

        Args:
            directory: Path to directory containing .toml files

        Returns:
            Merged configuration from all files
        """
        config: dict[str, Any] = {}
        for toml_file in sorted(f.name for f in directory.iterdir()):
            if not toml_file.endswith(".toml"):
                continue
            merge(config, self._load_config_file(directory / toml_file))
        return config

    def _load_config_file(self, fname: Path) -> dict[str, Any]:
        """Load a single configuration file.

        Args:
            fname: Path to the configuration file

        Returns:
            Configuration dictionary

        Raises:
            TermsuggestError: If file not found or has syntax errors
        """
        if not fname.exists():
            self.log.critical("Config file not found: %s", fname)
            raise TermsuggestError(str(fname))
        self.log.info("Loading %s", fname)
        with fname.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                self.log.critical("Problem reading %s: %s", fname, e)
                raise TermsuggestError(str(fname)) from e
