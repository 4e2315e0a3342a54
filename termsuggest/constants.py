"""Shared constants for termsuggest."""

import os
import re
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "DEFAULT_GENERATOR_TIMEOUT",
    "DEFAULT_SHELL_TIMEOUT",
    "EXTENSION_PATTERN",
    "IS_WINDOWS",
    "PROCESS_GRACEFUL_TIMEOUT",
    "TRIGGER_CHARACTERS",
]

IS_WINDOWS = os.name == "nt"

# Config file path - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "termsuggest" / "config.toml"

# Characters which should make a host invoke the engine
TRIGGER_CHARACTERS = ("/", "\\")

# Seconds allowed to a script generator
DEFAULT_GENERATOR_TIMEOUT = 5.0

# Seconds allowed to a shell listing its builtins
DEFAULT_SHELL_TIMEOUT = 10.0

# Seconds to wait after SIGTERM before SIGKILL
PROCESS_GRACEFUL_TIMEOUT = 1.0

# A single trailing file-extension-like suffix ("code.cmd" -> "code")
EXTENSION_PATTERN = re.compile(r"\.[a-zA-Z0-9!#$%&'()\-@^_`{}~+,;=\[\]]+$")
