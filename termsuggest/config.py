"""Configuration wrapper providing typed access to the `[termsuggest]` section."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_GENERATOR_TIMEOUT, DEFAULT_SHELL_TIMEOUT, IS_WINDOWS

if TYPE_CHECKING:
    import logging

__all__ = ["BOOL_FALSE_STRINGS", "DEFAULTS", "Configuration", "coerce_to_bool"]

# Type alias for config values
ConfigValueType = float | bool | str | list | dict

BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

DEFAULTS: dict[str, ConfigValueType] = {
    "spec_paths": [],
    "disabled_specs": [],
    "builtin_specs": True,
    "generator_timeout": DEFAULT_GENERATOR_TIMEOUT,
    "shell_timeout": DEFAULT_SHELL_TIMEOUT,
    "strip_extensions": IS_WINDOWS,
}


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """The `[termsuggest]` configuration section, with defaults and typed getters."""

    def __init__(self, *args: Any, logger: logging.Logger, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger

    @classmethod
    def from_config(cls, config: dict[str, Any], logger: logging.Logger) -> Configuration:
        """Build from a whole loaded configuration file."""
        return cls(config.get("termsuggest", {}), logger=logger)

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value, falling back to the built-in default, then to `default`."""
        if name in self:
            return dict.get(self, name)
        return DEFAULTS.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing."""
        return coerce_to_bool(self.get(name), default)

    def get_float(self, name: str, default: float = 0.0) -> float:
        """Get a float value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid

        Returns:
            The float value
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return float(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid float value for %s: %s", name, value)
            return default

    def get_str_list(self, name: str) -> list[str]:
        """Get a list of strings; a single string becomes a one-item list."""
        value = self.get(name)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(v) for v in value]
        self.log.warning("Invalid list value for %s: %s", name, value)
        return []
