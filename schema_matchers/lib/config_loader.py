"""YAML config loader for matcher settings.

Settings live under a top-level ``matcher:`` section::

    matcher:
      hex_suffix_bytes: 2
      pad_char: a
      strict_value_rules: false
      seed: 1234

``SCHEMA_MATCHERS_CONFIG`` may name a default config file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from schema_matchers.lib.logging_config import get_logger

logger = get_logger("config_loader")

CONFIG_ENV_VAR: str = "SCHEMA_MATCHERS_CONFIG"

MAX_HEX_SUFFIX_BYTES: int = 16

# Accepted top-level sections and matcher keys
_SECTIONS: frozenset[str] = frozenset({"matcher"})
_MATCHER_KEYS: frozenset[str] = frozenset(
    {"hex_suffix_bytes", "pad_char", "strict_value_rules", "seed"}
)


@dataclass(frozen=True)
class MatcherSettings:
    """Tunable knobs for the probing algorithm.

    Attributes:
        hex_suffix_bytes: Random bytes appended (as hex) to build a value
            outside an inclusion list.
        pad_char: Character repeated to build size-boundary probes.
        strict_value_rules: When True, unknown value rules fail instead of
            passing.
        seed: Seed for the inclusion sampler, or None for OS randomness.
    """

    hex_suffix_bytes: int = 2
    pad_char: str = "a"
    strict_value_rules: bool = False
    seed: int | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> MatcherSettings:
        """Build settings from a loaded config dictionary.

        Args:
            config: Parsed configuration, as returned by :func:`load_config`.

        Returns:
            MatcherSettings with defaults for any missing keys.
        """
        section = config.get("matcher") or {}
        defaults = cls()
        return cls(
            hex_suffix_bytes=section.get("hex_suffix_bytes", defaults.hex_suffix_bytes),
            pad_char=section.get("pad_char", defaults.pad_char),
            strict_value_rules=bool(
                section.get("strict_value_rules", defaults.strict_value_rules)
            ),
            seed=section.get("seed", defaults.seed),
        )


def load_config(config_path: Path) -> dict[str, Any]:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        FileNotFoundError: If config file does not exist.
        ValueError: If config values are out of valid range.
    """
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        msg = f"Config root must be a mapping, got {type(config).__name__}"
        raise ValueError(msg)

    _validate_config(config)
    logger.debug("Loaded config from %s", config_path)
    return config


def _validate_config(config: dict[str, Any]) -> None:
    """Validate configuration values.

    Args:
        config: Configuration dictionary to validate.

    Raises:
        ValueError: If any config value is invalid.
    """
    unknown = sorted(str(key) for key in config if key not in _SECTIONS)
    if unknown:
        msg = (
            f"Unknown config section(s): {', '.join(unknown)}; "
            "settings belong under 'matcher:'"
        )
        raise ValueError(msg)

    section = config.get("matcher") or {}
    if not isinstance(section, dict):
        msg = "matcher section must be a mapping"
        raise ValueError(msg)

    unknown = sorted(str(key) for key in section if key not in _MATCHER_KEYS)
    if unknown:
        msg = f"Unknown matcher setting(s): {', '.join(unknown)}"
        raise ValueError(msg)

    suffix = section.get("hex_suffix_bytes", 2)
    if (
        not isinstance(suffix, int)
        or isinstance(suffix, bool)
        or suffix < 1
        or suffix > MAX_HEX_SUFFIX_BYTES
    ):
        msg = (
            f"hex_suffix_bytes must be between 1 and {MAX_HEX_SUFFIX_BYTES}, "
            f"got {suffix}"
        )
        raise ValueError(msg)

    pad_char = section.get("pad_char", "a")
    if not isinstance(pad_char, str) or len(pad_char) != 1:
        msg = f"pad_char must be a single character, got {pad_char!r}"
        raise ValueError(msg)

    seed = section.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        msg = f"seed must be an integer or null, got {seed!r}"
        raise ValueError(msg)


def load_settings(config_path: Path | None = None) -> MatcherSettings:
    """Resolve matcher settings from a file, the environment, or defaults.

    Args:
        config_path: Explicit config file. Falls back to the file named by
            ``SCHEMA_MATCHERS_CONFIG``, then to built-in defaults.

    Returns:
        The resolved MatcherSettings.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return MatcherSettings()
        config_path = Path(env_path)

    settings = MatcherSettings.from_config(load_config(config_path))
    logger.info("Matcher settings loaded from %s", config_path)
    return settings
