"""
Parser configuration.

Settings are read from the ``[parser]`` table of a ``yangkit.toml`` file:

    [parser]
    identifier_policy = "yang"   # or "legacy"
    tab_width = 8
"""

import logging
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "yangkit.toml"


class IdentifierPolicy(str, Enum):
    """Which characters may start an identifier."""

    # Identifiers must not begin with "xml" in any letter case
    YANG = "yang"
    # The first character must not be one of X x M m L l
    LEGACY = "legacy"


@dataclass(frozen=True)
class ParserSettings:
    """Lexer and grammar options."""

    identifier_policy: IdentifierPolicy = IdentifierPolicy.YANG
    tab_width: int = 8  # Columns a tab counts for when de-indenting strings


DEFAULT_SETTINGS = ParserSettings()


def load_settings(path: Path) -> ParserSettings:
    """
    Load parser settings from a TOML file.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    parser_data = data.get("parser", {})
    if not isinstance(parser_data, dict):
        raise ConfigError(f"[parser] in {path} must be a table")

    policy_value = parser_data.get("identifier_policy", DEFAULT_SETTINGS.identifier_policy.value)
    try:
        policy = IdentifierPolicy(policy_value)
    except ValueError:
        allowed = ", ".join(p.value for p in IdentifierPolicy)
        raise ConfigError(
            f"Unknown identifier_policy {policy_value!r} in {path} (expected one of: {allowed})"
        ) from None

    tab_width = parser_data.get("tab_width", DEFAULT_SETTINGS.tab_width)
    if isinstance(tab_width, bool) or not isinstance(tab_width, int) or tab_width < 1:
        raise ConfigError(f"tab_width in {path} must be a positive integer, got {tab_width!r}")

    settings = ParserSettings(identifier_policy=policy, tab_width=tab_width)
    logger.debug("Loaded parser settings from %s: %s", path, settings)
    return settings


def find_settings(start: Path) -> ParserSettings:
    """
    Look for yangkit.toml in ``start`` and its parents.

    Returns the default settings when no file is found.
    """
    directory = start if start.is_dir() else start.parent
    for candidate_dir in [directory, *directory.resolve().parents]:
        candidate = candidate_dir / SETTINGS_FILENAME
        if candidate.exists():
            return load_settings(candidate)
    return DEFAULT_SETTINGS
