"""
yangkit - YANG statement parser and type system.

Parses the generic block-structured statement syntax of YANG schemas and
validates values against chains of derived types and their restrictions.
"""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import ConfigError, ContractViolation, ParseError, YangkitError
from .core.grammar import parse_document, parse_file


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("yangkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "YangkitError",
    "ParseError",
    "ConfigError",
    "ContractViolation",
    "parse_document",
    "parse_file",
]
