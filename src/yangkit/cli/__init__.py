"""
yangkit CLI Package.

- app.py: typer application and entry point
- commands.py: parse and check commands
- utils.py: version, logging and settings helpers
"""

from yangkit.cli.app import app, main
from yangkit.cli.utils import get_version, version_callback

__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]
