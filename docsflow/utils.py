"""
Utility functions for docsflow.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union
import colorama
from rich.logging import RichHandler

from .constants import MANIFEST_FILE

# Initialize colorama for cross-platform color support
colorama.init()


# Configure logging with Rich handler
def setup_logger(name: str = "docsflow", level: str = "INFO") -> logging.Logger:
    """Set up a logger with Rich formatting."""
    logger = logging.getLogger(name)

    # Clear existing handlers
    logger.handlers = []

    handler = RichHandler(
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger


# Global logger instance
logger = setup_logger()


def set_log_level(level: str) -> None:
    """Change the level of the global logger, ignoring unknown names."""
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def merge_dicts(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value

    return result


def get_project_root(start: Optional[Union[str, Path]] = None) -> Path:
    """Find the nearest directory holding a package manifest.

    Falls back to the starting directory when no manifest is found.
    """
    current = Path(start or Path.cwd()).resolve()

    for parent in [current] + list(current.parents):
        if (parent / MANIFEST_FILE).exists():
            return parent

    return current


def read_json(path: Path) -> Dict[str, Any]:
    """Read a JSON document from disk."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_install_root() -> Path:
    """Directory docsflow itself is installed in."""
    return Path(__file__).resolve().parent


def redact(text: str, secret: Optional[str], placeholder: str = '***') -> str:
    """Replace every occurrence of ``secret`` in ``text``."""
    if not secret or not text:
        return text
    return text.replace(secret, placeholder)
