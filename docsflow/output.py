"""
Output directory handling.
"""

import os
import shutil
from pathlib import Path
from typing import Union

from .constants import NOJEKYLL_FILE
from .errors import ConfigurationError
from .utils import logger


def resolve_output_dir(root: Union[str, Path], output_dir: Union[str, Path]) -> Path:
    """Absolute output directory for a project rooted at ``root``.

    The directory is removed on every run, so it has to sit strictly
    below the project root.
    """
    root = Path(os.path.normpath(os.path.abspath(root)))
    path = Path(os.path.normpath(root / output_dir))
    if path == root or root not in path.parents:
        raise ConfigurationError(
            f"Output directory {str(output_dir)!r} must be a subdirectory of {root} "
            f"(check docs.output_dir)"
        )
    return path


def clean_output(output_dir: Union[str, Path]) -> None:
    """Remove the output directory and everything in it."""
    output_dir = Path(output_dir)
    if output_dir.is_dir() and not output_dir.is_symlink():
        shutil.rmtree(output_dir)
    elif output_dir.exists() or output_dir.is_symlink():
        output_dir.unlink()
    else:
        return
    logger.debug(f"Removed {output_dir}")


def finalize_output(output_dir: Union[str, Path]) -> Path:
    """Write the marker that stops GitHub Pages from running Jekyll.

    Raises OSError if ``output_dir`` is missing or not writable.
    """
    marker = Path(output_dir) / NOJEKYLL_FILE
    marker.write_text('')
    return marker
