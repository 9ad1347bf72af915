"""
Entry point resolution for the documentation generator.

Consumers import compiled files from ``./dist``, while the generator has
to read the TypeScript sources those files were built from. The helpers
here map one onto the other and turn a project's exports map into the
arguments that tell the generator where to start.
"""

import re
from typing import Any, List, Mapping, Optional

from .constants import TSCONFIG_FILE
from .errors import ConfigurationError
from .project import Preconditions, ProjectLayout
from .utils import logger

BUILD_PREFIX = './dist'
SOURCE_MARKER = '/src/'
COMPILED_EXTENSION = '.js'
SOURCE_EXTENSION = '.ts'

# ./dist/src/<rest>.js
COMPILED_PATH = re.compile(
    r'^' + re.escape(BUILD_PREFIX)
    + r'(' + re.escape(SOURCE_MARKER) + r'.+)'
    + re.escape(COMPILED_EXTENSION) + r'$'
)

MONOREPO_ENTRY_POINTS = ['.', '--entryPointStrategy', 'packages']


def rewrite_compiled_path(path: str) -> Optional[str]:
    """Map a compiled build artifact back to its source file.

    ``./dist/src/index.js`` becomes ``./src/index.ts``. Returns ``None``
    when ``path`` does not follow the build layout, including paths under
    ``./dist`` that skip the ``/src/`` segment or use another extension.
    """
    match = COMPILED_PATH.match(path)
    if match is None:
        return None
    return '.' + match.group(1) + SOURCE_EXTENSION


def _import_target(entry: Any) -> Optional[str]:
    if isinstance(entry, Mapping):
        target = entry.get('import')
        if isinstance(target, str):
            return target
    return None


def project_entry_points(preconditions: Preconditions) -> List[str]:
    """Entry points for a single package, read from its exports map."""
    if not preconditions.has_tsconfig:
        raise ConfigurationError("missing type configuration")

    exports_map = preconditions.exports_map
    if exports_map is None:
        raise ConfigurationError("missing exports map")

    entry_points = ['--tsconfig', TSCONFIG_FILE]
    if not isinstance(exports_map, Mapping):
        logger.warning("exports map has no conditional entries, documenting tsconfig inputs only")
        return entry_points

    seen = set()
    for subpath, entry in exports_map.items():
        path = _import_target(entry)
        if path is None:
            logger.debug(f"Skipping export {subpath!r}: no import target")
            continue

        source = rewrite_compiled_path(path)
        if source is None:
            if path.startswith(BUILD_PREFIX):
                logger.debug(f"Export {subpath!r} points at build output {path}, forwarding as-is")
            source = path

        if source in seen:
            continue
        seen.add(source)
        entry_points.append(source)

    return entry_points


def resolve_entry_points(preconditions: Preconditions) -> List[str]:
    """Generator arguments identifying what to document."""
    if preconditions.layout is ProjectLayout.MONOREPO:
        return list(MONOREPO_ENTRY_POINTS)
    return project_entry_points(preconditions)
