"""
Invocation of the external documentation generator.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .config import DocsConfig
from .constants import BUNDLED_PLUGINS, GENERATOR_BINARY
from .errors import ConfigurationError, GenerationError
from .utils import logger, get_install_root

OutputSink = Callable[[str], None]


@dataclass
class GeneratorSettings:
    """Fixed generator options, normally taken from the ``docs`` config section."""
    output_dir: str = "docs"
    git_revision: str = "master"
    external_plugins: List[str] = field(default_factory=lambda: ["markdown-link-resolver"])
    plugin_root: Optional[Path] = None
    binary: str = GENERATOR_BINARY

    @classmethod
    def from_config(cls, config: DocsConfig) -> 'GeneratorSettings':
        return cls(
            output_dir=config.output_dir,
            git_revision=config.git_revision,
            external_plugins=list(config.external_plugins),
            plugin_root=Path(config.plugin_root) if config.plugin_root else None,
        )

    @property
    def bundled_plugin_root(self) -> Path:
        return self.plugin_root or get_install_root() / 'typedoc'

    def bundled_plugins(self) -> List[str]:
        return [str(self.bundled_plugin_root / name) for name in BUNDLED_PLUGINS]

    def check_bundled_plugins(self) -> None:
        """Raise ConfigurationError unless every bundled plugin file exists."""
        missing = [name for name in BUNDLED_PLUGINS if not (self.bundled_plugin_root / name).is_file()]
        if missing:
            raise ConfigurationError(
                f"typedoc plugins {', '.join(missing)} not found in {self.bundled_plugin_root}; "
                f"install them there or set docs.plugin_root"
            )


def build_generator_args(
    entry_points: Sequence[str],
    forwarded_flags: Sequence[str] = (),
    settings: Optional[GeneratorSettings] = None
) -> List[str]:
    """Assemble the full generator argument vector."""
    settings = settings or GeneratorSettings()

    args = list(entry_points)
    args += [
        '--out', settings.output_dir,
        '--hideGenerator',
        '--includeVersion',
        '--gitRevision', settings.git_revision,
    ]
    for plugin in settings.bundled_plugins() + list(settings.external_plugins):
        args += ['--plugin', plugin]
    args += list(forwarded_flags)
    return args


def find_generator(binary: str = GENERATOR_BINARY, cwd: Optional[Path] = None) -> Optional[str]:
    """Locate the generator, preferring locally installed copies.

    Searches ``node_modules/.bin`` of the working directory, then of the
    docsflow installation, then ``PATH``.
    """
    search = [
        Path(cwd or Path.cwd()) / 'node_modules' / '.bin',
        get_install_root() / 'node_modules' / '.bin',
    ]
    path = os.pathsep.join([str(p) for p in search] + [os.environ.get('PATH', '')])
    return shutil.which(binary, path=path)


def _emit(sink: Optional[OutputSink], text: str) -> None:
    if sink is None or not text:
        return
    try:
        sink(text)
    except Exception as e:  # progress reporting never fails the run
        logger.debug(f"Progress sink rejected output: {e}")


def run_generator(
    entry_points: Sequence[str],
    forwarded_flags: Sequence[str] = (),
    on_output: Optional[OutputSink] = None,
    settings: Optional[GeneratorSettings] = None,
    cwd: Optional[Union[str, Path]] = None
) -> subprocess.CompletedProcess:
    """Run the generator to completion, streaming its output to ``on_output``.

    Raises:
        ConfigurationError: if the bundled plugins are not installed
        GenerationError: if the generator cannot be started or exits non-zero
    """
    settings = settings or GeneratorSettings()
    cwd = Path(cwd) if cwd else Path.cwd()

    settings.check_bundled_plugins()

    executable = find_generator(settings.binary, cwd)
    if executable is None:
        raise GenerationError(
            f"Cannot find '{settings.binary}'; install it in the project or on PATH"
        )

    command = [executable] + build_generator_args(entry_points, forwarded_flags, settings)
    logger.debug(f"Running: {' '.join(command)}")

    try:
        process = subprocess.Popen(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True
        )
    except OSError as e:
        raise GenerationError(f"Cannot start {settings.binary}: {e}") from e

    captured = []
    with process:
        for line in process.stdout:
            captured.append(line)
            _emit(on_output, line.strip())
        returncode = process.wait()

    output = ''.join(captured)
    if returncode != 0:
        cause = subprocess.CalledProcessError(returncode, command, output=output)
        raise GenerationError(
            f"{settings.binary} exited with code {returncode}",
            returncode=returncode,
            output=output
        ) from cause

    return subprocess.CompletedProcess(command, returncode, stdout=output)
