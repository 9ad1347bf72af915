"""Tests for the docsflow command line."""
import json
import pytest
from pathlib import Path
from click.testing import CliRunner
from unittest.mock import patch

from docsflow import __version__
from docsflow import cli as cli_module
from docsflow.errors import GenerationError


@pytest.fixture
def runner(monkeypatch):
    """Create a CLI test runner with no docsflow environment."""
    monkeypatch.delenv('DOCSFLOW_PUBLISH', raising=False)
    monkeypatch.delenv('DOCSFLOW_LOG_LEVEL', raising=False)
    return CliRunner()


def write_package(path='.', exports=None, tsconfig=True):
    root = Path(path)
    manifest = {'name': 'example', 'exports': exports or {'.': {'import': './dist/src/index.js'}}}
    (root / 'package.json').write_text(json.dumps(manifest))
    if tsconfig:
        (root / 'tsconfig.json').write_text('{}')


def fake_generator(entry_points, forwarded_flags, on_output=None, settings=None, cwd=None):
    (Path(cwd) / settings.output_dir).mkdir()


class TestDocsCommand:
    @patch('docsflow.pipeline.publish_docs')
    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_generates_docs(self, mock_run, mock_publish, runner):
        with runner.isolated_filesystem():
            write_package()

            result = runner.invoke(cli_module.cli, ['docs'])

            assert result.exit_code == 0, result.output
            assert Path('docs/.nojekyll').exists()
            assert 'Documentation written to' in result.output

        mock_publish.assert_not_called()

    @patch('docsflow.pipeline.publish_docs')
    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_forwards_flags(self, mock_run, mock_publish, runner):
        with runner.isolated_filesystem():
            write_package()

            result = runner.invoke(cli_module.cli, ['docs', '--', '--theme', 'minimal', '--excludePrivate'])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args[0][1] == ['--theme', 'minimal', '--excludePrivate']

    @patch('docsflow.pipeline.publish_docs')
    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_publish_options(self, mock_run, mock_publish, runner):
        with runner.isolated_filesystem():
            write_package()

            result = runner.invoke(cli_module.cli, [
                'docs', '--publish', '--user', 'Release Bot', '--message', 'docs: v2'
            ])

        assert result.exit_code == 0, result.output
        config = mock_publish.call_args[0][0]
        assert config.user == 'Release Bot'
        assert config.message == 'docs: v2'
        assert config.email == 'docsflow[bot]@users.noreply.github.com'

    @patch('docsflow.pipeline.publish_docs')
    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_publish_from_environment(self, mock_run, mock_publish, runner, monkeypatch):
        monkeypatch.setenv('DOCSFLOW_PUBLISH', 'true')
        with runner.isolated_filesystem():
            write_package()

            result = runner.invoke(cli_module.cli, ['docs'])

        assert result.exit_code == 0, result.output
        mock_publish.assert_called_once()

    @patch('docsflow.pipeline.run_generator')
    def test_missing_tsconfig(self, mock_run, runner):
        with runner.isolated_filesystem():
            write_package(tsconfig=False)

            result = runner.invoke(cli_module.cli, ['docs'])

        assert result.exit_code == 1
        assert 'missing type configuration' in result.output
        mock_run.assert_not_called()

    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_output_dir_is_project_root(self, mock_run, runner):
        with runner.isolated_filesystem():
            write_package()
            Path('src').mkdir()
            Path('src/index.ts').write_text('export const x = 1;')
            Path('.docsflow.yaml').write_text('docs:\n  output_dir: "."\n')

            result = runner.invoke(cli_module.cli, ['docs'])

            assert result.exit_code == 1
            assert 'subdirectory' in result.output
            assert Path('src/index.ts').exists()
            assert Path('package.json').exists()
        mock_run.assert_not_called()

    @patch('docsflow.pipeline.publish_docs')
    @patch('docsflow.pipeline.run_generator')
    def test_generator_failure(self, mock_run, mock_publish, runner):
        mock_run.side_effect = GenerationError('typedoc exited with code 2', returncode=2,
                                               output='src/index.ts: error TS1005')
        with runner.isolated_filesystem():
            write_package()

            result = runner.invoke(cli_module.cli, ['docs', '--publish'])

        assert result.exit_code == 1
        assert 'typedoc exited with code 2' in result.output
        mock_publish.assert_not_called()

    @patch('docsflow.pipeline.run_generator', side_effect=fake_generator)
    def test_project_directory_option(self, mock_run, runner):
        with runner.isolated_filesystem():
            Path('pkg').mkdir()
            write_package('pkg')

            result = runner.invoke(cli_module.cli, ['docs', '--directory', 'pkg'])

            assert result.exit_code == 0, result.output
            assert Path('pkg/docs/.nojekyll').exists()


class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(cli_module.cli, ['version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli_module.cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_config_file(self, runner):
        with runner.isolated_filesystem():
            Path('broken.yaml').write_text('docs: [unclosed')

            result = runner.invoke(cli_module.cli, ['--config', 'broken.yaml', 'docs'])

        assert result.exit_code == 1
        assert 'Cannot parse' in result.output
