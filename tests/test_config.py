"""Tests for docsflow configuration."""

import json
import pytest
import yaml

from docsflow.config import Config, DocsflowConfig
from docsflow.constants import DEFAULT_CONFIG
from docsflow.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every test in an empty directory with no docsflow environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('DOCSFLOW_LOG_LEVEL', raising=False)
    monkeypatch.delenv('DOCSFLOW_PUBLISH', raising=False)
    return tmp_path


class TestConfig:
    def test_defaults(self):
        config = Config()

        assert isinstance(config.config, DocsflowConfig)
        assert config.config.docs.output_dir == 'docs'
        assert config.config.docs.external_plugins == ['markdown-link-resolver']
        assert config.config.publish.enabled is False
        assert config.config.publish.branch == 'gh-pages'
        assert config.config.logging.level == 'INFO'

    def test_yaml_file_is_found_in_parent(self, isolated, monkeypatch):
        (isolated / '.docsflow.yaml').write_text(yaml.dump({
            'docs': {'git_revision': 'main'},
            'publish': {'user': 'ci-bot'},
        }))
        nested = isolated / 'packages' / 'core'
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = Config()

        assert config.config.docs.git_revision == 'main'
        assert config.config.docs.output_dir == 'docs'
        assert config.config.publish.user == 'ci-bot'

    def test_toml_file(self, isolated):
        path = isolated / 'settings.toml'
        path.write_text('[publish]\nbranch = "pages"\n')

        assert Config(str(path)).config.publish.branch == 'pages'

    def test_json_file(self, isolated):
        path = isolated / '.docsflow.json'
        path.write_text(json.dumps({'logging': {'level': 'DEBUG'}}))

        assert Config().config.logging.level == 'DEBUG'

    def test_defaults_are_not_mutated(self, isolated, monkeypatch):
        monkeypatch.setenv('DOCSFLOW_PUBLISH', '1')
        Config().set('docs.output_dir', 'api')

        assert DEFAULT_CONFIG['publish']['enabled'] is False
        assert DEFAULT_CONFIG['docs']['output_dir'] == 'docs'

    def test_unparseable_file(self, isolated):
        (isolated / '.docsflow.yaml').write_text('docs: [unclosed')

        with pytest.raises(ConfigurationError, match='Cannot parse'):
            Config()

    def test_invalid_values(self, isolated):
        (isolated / '.docsflow.yaml').write_text(yaml.dump({'publish': {'enabled': 'sometimes'}}))

        with pytest.raises(ConfigurationError, match='Invalid configuration'):
            Config()

    def test_non_mapping_file(self, isolated):
        (isolated / '.docsflow.yaml').write_text('- just\n- a list\n')

        with pytest.raises(ConfigurationError, match='mapping'):
            Config()


class TestOverrides:
    def test_environment(self, monkeypatch):
        monkeypatch.setenv('DOCSFLOW_LOG_LEVEL', 'WARNING')
        monkeypatch.setenv('DOCSFLOW_PUBLISH', 'yes')

        config = Config()

        assert config.config.logging.level == 'WARNING'
        assert config.config.publish.enabled is True

    def test_environment_can_disable(self, isolated, monkeypatch):
        (isolated / '.docsflow.yaml').write_text(yaml.dump({'publish': {'enabled': True}}))
        monkeypatch.setenv('DOCSFLOW_PUBLISH', 'false')

        assert Config().config.publish.enabled is False

    def test_cli_beats_environment(self, monkeypatch):
        monkeypatch.setenv('DOCSFLOW_PUBLISH', '1')

        config = Config().merge_cli_options({'publish.enabled': False, 'publish.user': None})

        assert config.config.publish.enabled is False
        assert config.config.publish.user == 'docsflow[bot]'
