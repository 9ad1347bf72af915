"""
Constants and defaults for docsflow.
"""

CONFIG_FILES = [
    '.docsflow.yaml',
    '.docsflow.yml',
    '.docsflow.toml',
    '.docsflow.json',
]

MANIFEST_FILE = 'package.json'
TSCONFIG_FILE = 'tsconfig.json'
NOJEKYLL_FILE = '.nojekyll'

GENERATOR_BINARY = 'typedoc'

# Plugins shipped inside the docsflow installation, resolved against
# the package directory rather than the documented project.
BUNDLED_PLUGINS = [
    'typedoc-plugin.cjs',
    'unknown-symbol-resolver-plugin.cjs',
    'type-indexer-plugin.cjs',
]

TOKEN_ENV_VAR = 'GITHUB_TOKEN'
REPOSITORY_ENV_VAR = 'GITHUB_REPOSITORY'

DEFAULT_CONFIG = {
    'docs': {
        'output_dir': 'docs',
        'git_revision': 'master',
        'external_plugins': ['markdown-link-resolver'],
        'plugin_root': None,
    },
    'publish': {
        'enabled': False,
        'user': 'docsflow[bot]',
        'email': 'docsflow[bot]@users.noreply.github.com',
        'message': 'docs: update documentation [skip ci]',
        'branch': 'gh-pages',
        'dotfiles': True,
    },
    'logging': {
        'level': 'INFO',
    },
}
