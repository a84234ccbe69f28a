"""Layered INI configuration for dsgit.

Values are looked up in ``DSGIT_<SECTION>_<KEY>`` environment variables,
then the repository's ``.dsgit/config``, then ``~/.dsgitconfig``, and
finally the built-in defaults below.
"""

import configparser
import os
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ConfigError

DEFAULTS = {
    ('init', 'defaultbranch'): 'main',
    ('core', 'globignore'): 'false',
    ('diff', 'context'): '3',
    ('color', 'ui'): 'true',
}

_BOOLEANS = {
    '1': True, 'true': True, 'yes': True, 'on': True,
    '0': False, 'false': False, 'no': False, 'off': False,
}


def _load(path: Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    if path.exists():
        parser.read(path)
    return parser


class Config:
    """
    Reads and writes dsgit configuration.

    Files are parsed on first use and cached for the lifetime of the
    instance. Environment variables are read on every lookup.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.dsgitconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to the repository's config file, or None
                outside a repository
        """
        self.repo_config_path = repo_config_path
        self._files: Dict[str, configparser.ConfigParser] = {}

    def _file(self, scope: str) -> configparser.ConfigParser:
        if scope not in self._files:
            path = self.GLOBAL_CONFIG_PATH if scope == 'global' else self.repo_config_path
            self._files[scope] = _load(path)
        return self._files[scope]

    def _layers(self) -> List[configparser.ConfigParser]:
        """Config files from highest to lowest precedence."""
        layers = []
        if self.repo_config_path:
            layers.append(self._file('repo'))
        layers.append(self._file('global'))
        return layers

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Look up a value.

        Returns:
            The first value found in the environment or a config file,
            else fallback, else the built-in default (None if there is none)
        """
        env_value = os.environ.get(f"DSGIT_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        for parser in self._layers():
            if parser.has_option(section, key):
                return parser.get(section, key)

        if fallback is not None:
            return fallback
        return DEFAULTS.get((section, key))

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        """
        Look up a boolean (1/0, true/false, yes/no, on/off).

        Raises:
            ConfigError: If the value is not one of those
        """
        value = self.get(section, key)
        if value is None:
            return fallback
        try:
            return _BOOLEANS[value.strip().lower()]
        except KeyError:
            raise ConfigError(f"Invalid boolean for {section}.{key}: {value!r}") from None

    def get_int(self, section: str, key: str, fallback: int = 0) -> int:
        value = self.get(section, key)
        if value is None:
            return fallback
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"Invalid integer for {section}.{key}: {value!r}") from None

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Store a value in the repository config, or the global one.

        Raises:
            ValueError: If writing repository config outside a repository
        """
        if global_config:
            scope, path = 'global', self.GLOBAL_CONFIG_PATH
        elif self.repo_config_path:
            scope, path = 'repo', self.repo_config_path
        else:
            raise ValueError("No repository config path available")

        parser = self._file(scope)
        if not parser.has_section(section):
            parser.add_section(section)
        parser.set(section, key, value)

        with open(path, 'w') as f:
            parser.write(f)

    def list_all(self) -> Dict[str, Dict[str, str]]:
        """All file values by section, repository values winning."""
        merged: Dict[str, Dict[str, str]] = {}
        for parser in reversed(self._layers()):
            for section in parser.sections():
                merged.setdefault(section, {}).update(parser.items(section))
        return merged


def get_config(repo=None) -> Config:
    """Config for a repository, or global-only when repo is None."""
    return Config(repo.config_file if repo else None)
