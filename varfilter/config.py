"""
Configuration store.

Values come from YAML files (global config layered under project config)
and from explicit definitions, which win over both.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from varfilter.directories import Directories
from varfilter.exceptions import ConfigError


logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'config.yaml'


class ConfigStore:
    """Key/value configuration consulted first by the common handler."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Optional[Any]:
        """
        Look up a configuration value.

        Args:
            key: Configuration key

        Returns:
            Stored value or None if absent
        """
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        """Set a value; None removes the key."""
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def keys(self) -> List[str]:
        return list(self._values)

    def load(self, path: Union[str, Path]) -> None:
        """
        Merge a YAML mapping file into the store. Missing files are ignored.

        Args:
            path: YAML file path

        Raises:
            ConfigError: If the file is unreadable, malformed, or not a mapping
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Config file not found, skipping: {path}")
            return

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config: {e}", str(path)) from e

        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config must be a YAML mapping, got {type(data).__name__}", str(path)
            )

        self.update({str(k): v for k, v in data.items()})
        logger.debug(f"Loaded {len(data)} config values from {path}")

    @classmethod
    def from_files(cls, paths: Iterable[Union[str, Path]]) -> 'ConfigStore':
        """Build a store from files; later files override earlier ones."""
        store = cls()
        for path in paths:
            store.load(path)
        return store

    @classmethod
    def for_project(cls, directories: Directories) -> 'ConfigStore':
        """Load the global config, then the project config over it."""
        return cls.from_files([
            Path(directories.globaldir()) / CONFIG_FILENAME,
            Path(directories.configdir()) / CONFIG_FILENAME,
        ])
