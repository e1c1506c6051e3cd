"""
Common handler: configuration values first, then well-known host and
directory variables.
"""

from typing import Any, Dict, Optional

from varfilter.config import ConfigStore
from varfilter.directories import Directories
from varfilter.filter.types import Computed, Literal, ResolvedValue, resolve_value


class CommonHandler:
    """
    Resolves a variable from the configuration store, falling back to the
    built-in table. Configuration values override built-in names.
    """

    def __init__(self, config: ConfigStore, directories: Directories):
        self.config = config
        self.directories = directories
        self._builtins = self._builtin_entries()

    def _builtin_entries(self) -> Dict[str, ResolvedValue]:
        dirs = self.directories
        return {
            'host': Literal(dirs.host()),
            'tmpdir': Computed(dirs.tmpdir),
            'curdir': Computed(dirs.curdir),
            'scriptdir': Computed(dirs.scriptdir),
            'globaldir': Computed(dirs.globaldir),
            'configdir': Computed(dirs.configdir),
            'projectdir': Computed(dirs.projectdir),
            'programdir': Computed(dirs.programdir),
        }

    def __call__(self, variable: str) -> Optional[Any]:
        result = self.config.get(variable)
        if result is not None:
            return result

        entry = self._builtins.get(variable)
        if entry is None:
            return None
        return resolve_value(entry)
