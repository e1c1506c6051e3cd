"""Package model used by the require filter."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_BUILDDIR_ROOT = Path('build') / 'packages'


@dataclass
class Package:
    """
    A package being installed.

    Attributes:
        name: Package name
        version: Version string, empty if not yet selected
        builddir_root: Directory under which per-package build dirs live
    """
    name: str
    version: str = ''
    builddir_root: Path = field(default=DEFAULT_BUILDDIR_ROOT)

    def version_str(self) -> str:
        return self.version

    def buildir(self) -> str:
        path = Path(self.builddir_root) / self.name
        if self.version:
            path = path / self.version
        return str(path)

    @classmethod
    def parse(cls, spec: str, builddir_root: Optional[Path] = None) -> 'Package':
        """
        Parse 'name' or 'name@version'.

        Raises:
            ValueError: If the name is empty
        """
        name, _, version = spec.partition('@')
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid package spec (expected NAME[@VERSION]): {spec!r}")
        if builddir_root is None:
            return cls(name, version.strip())
        return cls(name, version.strip(), Path(builddir_root))
