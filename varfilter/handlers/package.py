"""Package handler: per-package `version` and `buildir` variables."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from varfilter.filter.types import Computed, TableHandler


class PackageLike(Protocol):
    def version_str(self) -> str:
        ...

    def buildir(self) -> str:
        ...


@dataclass(frozen=True, eq=False)
class PackageHandler:
    """
    Handler bound to one package instance.

    NOT cacheable: build a new one for every call with make_package_handler.
    Reusing a handler for a different package resolves the wrong package.
    Both variables are read from the package at resolution time.
    """
    package: PackageLike

    def __call__(self, variable: str) -> Optional[Any]:
        table = TableHandler({
            'version': Computed(self.package.version_str),
            'buildir': Computed(self.package.buildir),
        })
        return table(variable)


def make_package_handler(package: PackageLike) -> PackageHandler:
    """Create a fresh handler for `package`."""
    return PackageHandler(package)
