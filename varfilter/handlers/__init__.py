"""Built-in handlers."""

from .common import CommonHandler
from .package import PackageHandler, make_package_handler

__all__ = ['CommonHandler', 'PackageHandler', 'make_package_handler']
