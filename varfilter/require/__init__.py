"""Package install filter."""

from .package import Package
from .action import RequireFilter, SandboxScript, build_require_filter

__all__ = ['Package', 'RequireFilter', 'SandboxScript', 'build_require_filter']
