"""
Filter used while installing packages.

The RequireFilter owns the shared handler set (the common handler). It
expands package strings with a transient "package" handler, and runs
package scripts with the shared handlers installed on their own context.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from varfilter.config import ConfigStore
from varfilter.directories import Directories
from varfilter.filter.engine import Filter
from varfilter.filter.scope import ExecutionContext, attached
from varfilter.filter.types import Handler, Literal, ValueHandler
from varfilter.handlers.common import CommonHandler
from varfilter.handlers.package import PackageLike, make_package_handler


logger = logging.getLogger(__name__)

PACKAGE_HANDLER = 'package'
COMMON_HANDLER = 'common'
SCRIPT_HANDLER = 'script'


class SandboxScript:
    """A package script paired with the execution context it runs in."""

    def __init__(self, func: Callable[..., Any], context: Optional[ExecutionContext] = None):
        self.func = func
        self.context = context or ExecutionContext(getattr(func, '__name__', 'script'))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)


class RequireFilter:
    """
    Shared filter for package installation.

    Construct one per process (see build_require_filter) and pass it to
    callers. handle() mutates the shared registry and is serialised with
    a lock.
    """

    def __init__(self, filter: Filter):
        self.filter = filter
        self._lock = threading.RLock()

    def handle(self, strval: str, package: PackageLike, strict: bool = False) -> str:
        """
        Expand a package string with a transient "package" handler.

        Args:
            strval: Template string
            package: Package whose version/buildir are visible
            strict: Raise on unresolved placeholders

        Returns:
            Expanded string
        """
        with self._lock:
            saved = self.filter.handlers()
            # package variables take precedence over config keys of the same name
            self.filter.set_handlers({PACKAGE_HANDLER: make_package_handler(package), **saved})
            try:
                return self.filter.expand(strval, strict=strict)
            finally:
                self.filter.set_handlers(saved)

    def call(self, script: SandboxScript, package: PackageLike) -> Any:
        """
        Run `script(package)` with the shared handlers plus a package handler
        installed on the script's context.

        Lookup order inside the script: package variables, the script's own
        `scriptdir` (when the context has one), then the shared handlers.
        The context's own handlers are restored afterwards, also when the
        script raises.
        """
        handlers: Dict[str, Handler] = {PACKAGE_HANDLER: make_package_handler(package)}
        if script.context.scriptdir is not None:
            handlers[SCRIPT_HANDLER] = ValueHandler('scriptdir', Literal(str(script.context.scriptdir)))
        for name, handler in self.filter.handlers().items():
            handlers.setdefault(name, handler)

        logger.debug(f"Calling script on {script.context.name} with handlers {list(handlers)}")
        with attached(script.context, handlers):
            return script(package)


def build_require_filter(config: ConfigStore, directories: Directories) -> RequireFilter:
    """
    Create the process's shared RequireFilter with the common handler
    registered. Call once at startup.
    """
    engine = Filter()
    engine.register(COMMON_HANDLER, CommonHandler(config, directories))
    return RequireFilter(engine)
