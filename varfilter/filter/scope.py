"""
Execution contexts and handler scopes.

An ExecutionContext owns its own handler set. A scope temporarily installs
a different set on a context and restores the previous one on every exit
path, including exceptions and KeyboardInterrupt. Scopes nest LIFO.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from .engine import Filter
from .registry import HandlerRegistry, HandlerSet
from .types import Handler


logger = logging.getLogger(__name__)

T = TypeVar('T')


class ExecutionContext:
    """
    A script's private filter state.

    Attributes:
        name: Context identifier used in log messages
        filter: Filter used to expand strings inside this context
        scriptdir: Directory of the script running in this context
    """

    def __init__(
        self,
        name: str = 'context',
        handlers: Optional[Mapping[str, Handler]] = None,
        scriptdir: Optional[Path] = None
    ):
        self.name = name
        self.filter = Filter(HandlerRegistry(handlers))
        self.scriptdir = scriptdir

    def get_handlers(self) -> HandlerSet:
        """Snapshot of the context's active handler set."""
        return self.filter.handlers()

    def set_handlers(self, handlers: HandlerSet) -> None:
        """Install a handler set on this context."""
        self.filter.set_handlers(handlers)

    def __repr__(self) -> str:
        return f"ExecutionContext({self.name!r}, handlers={self.filter.registry.names()})"


@dataclass(frozen=True)
class ScopeFrame:
    """Handler set captured from a context when a scope was entered."""
    context: ExecutionContext
    saved: HandlerSet

    def restore(self) -> None:
        self.context.set_handlers(self.saved)


@contextmanager
def attached(context: ExecutionContext, handlers: HandlerSet) -> Iterator[ScopeFrame]:
    """
    Install `handlers` on `context` for the duration of the with-block.

    Args:
        context: Context whose handler set is swapped
        handlers: Handler set to install

    Yields:
        The frame holding the captured handler set
    """
    frame = ScopeFrame(context, context.get_handlers())
    context.set_handlers(handlers)
    logger.debug(f"Entered scope on {context.name}")
    try:
        yield frame
    finally:
        frame.restore()
        logger.debug(f"Left scope on {context.name}")


def with_scope(
    context: ExecutionContext,
    handlers: HandlerSet,
    body: Callable[..., T],
    *args: Any,
    **kwargs: Any
) -> T:
    """
    Run `body(*args, **kwargs)` with `handlers` installed on `context`.

    The context's previous handler set is restored before this returns or
    re-raises whatever `body` raised.
    """
    with attached(context, handlers):
        return body(*args, **kwargs)
