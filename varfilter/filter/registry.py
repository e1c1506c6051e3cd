"""
Handler registry for the filter engine.

Keeps an insertion-ordered mapping of handler name to handler and
resolves variables by asking each handler in turn.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .types import Computed, Handler, Literal, ValueHandler


logger = logging.getLogger(__name__)

# Immutable snapshot of a registry's handlers, used to save and restore scopes.
HandlerSet = Mapping[str, Handler]


class HandlerRegistry:
    """
    Registry of named handlers.

    Registering an existing name replaces the handler in place, keeping its
    position in the lookup order. Registering None removes the name.
    """

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None):
        """Initialize registry, optionally seeded with handlers."""
        self._handlers: Dict[str, Handler] = dict(handlers or {})

    def register(
        self,
        name: str,
        handler: Union[Handler, Literal, Computed, None]
    ) -> None:
        """
        Bind a handler to a name, or unbind it.

        Args:
            name: Handler name
            handler: Handler callable, a bare Literal/Computed value answering
                the variable `name`, or None to remove the binding

        Raises:
            TypeError: If handler is neither callable nor a Literal/Computed
        """
        if handler is None:
            if self._handlers.pop(name, None) is not None:
                logger.debug(f"Unregistered handler: {name}")
            return

        if isinstance(handler, (Literal, Computed)):
            handler = ValueHandler(name, handler)
        elif not callable(handler):
            raise TypeError(
                f"Handler '{name}' must be callable or a Literal/Computed value, "
                f"got {type(handler).__name__}"
            )

        self._handlers[name] = handler
        logger.debug(f"Registered handler: {name}")

    def unregister(self, name: str) -> None:
        """Remove a handler. Removing an unknown name does nothing."""
        self.register(name, None)

    def get(self, name: str) -> Optional[Handler]:
        """
        Get a handler by name.

        Args:
            name: Handler name

        Returns:
            Handler or None if not registered
        """
        return self._handlers.get(name)

    def resolve(self, variable: str) -> Optional[Any]:
        """
        Resolve a variable against the registered handlers.

        Handlers are consulted in registration order and the first
        non-None result wins.

        Args:
            variable: Variable name

        Returns:
            Resolved value or None if no handler knows the variable
        """
        for handler in list(self._handlers.values()):
            result = handler(variable)
            if result is not None:
                return result
        return None

    def handlers(self) -> HandlerSet:
        """Return a read-only snapshot of the current handlers."""
        return MappingProxyType(dict(self._handlers))

    def set_handlers(self, handlers: Mapping[str, Handler]) -> None:
        """Replace all handlers with a copy of `handlers`."""
        self._handlers = dict(handlers)
        logger.debug(f"Installed handler set: {list(self._handlers)}")

    def names(self) -> List[str]:
        """List handler names in lookup order."""
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._handlers))
