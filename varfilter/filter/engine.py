"""
Filter engine: placeholder expansion over strings.

Placeholder syntax:
- $(name) or ${name}: resolved through the handler registry
- $(name:upper), $(name:lower): case modifier applied to the result
- $(env NAME): process environment variable NAME
- $$: a literal '$'

Unresolved placeholders are left in the output unchanged, unless strict
expansion is requested.
"""

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Union

from varfilter.exceptions import FilterSyntaxError, UndefinedVariablesError

from .registry import HandlerRegistry, HandlerSet
from .types import Computed, Handler, Literal


logger = logging.getLogger(__name__)


class Filter:
    """
    Expands placeholders in strings using a HandlerRegistry.

    The registry is exposed so callers (and scopes) can swap handler sets.
    """

    # $$ escape, $(...) and ${...}; bodies cannot nest delimiters
    PLACEHOLDER_PATTERN = re.compile(r'\$\$|\$\(([^()]*)\)|\$\{([^{}]*)\}')

    MODIFIERS = {
        'upper': str.upper,
        'lower': str.lower,
    }

    def __init__(self, registry: Optional[HandlerRegistry] = None):
        """Initialize filter with an existing registry or an empty one."""
        self.registry = registry if registry is not None else HandlerRegistry()

    def register(self, name: str, handler: Union[Handler, Literal, Computed, None]) -> None:
        """Register (or, with None, remove) a handler on the underlying registry."""
        self.registry.register(name, handler)

    def handlers(self) -> HandlerSet:
        return self.registry.handlers()

    def set_handlers(self, handlers: HandlerSet) -> None:
        self.registry.set_handlers(handlers)

    def get(self, variable: str) -> Optional[Any]:
        """Resolve a single variable, or None."""
        return self.registry.resolve(variable)

    def expand(self, template: str, strict: bool = False) -> str:
        """
        Expand every placeholder in a template string.

        Args:
            template: String containing placeholders
            strict: Raise instead of leaving unresolved placeholders in place

        Returns:
            Expanded string

        Raises:
            TypeError: If template is not a string
            FilterSyntaxError: If a placeholder is malformed
            UndefinedVariablesError: If strict and any placeholder is unresolved
        """
        if not isinstance(template, str):
            raise TypeError(f"Template must be a string, got {type(template).__name__}")

        undefined: List[str] = []

        def replace(match):
            text = match.group(0)
            if text == '$$':
                return '$'

            body = match.group(1) if match.group(1) is not None else match.group(2)
            value = self._resolve_placeholder(text, body)
            if value is None:
                name = body.strip()
                if name not in undefined:
                    undefined.append(name)
                return text
            return value

        result = self.PLACEHOLDER_PATTERN.sub(replace, template)

        if undefined:
            logger.debug(f"Unresolved variables in {template!r}: {undefined}")
            if strict:
                raise UndefinedVariablesError(undefined, template)

        return result

    def handle(self, template: str) -> str:
        """Expand a template, leaving unresolved placeholders untouched."""
        return self.expand(template)

    def expand_value(
        self,
        value: Union[str, List, Dict, Any],
        strict: bool = False
    ) -> Union[str, List, Dict, Any]:
        """
        Expand placeholders inside a string, list or dict (recursively).

        Non-string leaves pass through unchanged. Dict keys are not expanded.
        """
        if isinstance(value, str):
            return self.expand(value, strict=strict)
        elif isinstance(value, list):
            return [self.expand_value(item, strict=strict) for item in value]
        elif isinstance(value, dict):
            return {k: self.expand_value(v, strict=strict) for k, v in value.items()}
        else:
            return value

    def _resolve_placeholder(self, text: str, body: str) -> Optional[str]:
        """
        Resolve the body of one placeholder to its substitution text.

        Args:
            text: Full placeholder text, used in error messages
            body: Text between the delimiters

        Returns:
            Substitution text, or None if unresolved
        """
        name, _, modifier = body.strip().partition(':')
        name = name.strip()
        modifier = modifier.strip()
        if modifier and modifier not in self.MODIFIERS:
            raise FilterSyntaxError(
                text, f"unknown modifier '{modifier}' (expected one of {sorted(self.MODIFIERS)})"
            )

        if name.startswith('env '):
            env_name = name[4:].strip()
            if not env_name:
                raise FilterSyntaxError(text, "missing environment variable name")
            value = os.environ.get(env_name)
        elif not name:
            raise FilterSyntaxError(text, "empty variable name")
        else:
            value = self.registry.resolve(name)

        if value is None:
            return None

        rendered = render_value(value)
        if modifier:
            rendered = self.MODIFIERS[modifier](rendered)
        return rendered


def render_value(value: Any) -> str:
    """
    Convert a resolved value to its substitution text.

    Args:
        value: Resolved value (never None)

    Returns:
        Text form of the value
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, str):
        return value
    elif isinstance(value, os.PathLike):
        return os.fspath(value)
    elif isinstance(value, (list, tuple)) and all(
        isinstance(item, (str, int, float, os.PathLike)) and not isinstance(item, bool)
        for item in value
    ):
        return ' '.join(render_value(item) for item in value)
    else:
        # Complex types get JSON representation
        return json.dumps(value, default=str)
