"""
Filter engine module.

Provides the handler registry, string expansion, and handler scopes.
"""

from .types import (
    ValueKind,
    Literal,
    Computed,
    ResolvedValue,
    Handler,
    TableHandler,
    ValueHandler,
    resolve_value,
)
from .registry import HandlerRegistry, HandlerSet
from .engine import Filter, render_value
from .scope import ExecutionContext, ScopeFrame, attached, with_scope


__all__ = [
    "ValueKind",
    "Literal",
    "Computed",
    "ResolvedValue",
    "Handler",
    "TableHandler",
    "ValueHandler",
    "resolve_value",
    "HandlerRegistry",
    "HandlerSet",
    "Filter",
    "render_value",
    "ExecutionContext",
    "ScopeFrame",
    "attached",
    "with_scope",
]
