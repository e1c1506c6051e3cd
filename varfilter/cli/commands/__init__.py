"""CLI command handlers."""

from .expand import expand_templates

__all__ = ['expand_templates']
