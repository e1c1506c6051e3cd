"""varfilter exceptions."""

from typing import List, Optional


class FilterError(Exception):
    """Base class for errors raised by the filter engine."""

    exit_code = 2


class FilterSyntaxError(FilterError):
    """Raised when a placeholder cannot be parsed."""

    def __init__(self, placeholder: str, message: str):
        self.placeholder = placeholder
        super().__init__(f"Invalid placeholder '{placeholder}': {message}")


class UndefinedVariablesError(FilterError):
    """Raised by strict expansion when placeholders are left unresolved.

    The names are kept in first-seen order so callers can report them
    the way they appeared in the template.
    """

    def __init__(self, undefined_vars: List[str], template: Optional[str] = None):
        self.undefined_vars = undefined_vars
        self.template = template
        super().__init__(f"Undefined variables: {undefined_vars}")


class ConfigError(FilterError):
    """Raised when a configuration file cannot be loaded."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
