"""
parsem - a small text template engine.

Substitutes ``<% variables %>``, applies ``|filters``, resolves
``<% if %>`` blocks and strips ``<# comments #>`` in any text document.
"""

from .errors import (
    FilterError,
    OperandError,
    OperatorError,
    ResolutionError,
    StructuralError,
    TemplateError,
)
from .template import (
    FilterRegistry,
    TemplateArguments,
    TemplateEngine,
    default_registry,
    list_variables,
    needs_arguments,
    render,
    render_file,
)
from .config import Options, Patterns

__version__ = "1.0.0"

__all__ = [
    "FilterError",
    "OperandError",
    "OperatorError",
    "ResolutionError",
    "StructuralError",
    "TemplateError",
    "FilterRegistry",
    "TemplateArguments",
    "TemplateEngine",
    "default_registry",
    "list_variables",
    "needs_arguments",
    "render",
    "render_file",
    "Options",
    "Patterns",
]
