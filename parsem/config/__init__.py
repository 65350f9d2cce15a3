"""Engine options and file loaders."""

from .loaders import ArgumentLoader, TemplateLoader
from .options import Options, Patterns

__all__ = ["ArgumentLoader", "TemplateLoader", "Options", "Patterns"]
