"""
Exceptions raised while rendering templates.

Every error is raised at the point of detection and propagates out of the
engine untouched. There is no partial output.
"""


class TemplateError(ValueError):
    """Base class for all template rendering errors."""


class StructuralError(TemplateError):
    """Block tags that do not form a valid if/else/endif structure."""


class ResolutionError(TemplateError):
    """A referenced variable is missing from the arguments."""

    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' not found in arguments.")
        self.name = name


class FilterError(TemplateError):
    """A filter is unknown or failed on its input."""


class OperatorError(TemplateError):
    """A condition uses an unsupported comparison operator."""


class OperandError(TemplateError):
    """A condition operand has a type that cannot be compared."""
