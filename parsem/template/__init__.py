"""Template parsing, condition evaluation and filters."""

from .engine import TemplateEngine, TemplateArguments, Token, render, render_file, list_variables, needs_arguments
from .functions import FilterRegistry, default_registry
from .conditions import Condition, ConditionEvaluator, parse_condition
from .blocks import ConditionalBlock, ConditionalBlockProcessor

__all__ = [
    "TemplateEngine",
    "TemplateArguments",
    "Token",
    "render",
    "render_file",
    "list_variables",
    "needs_arguments",
    "FilterRegistry",
    "default_registry",
    "Condition",
    "ConditionEvaluator",
    "parse_condition",
    "ConditionalBlock",
    "ConditionalBlockProcessor",
]
