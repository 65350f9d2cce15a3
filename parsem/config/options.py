"""
Engine options.

Options are immutable values owned by one TemplateEngine. Nothing here is
process-wide: two engines with different patterns never see each other's
settings.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from ..template.functions import FilterRegistry, default_registry
from ..template.patterns import (
    COMMENT_PATTERN,
    CONDITION_PATTERN,
    ELSE_PATTERN,
    ENDIF_PATTERN,
    VARIABLE_PATTERN,
)


def _snake(key: str) -> str:
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', key).lower()


@dataclass(frozen=True)
class Patterns:
    """
    Regex sources for every tag type.

    Custom patterns must keep the named groups of the defaults: ``name``,
    ``default``, ``filter_name`` and ``filter_args`` for variables, and
    ``condition`` for if tags.
    """

    variables: str = VARIABLE_PATTERN
    conditions: str = CONDITION_PATTERN
    else_tag: str = ELSE_PATTERN
    endif_tag: str = ENDIF_PATTERN
    comments: str = COMMENT_PATTERN

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Patterns':
        values = {_snake(key): value for key, value in data.items() if value is not None}
        return cls(**values)


@dataclass(frozen=True)
class Options:
    """
    Rendering options for a TemplateEngine.

    Attributes:
        strict: Raise on variables missing from the arguments instead of rendering null
        patterns: Tag syntax
        trim_before_blocks: Remove indentation in front of if/else/endif tags
        trim_after_blocks: Remove trailing spaces and the newline after if/else/endif tags
        max_depth: Deepest allowed nesting of conditional blocks
        filters: Filters available to variable tags
    """

    strict: bool = False
    patterns: Patterns = field(default_factory=Patterns)
    trim_before_blocks: bool = False
    trim_after_blocks: bool = False
    max_depth: int = 256
    filters: FilterRegistry = field(default_factory=default_registry)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Options':
        """
        Build Options from a mapping with snake_case or camelCase keys.

        Example:
            Options.from_dict({"strict": True, "trimBeforeBlocks": True})

        Raises:
            TypeError: On unknown keys
        """
        values: Dict[str, Any] = {_snake(key): value for key, value in data.items()}

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        patterns = values.get('patterns')
        if isinstance(patterns, Mapping):
            values['patterns'] = Patterns.from_dict(patterns)

        return cls(**{key: value for key, value in values.items() if value is not None})
