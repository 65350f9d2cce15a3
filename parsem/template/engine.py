"""
Template rendering.

Rendering runs three stages over one template string:

1. comments ``<# ... #>`` are removed,
2. conditional blocks ``<% if %> ... <% else %> ... <% endif %>`` are resolved,
3. variable tags ``<% name="default"|filter:args %>`` are substituted.

Each stage only sees the output of the previous one, so a comment can hold
any tag without it being evaluated, and variables inside a discarded branch
are never resolved.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from re import Match
from typing import Any, Dict, List, Optional, Union

from ..config.options import Options, Patterns
from ..errors import ResolutionError
from .blocks import ConditionalBlockProcessor
from .conditions import NEGATION, SIGIL, ConditionEvaluator, parse_condition
from .functions import FilterRegistry
from .patterns import IF, scan_block_tags
from .values import coerce_filter_argument, coerce_literal, split_arguments, stringify


@dataclass
class Token:
    """A matched variable tag."""

    match: str
    start: int
    end: int
    name: str
    default: Optional[str] = None
    filter: Optional[str] = None
    filter_name: Optional[str] = None
    filter_args: Optional[str] = None

    @classmethod
    def from_match(cls, match: Match[str]) -> 'Token':
        groups = match.groupdict()
        return cls(
            match=match.group(0),
            start=match.start(),
            end=match.end(),
            name=groups['name'],
            default=groups.get('default'),
            filter=groups.get('filter'),
            filter_name=groups.get('filter_name'),
            filter_args=groups.get('filter_args'),
        )

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def default_value(self) -> Any:
        """The coerced default; ``=`` with nothing after it gives an empty string."""
        if self.default is None:
            return None
        return coerce_literal(self.default[1:].strip())

    def arguments(self) -> List[Any]:
        """Extra filter arguments, coerced, in the order they were written."""
        if not self.filter_args:
            return []
        return [coerce_filter_argument(arg) for arg in split_arguments(self.filter_args)]


@dataclass
class TemplateArguments:
    """
    Inputs a template expects.

    Attributes:
        arguments: Variable names in order of first appearance
        defaults: Variable name to coerced default, for variables declaring one
        conditions: Names referenced as ``$name`` in if tags
    """

    arguments: List[str] = field(default_factory=list)
    defaults: Dict[str, Any] = field(default_factory=dict)
    conditions: List[str] = field(default_factory=list)


class TemplateEngine:
    """Renders templates with a fixed set of options."""

    def __init__(
        self,
        options: Union[Options, Dict[str, Any], None] = None,
        logger: Optional[logging.Logger] = None
    ):
        if options is None:
            options = Options()
        elif isinstance(options, dict):
            options = Options.from_dict(options)
        elif not isinstance(options, Options):
            raise TypeError("Options must be an instance of Options or a dict.")

        self.options = options
        self.logger = logger or logging.getLogger('parsem')
        self.evaluator = ConditionEvaluator(self.logger)
        self.blocks = ConditionalBlockProcessor(options, self.evaluator, self.logger)

    @property
    def patterns(self) -> Patterns:
        return self.options.patterns

    @property
    def filters(self) -> FilterRegistry:
        return self.options.filters

    def render(self, template: Any, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """
        Render a template string.

        Args:
            template: Template text. Any non-string value is returned unchanged.
            arguments: Variable name to value

        Returns:
            The rendered text

        Raises:
            TemplateError: On structural, resolution, filter or operator errors
        """
        if not isinstance(template, str):
            return template
        if arguments is None:
            arguments = {}

        text = self.strip_comments(template)
        text = self.blocks.process(text, arguments)
        return self.substitute_variables(text, arguments)

    def render_file(self, path: Union[str, Path], arguments: Optional[Dict[str, Any]] = None) -> str:
        """Read a template file and render it."""
        template_file = Path(path)
        if not template_file.is_file():
            raise FileNotFoundError(f"File '{path}' does not exist.")

        return self.render(template_file.read_text(encoding='utf-8'), arguments)

    def strip_comments(self, text: str) -> str:
        """Remove every ``<# ... #>`` comment. An unterminated ``<#`` is left as is."""
        return re.sub(self.patterns.comments, '', text)

    def tokenize(self, text: str) -> List[Token]:
        """Find all variable tags, left to right."""
        return [Token.from_match(match) for match in re.finditer(self.patterns.variables, text)]

    def resolve_token(self, token: Token, arguments: Dict[str, Any]) -> Any:
        """
        Resolve one variable tag to its final (filtered, not yet stringified) value.

        Order: argument value, then the tag's default, then null in non-strict
        mode. In strict mode a missing variable without a default raises.
        """
        if token.name in arguments:
            value = arguments[token.name]
        elif token.has_default:
            value = token.default_value()
            self.logger.debug("Variable '%s' uses default %r", token.name, value)
        elif self.options.strict:
            raise ResolutionError(token.name)
        else:
            self.logger.debug("Variable '%s' not found, rendering null", token.name)
            value = None

        if token.filter_name:
            args = token.arguments()
            self.logger.debug("Applying filter '%s' to '%s' with %r", token.filter_name, token.name, args)
            value = self.filters.apply(token.filter_name, value, *args)

        return value

    def substitute_variables(self, text: str, arguments: Dict[str, Any]) -> str:
        """
        Replace every variable tag in ``text``.

        All tags are matched once and every value is computed before the
        output is assembled from slices of the original text.
        """
        tokens = self.tokenize(text)
        if not tokens:
            return text

        replacements = [stringify(self.resolve_token(token, arguments)) for token in tokens]

        parts = []
        position = 0
        for token, replacement in zip(tokens, replacements):
            parts.append(text[position:token.start])
            parts.append(replacement)
            position = token.end
        parts.append(text[position:])

        return ''.join(parts)

    def list_variables(self, template: str) -> TemplateArguments:
        """
        Find the inputs of a template without rendering it.

        Comments are ignored. Variables inside every branch are listed,
        whatever the conditions would evaluate to.
        """
        text = self.strip_comments(template)
        result = TemplateArguments()

        for token in self.tokenize(text):
            if token.name not in result.arguments:
                result.arguments.append(token.name)
            if token.has_default and token.name not in result.defaults:
                result.defaults[token.name] = token.default_value()

        for tag in scan_block_tags(text, self.patterns):
            if tag.kind != IF:
                continue
            condition = parse_condition(tag.condition or '')
            for operand in (condition.left, condition.right):
                if not operand:
                    continue
                operand = operand.lstrip(NEGATION)
                if operand.startswith(SIGIL):
                    name = operand[1:]
                    if name and name not in result.conditions:
                        result.conditions.append(name)

        return result

    def needs_arguments(self, template: str) -> bool:
        """True when some variable tag has no default and so needs an argument."""
        text = self.strip_comments(template)
        return any(not token.has_default for token in self.tokenize(text))


def _engine(
    strict: bool = True,
    patterns: Optional[Patterns] = None,
    filters: Optional[FilterRegistry] = None,
    logger: Optional[logging.Logger] = None
) -> TemplateEngine:
    options: Dict[str, Any] = {'strict': strict}
    if patterns is not None:
        options['patterns'] = patterns
    if filters is not None:
        options['filters'] = filters
    return TemplateEngine(Options(**options), logger)


def render(
    template: Any,
    arguments: Optional[Dict[str, Any]] = None,
    strict: bool = True,
    patterns: Optional[Patterns] = None,
    filters: Optional[FilterRegistry] = None,
    logger: Optional[logging.Logger] = None
) -> Any:
    """Render ``template`` with ``arguments``. Strict by default."""
    return _engine(strict, patterns, filters, logger).render(template, arguments)


def render_file(
    path: Union[str, Path],
    arguments: Optional[Dict[str, Any]] = None,
    strict: bool = True,
    patterns: Optional[Patterns] = None,
    filters: Optional[FilterRegistry] = None,
    logger: Optional[logging.Logger] = None
) -> str:
    """Render the template stored at ``path``."""
    return _engine(strict, patterns, filters, logger).render_file(path, arguments)


def list_variables(template: str, patterns: Optional[Patterns] = None) -> TemplateArguments:
    return _engine(patterns=patterns).list_variables(template)


def needs_arguments(template: str, patterns: Optional[Patterns] = None) -> bool:
    return _engine(patterns=patterns).needs_arguments(template)
