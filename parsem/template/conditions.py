"""
Condition evaluation for template logic.

Supports a single binary comparison per if tag:
    <% if $foo %>               truthiness of an argument
    <% if !$foo %>              negated truthiness
    <% if $bar >= 2 %>          comparison against a literal
    <% if $foo === !$bar %>     either operand may be negated
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..errors import OperandError, OperatorError, ResolutionError, StructuralError
from .patterns import CONDITION_EXPRESSION_PATTERN
from .values import (
    coerce_literal,
    is_structured,
    is_truthy,
    loose_compare,
    loose_equals,
    strict_equals,
)

SIGIL = '$'
NEGATION = '!'

OPERATORS = ('==', '===', '!=', '!==', '<', '<=', '>', '>=')


@dataclass(frozen=True)
class Condition:
    """A parsed ``<% if ... %>`` expression."""

    left: str
    negated: bool = False
    operator: Optional[str] = None
    right: Optional[str] = None


def parse_condition(text: str) -> Condition:
    """
    Split condition text into its operands and operator.

    Raises:
        StructuralError: If the text is not of the form ``[!]left[ operator right]``
    """
    match = CONDITION_EXPRESSION_PATTERN.fullmatch(text.strip())
    if not match:
        raise StructuralError(f"Malformed condition '{text}'.")

    return Condition(
        left=match.group('left'),
        negated=match.group('negation') == NEGATION,
        operator=match.group('operator'),
        right=match.group('right'),
    )


def _compare(left: Any, operator: str, right: Any) -> bool:
    if operator == '==':
        return loose_equals(left, right)
    elif operator == '===':
        return strict_equals(left, right)
    elif operator == '!=':
        return not loose_equals(left, right)
    elif operator == '!==':
        return not strict_equals(left, right)
    elif operator == '<':
        return loose_compare(left, right) < 0
    elif operator == '<=':
        return loose_compare(left, right) <= 0
    elif operator == '>':
        return loose_compare(left, right) > 0
    elif operator == '>=':
        return loose_compare(left, right) >= 0
    raise OperatorError(f"Unsupported operator '{operator}'.")


class ConditionEvaluator:
    """Evaluates conditional expressions for template logic."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('parsem')

    def resolve_operand(self, raw: str, arguments: Mapping[str, Any]) -> Any:
        """
        Turn one raw operand into a value.

        ``$name`` looks ``name`` up in the arguments, anything else is a
        literal. A leading ``!`` inverts the truthiness of the result.

        Raises:
            ResolutionError: If a ``$name`` operand is not in the arguments
            OperandError: If the value is a list or mapping
        """
        negated = raw.startswith(NEGATION)
        if negated:
            raw = raw[1:]

        if raw.startswith(SIGIL):
            name = raw[1:]
            if name not in arguments:
                raise ResolutionError(name)
            value = arguments[name]
        else:
            value = coerce_literal(raw)

        if is_structured(value):
            raise OperandError(f"Operand '{raw}' is a {type(value).__name__} and cannot be used in a condition.")

        return not is_truthy(value) if negated else value

    def evaluate(self, condition: Condition, arguments: Optional[Dict[str, Any]] = None) -> bool:
        """
        Evaluate a parsed condition.

        Args:
            condition: Parsed condition
            arguments: Template arguments for ``$name`` operands

        Returns:
            Boolean result
        """
        if arguments is None:
            arguments = {}

        left = self.resolve_operand(condition.left, arguments)
        if condition.negated:
            left = not is_truthy(left)

        if condition.operator is None:
            result = is_truthy(left)
        else:
            if condition.operator not in OPERATORS:
                raise OperatorError(f"Unsupported operator '{condition.operator}'.")
            right = self.resolve_operand(condition.right or '', arguments)
            result = _compare(left, condition.operator, right)

        self.logger.debug("Condition %s evaluated to %s", condition, result)
        return result

    def evaluate_condition(self, text: str, arguments: Optional[Dict[str, Any]] = None) -> bool:
        """Parse and evaluate condition text in one step."""
        return self.evaluate(parse_condition(text), arguments)
