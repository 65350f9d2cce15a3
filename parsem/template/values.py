"""
Literal coercion, stringification and comparison of template values.

Template values are plain Python objects: ``str``, ``int``, ``float``,
``bool`` and ``None`` for scalars, plus lists and dicts that only ever reach
the output through ``stringify``.
"""

import json
import re
from typing import Any, List, Optional, Tuple, Union

INT_PATTERN = re.compile(r'[+-]?\d+')
FLOAT_PATTERN = re.compile(r'[+-]?(?:\d+\.\d*|\.\d+)')

QUOTE_CHARS = '\'"`'

Number = Union[int, float]


def coerce_literal(text: str) -> Any:
    """
    Convert raw literal text from a template into a typed value.

    Rules are checked in order:
        'text' or "text"  -> str without the quotes
        true / false      -> bool
        null              -> None
        1.5, -.5, 3.      -> float
        42, -7            -> int
        anything else     -> the text unchanged

    Examples:
        >>> coerce_literal('"world"')
        'world'
        >>> coerce_literal('10')
        10
        >>> coerce_literal('$foo')
        '$foo'
    """
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        return text[1:-1]
    if text == 'true':
        return True
    if text == 'false':
        return False
    if text == 'null':
        return None
    if FLOAT_PATTERN.fullmatch(text):
        return float(text)
    if INT_PATTERN.fullmatch(text):
        return int(text)
    return text


def coerce_filter_argument(text: str) -> Any:
    """Coerce one raw filter argument, dropping stray quote characters from strings."""
    value = coerce_literal(text.strip())
    if isinstance(value, str):
        return value.strip(QUOTE_CHARS)
    return value


def split_arguments(arg_str: str) -> List[str]:
    """
    Split filter arguments by comma, respecting quoted strings.

    Example: "10, 'value, with comma'" -> ["10", "'value, with comma'"]
    """
    args = []
    current_arg = []
    in_quote = False
    quote_char = None

    for char in arg_str:
        if char in QUOTE_CHARS and not in_quote:
            in_quote = True
            quote_char = char
            current_arg.append(char)
        elif char == quote_char and in_quote:
            in_quote = False
            quote_char = None
            current_arg.append(char)
        elif char == ',' and not in_quote:
            args.append(''.join(current_arg).strip())
            current_arg = []
        else:
            current_arg.append(char)

    # Add the last argument
    if current_arg:
        args.append(''.join(current_arg).strip())

    return args


def stringify(value: Any) -> str:
    """
    Format a resolved value for insertion into the output text.

    Booleans become ``true``/``false``, None becomes an empty string, floats
    without a fractional part lose their ``.0`` and structured values are
    written as compact JSON.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if is_structured(value):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=_json_default)
    return str(value)


def _json_default(value: Any) -> Any:
    """Sets are written as sorted lists; anything else JSON can't hold as its str()."""
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return sorted(value, key=repr)
    return str(value)


def is_structured(value: Any) -> bool:
    return isinstance(value, (list, tuple, dict, set, frozenset))


def is_truthy(value: Any) -> bool:
    return bool(value)


def as_number(value: Any) -> Optional[Number]:
    """Return ``value`` as an int or float when it is numeric, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if INT_PATTERN.fullmatch(text):
            return int(text)
        if FLOAT_PATTERN.fullmatch(text):
            return float(text)
    return None


def _comparable_pair(left: Any, right: Any) -> Tuple[Any, Any]:
    # bool and null operands compare by truthiness
    if left is None or right is None or isinstance(left, bool) or isinstance(right, bool):
        return is_truthy(left), is_truthy(right)

    left_number = as_number(left)
    right_number = as_number(right)
    if left_number is not None and right_number is not None:
        return left_number, right_number

    return stringify(left), stringify(right)


def loose_equals(left: Any, right: Any) -> bool:
    """
    Equality that allows cross-type comparison.

    ``"2" == 2`` holds, ``null == false`` holds, ``"abc" == 0`` does not.
    """
    a, b = _comparable_pair(left, right)
    return a == b


def loose_compare(left: Any, right: Any) -> int:
    """Three-way comparison using the same coercions as ``loose_equals``."""
    a, b = _comparable_pair(left, right)
    return (a > b) - (a < b)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that also requires identical types (``1 !== 1.0``, ``true !== 1``)."""
    return type(left) is type(right) and left == right
