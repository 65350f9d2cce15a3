"""
Filter functions for template variables.

A filter receives the resolved variable value first and the arguments written
in the tag after it:

    <% name|truncate:10,'…' %>  ->  truncate(value, 10, '…')

Filters are looked up by name in a FilterRegistry. Unknown names are an
error, there is no fallback to arbitrary Python callables.
"""

import base64
import binascii
import codecs
import hashlib
import hmac
import html
import json
import random
import re
from typing import Any, Callable, Dict, Iterator, List, Optional
from urllib.parse import quote, unquote

import yaml
from dateutil import parser as date_parser
from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JSONPathError

from ..errors import FilterError
from .values import stringify

Filter = Callable[..., Any]


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    return value if isinstance(value, str) else stringify(value)


def _ucwords(string: str, delimiters: str = r'\s') -> str:
    """Uppercase the first character of every word, leaving the rest untouched."""
    return re.sub(
        rf'(^|[{delimiters}])([^{delimiters}])',
        lambda m: m.group(1) + m.group(2).upper(),
        string,
    )


def upper(value: Any) -> str:
    return _text(value).upper()


def lower(value: Any) -> str:
    return _text(value).lower()


def upper_first(value: Any) -> str:
    string = _text(value)
    return string[:1].upper() + string[1:]


def lower_first(value: Any) -> str:
    string = _text(value)
    return string[:1].lower() + string[1:]


def camel_case(value: Any) -> str:
    """
    Join words into camelCase, keeping the case of the first character.

    Examples:
        'hello world' -> 'helloWorld'
        'Hello_world' -> 'HelloWorld'
    """
    string = _text(value)
    first_is_lower = string[:1].islower()
    string = string.replace('-', ' ').replace('_', ' ')
    string = _ucwords(string).replace(' ', '')
    if first_is_lower:
        string = lower_first(string)
    return string


def pascal_case(value: Any) -> str:
    return upper_first(camel_case(value))


def snake_case(value: Any) -> str:
    string = camel_case(value)
    string = re.sub(r'([a-z])([A-Z])', r'\1_\2', string)
    string = string.replace(' ', '_').replace('-', '_')
    return string.lower()


def kebab_case(value: Any) -> str:
    return snake_case(value).replace('_', '-')


def title_case(value: Any) -> str:
    """Capitalise every word; underscores become spaces, hyphens are kept as word breaks."""
    string = _text(value).replace('_', ' ')
    return _ucwords(string, r'\s\-')


# ---------------------------------------------------------------------------
# Sequences
# ---------------------------------------------------------------------------

def first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    if isinstance(value, dict):
        return next(iter(value.values()), None)
    return _text(value)[:1]


def last(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[-1] if value else None
    if isinstance(value, dict):
        return list(value.values())[-1] if value else None
    return _text(value)[-1:]


def length(value: Any) -> int:
    if isinstance(value, (list, tuple, dict)):
        return len(value)
    return len(_text(value))


def reverse(value: Any) -> Any:
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return list(reversed(value))
    return _text(value)[::-1]


def random_item(value: Any) -> Any:
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return random.choice(value) if value else None
    string = _text(value)
    return random.choice(string) if string else ''


def shuffle(value: Any) -> Any:
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return random.sample(list(value), len(value))
    string = _text(value)
    return ''.join(random.sample(string, len(string)))


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def truncate(value: Any, length: int, ending: str = '...') -> str:
    """
    Cut a string to ``length`` characters and append ``ending`` when it was cut.

    Examples:
        truncate('hello world', 10)      -> 'hello worl...'
        truncate('hello world', 5, '')   -> 'hello'
        truncate('hi', 5)                -> 'hi'
    """
    string = _text(value)
    length = int(length)
    if len(string) <= length:
        return string
    return string[:length] + _text(ending)


def trim(value: Any, side: str = 'both', characters: str = ' \n\r\t\v\0') -> str:
    string = _text(value)
    if side == 'left':
        return string.lstrip(characters)
    elif side == 'right':
        return string.rstrip(characters)
    return string.strip(characters)


def url(value: Any) -> str:
    return quote(_text(value), safe='')


def strip_tags(value: Any) -> str:
    return re.sub(r'<[^>]*>', '', _text(value))


def nl2br(value: Any, xhtml: bool = False) -> str:
    br = '<br />' if xhtml else '<br>'
    return re.sub(r'(\r\n|\n\r|\n|\r)', lambda m: br + m.group(1), _text(value))


def escape(value: Any) -> str:
    return html.escape(_text(value), quote=True)


def unescape(value: Any) -> str:
    return html.unescape(_text(value))


def hash_string(value: Any, algorithm: str = 'md5', secret: Optional[str] = None) -> str:
    data = _text(value).encode('utf-8')
    if secret:
        return hmac.new(_text(secret).encode('utf-8'), data, algorithm).hexdigest()
    return hashlib.new(algorithm, data).hexdigest()


def rot13(value: Any) -> str:
    return codecs.encode(_text(value), 'rot13')


def encode(value: Any, encoding: str = 'base64') -> str:
    """
    Encode a value as base64, hex, url, json or yaml.

    Unknown encodings return the text unchanged.
    """
    if encoding == 'json':
        return json.dumps(value, ensure_ascii=False)
    if encoding == 'yaml':
        return yaml.safe_dump(value, default_flow_style=False, allow_unicode=True)

    string = _text(value)
    if encoding == 'base64':
        return base64.b64encode(string.encode('utf-8')).decode('ascii')
    elif encoding == 'hex':
        return string.encode('utf-8').hex()
    elif encoding == 'url':
        return quote(string, safe='')
    return string


def decode(value: Any, encoding: str = 'base64') -> Any:
    """Inverse of ``encode``."""
    string = _text(value)
    try:
        if encoding == 'base64':
            return base64.b64decode(string, validate=True).decode('utf-8')
        elif encoding == 'hex':
            return bytes.fromhex(string).decode('utf-8')
        elif encoding == 'url':
            return unquote(string)
        elif encoding == 'json':
            return json.loads(string)
        elif encoding == 'yaml':
            return yaml.safe_load(string)
    except (binascii.Error, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Cannot decode value as {encoding}: {e}") from e
    return string


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def java_to_strftime(java_pattern: str) -> str:
    """
    Convert a Java SimpleDateFormat pattern to a Python strftime format.

    Java Pattern -> Python strftime mapping:
        yyyy -> %Y  (4-digit year)
        yy -> %y    (2-digit year)
        MMMM -> %B  (full month name)
        MMM -> %b   (abbreviated month name)
        MM -> %m    (2-digit month number)
        dd -> %d    (2-digit day)
        EEEE -> %A  (full weekday name)
        EEE -> %a   (abbreviated weekday name)
        HH -> %H    (hour 0-23)
        hh -> %I    (hour 1-12)
        mm -> %M    (minutes)
        ss -> %S    (seconds)
        a -> %p     (AM/PM)
        Z -> %z     (UTC offset)
        z -> %Z     (timezone name)

    Examples:
        >>> java_to_strftime('yyyy-MM-dd')
        '%Y-%m-%d'
        >>> java_to_strftime('MMM dd, yyyy')
        '%b %d, %Y'
    """
    mappings = {
        'yyyy': '%Y',
        'yy': '%y',
        'MMMM': '%B',
        'MMM': '%b',
        'MM': '%m',
        'dd': '%d',
        'EEEE': '%A',
        'EEE': '%a',
        'HH': '%H',
        'hh': '%I',
        'mm': '%M',
        'ss': '%S',
        'a': '%p',
        'Z': '%z',
        'z': '%Z'
    }

    # Single pass, longest token first, so replaced codes are never rescanned
    tokens = sorted(mappings, key=len, reverse=True)
    token_pattern = re.compile('|'.join(re.escape(token) for token in tokens))
    return token_pattern.sub(lambda m: mappings[m.group(0)], java_pattern)


def format_date(value: Any, pattern: str = 'yyyy-MM-dd') -> str:
    """
    Format a date string according to a Java SimpleDateFormat pattern.

    Values that cannot be parsed as a date are returned unchanged.

    Examples:
        format_date('2025-12-01', 'MMM dd, yyyy') -> 'Dec 01, 2025'
    """
    date_str = _text(value)
    try:
        dt = date_parser.parse(date_str)
    except (ValueError, OverflowError):
        return date_str
    return dt.strftime(java_to_strftime(_text(pattern)))


def currency(amount: Any, symbol: str = '$') -> str:
    """
    Format a numeric value with a currency symbol, thousands separators and
    exactly two decimal places.

    Examples:
        1089.99 -> "$1,089.99"
        23 -> "$23.00"
        "$0.47" -> "$0.47"
    """
    try:
        if isinstance(amount, str):
            cleaned = amount.replace(symbol, "").replace(",", "").strip()
            numeric_value = float(cleaned)
        elif isinstance(amount, (int, float)) and not isinstance(amount, bool):
            numeric_value = float(amount)
        else:
            return f"{symbol}0.00"
        return f"{symbol}{numeric_value:,.2f}"
    except (ValueError, TypeError):
        return f"{symbol}0.00"


def query(value: Any, path: str) -> Any:
    """
    Extract data from a structured argument with a JSONPath expression.

    Returns the first match, a list when the path matches several values,
    or None when nothing matches.

    Examples:
        query({'user': {'name': 'Ann'}}, '$.user.name') -> 'Ann'
    """
    try:
        expression = jsonpath_parse(_text(path))
    except JSONPathError as e:
        raise ValueError(f"Invalid JSONPath '{path}': {e}") from e

    matches = [match.value for match in expression.find(value)]
    if not matches:
        return None
    return matches[0] if len(matches) == 1 else matches


def to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def default(value: Any, fallback: Any = '') -> Any:
    return fallback if value is None or value == '' else value


BUILTIN_FILTERS: Dict[str, Filter] = {
    'upper': upper,
    'lower': lower,
    'upperFirst': upper_first,
    'lowerFirst': lower_first,
    'first': first,
    'last': last,
    'camelCase': camel_case,
    'snakeCase': snake_case,
    'kebabCase': kebab_case,
    'pascalCase': pascal_case,
    'titleCase': title_case,
    'length': length,
    'reverse': reverse,
    'random': random_item,
    'shuffle': shuffle,
    'truncate': truncate,
    'trim': trim,
    'url': url,
    'stripTags': strip_tags,
    'nl2br': nl2br,
    'escape': escape,
    'unescape': unescape,
    'hash': hash_string,
    'rot13': rot13,
    'encode': encode,
    'decode': decode,
    'formatDate': format_date,
    'currency': currency,
    'query': query,
    'json': to_json,
    'default': default,
}


class FilterRegistry:
    """Named filters available to templates."""

    def __init__(self, filters: Optional[Dict[str, Filter]] = None):
        self._filters: Dict[str, Filter] = dict(filters or {})

    def register(self, name: str, func: Filter) -> None:
        if not callable(func):
            raise TypeError(f"Filter '{name}' must be callable.")
        self._filters[name] = func

    def unregister(self, name: str) -> None:
        self._filters.pop(name, None)

    def get(self, name: str) -> Filter:
        try:
            return self._filters[name]
        except KeyError:
            raise FilterError(f"Filter function '{name}' does not exist.") from None

    def apply(self, name: str, value: Any, *args: Any) -> Any:
        """
        Call filter ``name`` with ``value`` followed by ``args``.

        Raises:
            FilterError: If the filter is unknown or rejects its input
        """
        func = self.get(name)
        try:
            return func(value, *args)
        except (TypeError, ValueError, AttributeError) as e:
            raise FilterError(f"Filter '{name}' failed: {e}") from e

    def names(self) -> List[str]:
        return sorted(self._filters)

    def copy(self) -> 'FilterRegistry':
        return FilterRegistry(self._filters)

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._filters)


def default_registry() -> FilterRegistry:
    """Return a new registry holding every built-in filter."""
    return FilterRegistry(BUILTIN_FILTERS)
