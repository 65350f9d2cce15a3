"""
Tag patterns and the block tag scanner.

Default tag syntax:
    <# comment #>
    <% name="default"|filter:10,'arg' %>
    <% if $a > 10 %> ... <% else %> ... <% endif %>
"""

import re
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.options import Patterns


# Matches:
#   <% var='default'|filter:10,'arg','another' %>   (full match)
#   name         -> var
#   default      -> ='default'
#   filter       -> |filter:10,'arg','another'
#   filter_name  -> filter
#   filter_args  -> 10,'arg','another'
VARIABLE_PATTERN = (
    r'<%\s?(?P<name>(?!(?:if|else|endif)\b)[A-Za-z0-9_]+)'
    r'(?P<default>=(?:"[^"\n]*"|\'[^\'\n]*\'|[^|\n]*?))?'
    r'(?P<filter>\|(?P<filter_name>[A-Za-z0-9_]+)(?::(?P<filter_args>[^\n]*?))?)?'
    r'\s?%>'
)

# Trailing newline (LF or CRLF) is part of every block tag so blocks leave no blank lines.
CONDITION_PATTERN = r'<%\s?if\s(?P<condition>.+?)\s?%>(?:\r?\n)?'
ELSE_PATTERN = r'<%\s?else\s?%>(?:\r?\n)?'
ENDIF_PATTERN = r'<%\s?endif\s?%>(?:\r?\n)?'

# Non-greedy: the first closer ends the comment, openers inside are plain text.
COMMENT_PATTERN = r'(?s)<#\s?(?P<comment>.*?)\s?#>'

# Matches the inside of an if tag:
#   !$foo === "bar"
#   negation -> !
#   left     -> $foo
#   operator -> ===
#   right    -> "bar"
# Known operators are tried first so "$a==!$b" splits after "==". Any other
# run of operator characters (e.g. "<>") is kept whole and rejected later.
CONDITION_EXPRESSION_PATTERN = re.compile(
    r'(?P<negation>!?)'
    r'(?P<left>"[^"]*"|\'[^\']*\'|[^\s<>=]+?)\s*'
    r'(?:(?P<operator>(?:===|!==|==|!=|<=|>=|<|>)(?![<>=])|[<>=!]+)\s*(?P<right>.+?))?\s*'
)

TRAILING_WHITESPACE_PATTERN = re.compile(r'[ \t]*(?:\r?\n|\Z)')

IF = 'if'
ELSE = 'else'
ENDIF = 'endif'


@dataclass(frozen=True)
class BlockTag:
    """One if/else/endif tag located in a template."""

    kind: str
    start: int
    end: int
    condition: Optional[str] = None


def scan_block_tags(
    text: str,
    patterns: 'Patterns',
    trim_before: bool = False,
    trim_after: bool = False
) -> List[BlockTag]:
    """
    Locate every block tag in ``text`` and return them ordered by position.

    Args:
        text: Template text with comments already removed
        patterns: Tag patterns to search with
        trim_before: Extend a tag back over indentation that precedes it on its line
        trim_after: Extend a tag over trailing spaces up to and including the newline

    Returns:
        Flat list of BlockTag, non-overlapping, left to right
    """
    found = []
    for match in re.finditer(patterns.conditions, text):
        found.append(BlockTag(IF, match.start(), match.end(), match.group('condition').strip()))
    for match in re.finditer(patterns.else_tag, text):
        found.append(BlockTag(ELSE, match.start(), match.end()))
    for match in re.finditer(patterns.endif_tag, text):
        found.append(BlockTag(ENDIF, match.start(), match.end()))

    found.sort(key=lambda tag: tag.start)

    tags = []
    prev_end = 0
    for tag in found:
        if tag.start < prev_end:
            continue

        start, end = tag.start, tag.end
        if trim_before:
            line_start = max(text.rfind('\n', 0, start) + 1, prev_end)
            if not text[line_start:start].strip(' \t'):
                start = line_start
        if trim_after and not text[tag.start:end].endswith('\n'):
            trailing = TRAILING_WHITESPACE_PATTERN.match(text, end)
            if trailing:
                end = trailing.end()

        tags.append(BlockTag(tag.kind, start, end, tag.condition))
        prev_end = end

    return tags
