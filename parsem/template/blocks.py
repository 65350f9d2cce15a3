"""
Conditional block resolution.

The template is scanned once for if/else/endif tags. The flat tag list is
folded into a tree with an explicit stack, then the tree is resolved
depth-first: only the branch that survives its condition is visited, so
conditions inside a discarded branch are never evaluated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING

from ..errors import StructuralError
from .conditions import Condition, ConditionEvaluator, parse_condition
from .patterns import ELSE, ENDIF, IF, scan_block_tags

if TYPE_CHECKING:
    from ..config.options import Options


@dataclass
class ConditionalBlock:
    """An ``if`` block with its then-branch and optional else-branch."""

    condition: Condition
    then_body: List['Node'] = field(default_factory=list)
    else_body: Optional[List['Node']] = None


Node = Union[str, ConditionalBlock]


class ConditionalBlockProcessor:
    """Replaces every conditional block with the text of its surviving branch."""

    def __init__(
        self,
        options: 'Options',
        evaluator: Optional[ConditionEvaluator] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.options = options
        self.logger = logger or logging.getLogger('parsem')
        self.evaluator = evaluator or ConditionEvaluator(self.logger)

    def parse(self, text: str) -> List[Node]:
        """
        Build the block tree for ``text``.

        Returns:
            Top-level nodes: plain text segments and ConditionalBlock entries

        Raises:
            StructuralError: On a stray else/endif, a second else in one block,
                a missing endif, a malformed condition, or nesting deeper than
                ``options.max_depth``
        """
        tags = scan_block_tags(
            text,
            self.options.patterns,
            self.options.trim_before_blocks,
            self.options.trim_after_blocks,
        )

        root: List[Node] = []
        stack: List[ConditionalBlock] = []
        current = root
        position = 0

        for tag in tags:
            if tag.start > position:
                current.append(text[position:tag.start])
            position = tag.end

            if tag.kind == IF:
                if len(stack) >= self.options.max_depth:
                    raise StructuralError(
                        f"Conditions nested deeper than {self.options.max_depth} levels."
                    )
                block = ConditionalBlock(parse_condition(tag.condition or ''))
                current.append(block)
                stack.append(block)
                current = block.then_body

            elif tag.kind == ELSE:
                if not stack:
                    raise StructuralError("Unexpected <% else %> tag outside of a condition.")
                block = stack[-1]
                if block.else_body is not None:
                    raise StructuralError("Too many <% else %> tags.")
                block.else_body = []
                current = block.else_body

            elif tag.kind == ENDIF:
                if not stack:
                    raise StructuralError("Unexpected <% endif %> tag without a matching <% if %>.")
                stack.pop()
                if not stack:
                    current = root
                elif stack[-1].else_body is not None:
                    current = stack[-1].else_body
                else:
                    current = stack[-1].then_body

        if stack:
            raise StructuralError("Missing <% endif %> tag.")

        if position < len(text):
            root.append(text[position:])

        return root

    def resolve(self, nodes: List[Node], arguments: Dict[str, Any]) -> str:
        """Render a node list, recursing into the surviving branch of each block."""
        parts = []
        for node in nodes:
            if isinstance(node, str):
                parts.append(node)
                continue

            if self.evaluator.evaluate(node.condition, arguments):
                body = node.then_body
            elif node.else_body is not None:
                body = node.else_body
            else:
                continue

            parts.append(self.resolve(body, arguments))

        return ''.join(parts)

    def process(self, text: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Resolve all conditional blocks in ``text``."""
        if arguments is None:
            arguments = {}
        return self.resolve(self.parse(text), arguments)
