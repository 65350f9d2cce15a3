#!/usr/bin/env python3
"""
render_template.py - Render a template file from the command line

Usage:
    python render_template.py <template_file> [--args args.json] [--set name=value ...]
    python render_template.py <template_file> --list

Examples:
    python render_template.py config.yaml.tpl --args values.yaml -o config.yaml
    python render_template.py greeting.txt --set name='"Ann"' --set count=3 --strict
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from parsem import Options, TemplateEngine, TemplateError
from parsem.config import ArgumentLoader
from parsem.template.values import coerce_literal

logger = logging.getLogger("parsem.cli")


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """
    Turn ``name=value`` pairs into arguments, coercing each value like a template literal.

    Examples:
        ["count=3", "name=Ann", "debug=true"] -> {"count": 3, "name": "Ann", "debug": True}
    """
    arguments = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid assignment '{assignment}', expected name=value")
        arguments[name.strip()] = coerce_literal(value.strip())
    return arguments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a text template with variables, filters and conditional blocks"
    )
    parser.add_argument("template_file", help="Path to the template to render")
    parser.add_argument("-a", "--args", dest="args_file", help="JSON or YAML file with template arguments")
    parser.add_argument("-s", "--set", dest="assignments", action="append", default=[], metavar="NAME=VALUE",
                        help="Set a single argument (repeatable, overrides --args)")
    parser.add_argument("--strict", action="store_true", help="Fail on variables missing from the arguments")
    parser.add_argument("--trim-blocks", action="store_true",
                        help="Remove indentation and trailing whitespace around if/else/endif tags")
    parser.add_argument("-l", "--list", action="store_true", help="List the template's variables instead of rendering")
    parser.add_argument("-o", "--output", help="Write the result to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = Options(
        strict=args.strict,
        trim_before_blocks=args.trim_blocks,
        trim_after_blocks=args.trim_blocks,
    )
    engine = TemplateEngine(options, logger)

    try:
        template_file = Path(args.template_file)
        if not template_file.is_file():
            raise FileNotFoundError(f"File '{args.template_file}' does not exist.")
        template = template_file.read_text(encoding="utf-8")

        if args.list:
            found = engine.list_variables(template)
            result = json.dumps({
                "arguments": found.arguments,
                "defaults": found.defaults,
                "conditions": found.conditions,
                "needs_arguments": engine.needs_arguments(template),
            }, indent=2, ensure_ascii=False) + "\n"
        else:
            arguments = ArgumentLoader().load(args.args_file) if args.args_file else {}
            arguments.update(parse_assignments(args.assignments))
            logger.debug("Rendering %s with %d argument(s)", args.template_file, len(arguments))
            result = engine.render(template, arguments)
    except (TemplateError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result, encoding="utf-8")
        print(f"Wrote {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
