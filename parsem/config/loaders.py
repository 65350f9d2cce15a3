"""
Template and argument file loaders.

Handles reading template files from a template directory and argument
mappings from JSON or YAML files.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml


class TemplateLoader:
    """Loads template files from a template directory."""

    def __init__(self, template_dir: str = "templates"):
        self.template_dir = Path(template_dir)

    def load(self, template_name: str) -> str:
        """Load a template by its path relative to the template directory."""
        root = self.template_dir.resolve()
        template_file = (root / template_name).resolve()
        if root not in template_file.parents or not template_file.is_file():
            raise FileNotFoundError(f"Template not found: {template_name}")

        return template_file.read_text(encoding="utf-8")

    def list_templates(self) -> List[str]:
        """Get the relative paths of all templates in the directory."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            file.relative_to(self.template_dir).as_posix()
            for file in self.template_dir.rglob("*")
            if file.is_file()
        )


class ArgumentLoader:
    """Loads template arguments from JSON or YAML files."""

    YAML_EXTENSIONS = (".yml", ".yaml")

    def load(self, path: str) -> Dict[str, Any]:
        """
        Load an argument mapping.

        Args:
            path: Path to a .json, .yml or .yaml file

        Returns:
            Mapping of variable name to value

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not hold a mapping
        """
        args_file = Path(path)
        if not args_file.exists():
            raise FileNotFoundError(f"Arguments file not found: {path}")

        with open(args_file, encoding="utf-8") as f:
            if args_file.suffix.lower() in self.YAML_EXTENSIONS:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Arguments file must contain a mapping: {path}")

        return {str(key): value for key, value in data.items()}
