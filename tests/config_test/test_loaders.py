#!/usr/bin/env python3
"""Test template and argument loaders."""

import json

import pytest

from parsem.config import ArgumentLoader, TemplateLoader


@pytest.fixture
def template_dir(tmp_path):
    """Template directory with a nested template."""
    (tmp_path / "config").mkdir()
    (tmp_path / "greeting.txt").write_text("Hello <% name %>!", encoding="utf-8")
    (tmp_path / "config" / "app.yaml").write_text("port: <% port=8080 %>\n", encoding="utf-8")
    return tmp_path


class TestTemplateLoader:
    """Test loading stored templates."""

    def test_load(self, template_dir):
        loader = TemplateLoader(str(template_dir))
        assert loader.load("greeting.txt") == "Hello <% name %>!"
        assert loader.load("config/app.yaml") == "port: <% port=8080 %>\n"

    def test_missing_template(self, template_dir):
        loader = TemplateLoader(str(template_dir))
        with pytest.raises(FileNotFoundError, match="Template not found"):
            loader.load("missing.txt")

    def test_path_outside_template_dir(self, template_dir):
        (template_dir.parent / "secret.txt").write_text("secret", encoding="utf-8")
        loader = TemplateLoader(str(template_dir))
        with pytest.raises(FileNotFoundError):
            loader.load("../secret.txt")

    def test_directory_is_not_a_template(self, template_dir):
        with pytest.raises(FileNotFoundError):
            TemplateLoader(str(template_dir)).load("config")

    def test_list_templates(self, template_dir):
        loader = TemplateLoader(str(template_dir))
        assert loader.list_templates() == ["config/app.yaml", "greeting.txt"]

    def test_list_templates_without_directory(self, tmp_path):
        assert TemplateLoader(str(tmp_path / "nope")).list_templates() == []


class TestArgumentLoader:
    """Test loading argument mappings."""

    def test_json(self, tmp_path):
        args_file = tmp_path / "args.json"
        args_file.write_text(json.dumps({"name": "Ann", "count": 3}), encoding="utf-8")
        assert ArgumentLoader().load(str(args_file)) == {"name": "Ann", "count": 3}

    def test_yaml(self, tmp_path):
        args_file = tmp_path / "args.yaml"
        args_file.write_text("name: Ann\nitems:\n  - a\n  - b\n", encoding="utf-8")
        assert ArgumentLoader().load(str(args_file)) == {"name": "Ann", "items": ["a", "b"]}

    def test_empty_yaml(self, tmp_path):
        args_file = tmp_path / "args.yml"
        args_file.write_text("", encoding="utf-8")
        assert ArgumentLoader().load(str(args_file)) == {}

    def test_non_mapping(self, tmp_path):
        args_file = tmp_path / "args.json"
        args_file.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="must contain a mapping"):
            ArgumentLoader().load(str(args_file))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ArgumentLoader().load(str(tmp_path / "missing.json"))
