#!/usr/bin/env python3
"""Test the render_template command line tool."""

import json

import pytest

from render_template import main, parse_assignments


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "app.yaml.tpl"
    path.write_text(
        "name: <% name %>\n"
        "<% if $debug %>\n"
        "debug: true\n"
        "<% endif %>\n"
        "port: <% port=8080 %>\n",
        encoding="utf-8",
    )
    return path


def test_parse_assignments():
    assert parse_assignments(["count=3", "name=Ann", "debug=true", "q='x=y'"]) == {
        "count": 3,
        "name": "Ann",
        "debug": True,
        "q": "x=y",
    }


def test_parse_assignments_invalid():
    with pytest.raises(ValueError):
        parse_assignments(["novalue"])


def test_render_with_assignments(template_file, capsys):
    assert main([str(template_file), "--set", "name=api", "--set", "debug=true"]) == 0
    assert capsys.readouterr().out == "name: api\ndebug: true\nport: 8080\n"


def test_render_with_args_file(template_file, tmp_path, capsys):
    args_file = tmp_path / "values.yaml"
    args_file.write_text("name: api\ndebug: false\nport: 9000\n", encoding="utf-8")
    assert main([str(template_file), "--args", str(args_file)]) == 0
    assert capsys.readouterr().out == "name: api\nport: 9000\n"


def test_render_to_output_file(template_file, tmp_path):
    output = tmp_path / "app.yaml"
    assert main([str(template_file), "-s", "name=api", "-s", "debug=false", "-o", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "name: api\nport: 8080\n"


def test_strict_missing_variable(template_file, capsys):
    assert main([str(template_file), "--strict", "--set", "debug=false"]) == 1
    assert "Variable 'name' not found" in capsys.readouterr().err


def test_missing_template(tmp_path, capsys):
    assert main([str(tmp_path / "nope.tpl")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_list_variables(template_file, capsys):
    assert main([str(template_file), "--list"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert listed == {
        "arguments": ["name", "port"],
        "defaults": {"port": 8080},
        "conditions": ["debug"],
        "needs_arguments": True,
    }


def test_malformed_args_file(template_file, tmp_path, capsys):
    args_file = tmp_path / "values.yaml"
    args_file.write_text("name: [unclosed\n", encoding="utf-8")
    assert main([str(template_file), "--args", str(args_file)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")
