#!/usr/bin/env python3
"""Test the built-in filter catalog and the filter registry."""

import hashlib
import hmac

import pytest

from parsem import FilterError, render
from parsem.template import FilterRegistry, default_registry
from parsem.template import functions


@pytest.fixture
def filters():
    """Fresh registry with every built-in filter."""
    return default_registry()


class TestCaseFilters:
    """Test case conversion filters."""

    def test_upper_lower(self):
        assert functions.upper("abc") == "ABC"
        assert functions.lower("ÀBC") == "àbc"

    def test_upper_lower_first(self):
        assert functions.upper_first("hello world") == "Hello world"
        assert functions.lower_first("Hello") == "hello"
        assert functions.upper_first("") == ""

    def test_camel_case(self):
        assert functions.camel_case("hello world") == "helloWorld"
        assert functions.camel_case("foo-bar_baz") == "fooBarBaz"
        assert functions.camel_case("Hello_world") == "HelloWorld"

    def test_pascal_case(self):
        assert functions.pascal_case("hello world") == "HelloWorld"

    def test_snake_case(self):
        assert functions.snake_case("helloWorld") == "hello_world"
        assert functions.snake_case("Hello World") == "hello_world"

    def test_kebab_case(self):
        assert functions.kebab_case("hello world") == "hello-world"

    def test_title_case(self):
        assert functions.title_case("hello_world-foo bar") == "Hello World-Foo Bar"


class TestSequenceFilters:
    """Test filters that work on strings and lists."""

    def test_first_last(self):
        assert functions.first("abc") == "a"
        assert functions.last("abc") == "c"
        assert functions.first([1, 2, 3]) == 1
        assert functions.last([1, 2, 3]) == 3
        assert functions.first([]) is None

    def test_length(self):
        assert functions.length("héllo") == 5
        assert functions.length([1, 2]) == 2
        assert functions.length({"a": 1}) == 1

    def test_reverse(self):
        assert functions.reverse("abc") == "cba"
        assert functions.reverse([1, 2, 3]) == [3, 2, 1]

    def test_mapping_values(self):
        mapping = {"a": 1, "b": 2}
        assert functions.reverse(mapping) == [2, 1]
        assert functions.random_item({"a": 7}) == 7
        assert sorted(functions.shuffle(mapping)) == [1, 2]

    def test_random_item(self):
        assert functions.random_item([7]) == 7
        assert functions.random_item("abc") in "abc"

    def test_shuffle_keeps_items(self):
        assert sorted(functions.shuffle([3, 1, 2])) == [1, 2, 3]
        assert sorted(functions.shuffle("cab")) == ["a", "b", "c"]


class TestTextFilters:
    """Test text transformation filters."""

    def test_truncate(self):
        assert functions.truncate("hello world", 10) == "hello worl..."
        assert functions.truncate("hello world", 5, "") == "hello"
        assert functions.truncate("hi", 5) == "hi"

    def test_trim(self):
        assert functions.trim("  hi  ") == "hi"
        assert functions.trim("  hi  ", "left") == "hi  "
        assert functions.trim("  hi  ", "right") == "  hi"
        assert functions.trim("xxhixx", "both", "x") == "hi"

    def test_url(self):
        assert functions.url("a b/c") == "a%20b%2Fc"

    def test_strip_tags(self):
        assert functions.strip_tags("<b>bold</b> text") == "bold text"

    def test_nl2br(self):
        assert functions.nl2br("a\nb") == "a<br>\nb"
        assert functions.nl2br("a\r\nb", True) == "a<br />\r\nb"

    def test_escape_unescape(self):
        escaped = functions.escape("<a href='x'>&</a>")
        assert "<" not in escaped and "'" not in escaped
        assert functions.unescape(escaped) == "<a href='x'>&</a>"

    def test_hash(self):
        assert functions.hash_string("abc") == "900150983cd24fb0d6963f7d28e17f72"
        assert functions.hash_string("abc", "sha256") == hashlib.sha256(b"abc").hexdigest()
        expected = hmac.new(b"key", b"abc", "sha256").hexdigest()
        assert functions.hash_string("abc", "sha256", "key") == expected

    def test_rot13(self):
        assert functions.rot13("Hello") == "Uryyb"

    @pytest.mark.parametrize("encoding, value, encoded", [
        ("base64", "hello", "aGVsbG8="),
        ("hex", "hi", "6869"),
        ("url", "a b", "a%20b"),
        ("json", "a", '"a"'),
    ])
    def test_encode_decode(self, encoding, value, encoded):
        assert functions.encode(value, encoding) == encoded
        assert functions.decode(encoded, encoding) == value

    def test_yaml_encoding(self):
        dumped = functions.encode({"a": 1}, "yaml")
        assert dumped == "a: 1\n"
        assert functions.decode(dumped, "yaml") == {"a": 1}

    def test_unknown_encoding_is_identity(self):
        assert functions.encode("x", "rot47") == "x"

    def test_invalid_base64(self):
        with pytest.raises(ValueError):
            functions.decode("not base64!", "base64")


class TestValueFilters:
    """Test date, currency and JSONPath filters."""

    def test_java_to_strftime(self):
        assert functions.java_to_strftime("yyyy-MM-dd") == "%Y-%m-%d"
        assert functions.java_to_strftime("MMM dd, yyyy") == "%b %d, %Y"
        assert functions.java_to_strftime("EEEE, MMMM dd") == "%A, %B %d"

    def test_format_date(self):
        assert functions.format_date("2025-12-01", "MMM dd, yyyy") == "Dec 01, 2025"
        assert functions.format_date("2025-01-15T00:00:00-05:00", "yyyy-MM-dd") == "2025-01-15"

    def test_format_date_unparseable(self):
        assert functions.format_date("not a date", "yyyy") == "not a date"

    def test_currency(self):
        assert functions.currency(1089.99) == "$1,089.99"
        assert functions.currency(23) == "$23.00"
        assert functions.currency("$0.47") == "$0.47"
        assert functions.currency("abc") == "$0.00"
        assert functions.currency(None) == "$0.00"

    def test_query(self):
        data = {"user": {"name": "Ann"}, "items": [{"id": 1}, {"id": 2}]}
        assert functions.query(data, "$.user.name") == "Ann"
        assert functions.query(data, "$.items[*].id") == [1, 2]
        assert functions.query(data, "$.missing") is None

    def test_default(self):
        assert functions.default(None, "x") == "x"
        assert functions.default("", "x") == "x"
        assert functions.default("v", "x") == "v"


class TestFiltersInTemplates:
    """Test filters through the template syntax."""

    def test_format_date_filter(self):
        assert render("<% d|formatDate:'MMM dd, yyyy' %>", {"d": "2025-12-01"}) == "Dec 01, 2025"

    def test_query_filter(self):
        arguments = {"user": {"name": "Ann", "roles": ["a", "b"]}}
        assert render("<% user|query:'$.name' %>", arguments) == "Ann"
        assert render("<% user|query:'$.roles' %>", arguments) == '["a","b"]'

    def test_json_filter(self):
        assert render("<% v|json %>", {"v": "say \"hi\""}) == '"say \\"hi\\""'

    def test_default_filter(self):
        assert render("<% v|default:'n/a' %>", {"v": ""}) == "n/a"

    def test_hash_filter_with_arguments(self):
        assert render("<% v|hash:'md5' %>", {"v": "abc"}) == "900150983cd24fb0d6963f7d28e17f72"

    def test_reverse_mapping_filter(self):
        assert render("<% v|reverse %>", {"v": {"a": 1, "b": 2}}) == "[2,1]"

    def test_trim_filter_with_side(self):
        assert render("[<% v|trim:'left' %>]", {"v": "  x  "}) == "[x  ]"


class TestFilterRegistry:
    """Test registry lookups and dispatch."""

    def test_builtin_names(self, filters):
        for name in ("upper", "pascalCase", "truncate", "formatDate", "query", "decode"):
            assert name in filters

    def test_get_unknown(self, filters):
        with pytest.raises(FilterError, match="Filter function 'strtoupper' does not exist."):
            filters.get("strtoupper")

    def test_apply(self, filters):
        assert filters.apply("truncate", "hello world", 5, "!") == "hello!"

    def test_apply_wraps_filter_errors(self, filters):
        with pytest.raises(FilterError, match="Filter 'truncate' failed"):
            filters.apply("truncate", "abc", "not a number")

    def test_register_and_unregister(self, filters):
        filters.register("double", lambda value: value * 2)
        assert filters.apply("double", 4) == 8
        filters.unregister("double")
        assert "double" not in filters

    def test_register_requires_callable(self, filters):
        with pytest.raises(TypeError):
            filters.register("broken", "not callable")

    def test_default_registry_is_fresh(self, filters):
        filters.register("extra", str)
        assert "extra" not in default_registry()

    def test_copy_is_independent(self, filters):
        copy = filters.copy()
        copy.unregister("upper")
        assert "upper" in filters
        assert "upper" not in copy

    def test_empty_registry(self):
        registry = FilterRegistry()
        assert len(registry) == 0
        assert registry.names() == []
