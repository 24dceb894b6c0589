"""Tests for parser option and token schemas."""

import re

import pytest
from pydantic import ValidationError

from mongoqs.builders import custom_near
from mongoqs.constants import DEFAULT_KEY_REGEX, DEFAULT_OPERATORS
from mongoqs.schema import ParsedToken, ParserOptions, StringOptions


class TestParserOptionsDefaults:
    def test_defaults(self):
        options = ParserOptions()
        assert options.operators == DEFAULT_OPERATORS
        assert options.alias == {}
        assert options.blacklist == frozenset()
        assert options.whitelist == frozenset()
        assert options.custom == {}
        assert options.key_regex is DEFAULT_KEY_REGEX
        assert options.string.to_boolean is True
        assert options.string.to_number is True

    def test_frozen(self):
        options = ParserOptions()
        with pytest.raises(ValidationError):
            options.alias = {"foo": "bar"}


class TestParserOptionsAliases:
    """Tests for camelCase option names."""

    def test_camel_case_names(self):
        options = ParserOptions(
            ops=["!", "$in"],
            keyRegex=r"^[a-z]+\Z",
            valRegex=r"[^a-z]",
            arrRegex=r"^[a-z]+(\[\])?\Z",
        )
        assert options.operators == ("!", "$in")
        assert options.key_regex.search("foo")
        assert options.val_regex.sub("", "a1b") == "ab"
        assert options.arr_regex.search("foo[]")

    def test_snake_case_names(self):
        options = ParserOptions(operators=["~"], key_regex=re.compile("^x"))
        assert options.operators == ("~",)
        assert options.key_regex.pattern == "^x"

    def test_string_options_aliases(self):
        assert StringOptions(toBoolean=False).to_boolean is False
        assert StringOptions(to_number=False).to_number is False


class TestParserOptionsNames:
    """Tests for blacklist/whitelist shapes."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ({"foo": True, "bar": False}, {"foo"}),
            (["foo", "bar"], {"foo", "bar"}),
            ("foo", {"foo"}),
            (None, set()),
        ],
    )
    def test_name_shapes(self, value, expected):
        assert ParserOptions(whitelist=value).whitelist == frozenset(expected)
        assert ParserOptions(blacklist=value).blacklist == frozenset(expected)

    def test_empty_alias_targets_are_dropped(self):
        assert ParserOptions(alias={"foo": "", "bar": "baz"}).alias == {"bar": "baz"}


class TestParserOptionsCustom:
    def test_builtin_field_name(self):
        assert ParserOptions(custom={"bbox": "geojson"}).custom == {"bbox": "geojson"}

    def test_callable(self):
        builder = custom_near("geojson")
        assert ParserOptions(custom={"whatever": builder}).custom["whatever"] is builder

    @pytest.mark.parametrize(
        "custom",
        [{"foo": "bar"}, {"bbox": ""}, {"near": 10}, {"after": None}],
    )
    def test_invalid_entries(self, custom):
        with pytest.raises(ValidationError):
            ParserOptions(custom=custom)


class TestParserOptionsInvalid:
    def test_unknown_key(self):
        with pytest.raises(ValidationError):
            ParserOptions(unknown=True)

    def test_bad_regex(self):
        with pytest.raises(ValidationError):
            ParserOptions(keyRegex="[")

    def test_unknown_string_option(self):
        with pytest.raises(ValidationError):
            ParserOptions(string={"to_date": True})


class TestParsedToken:
    def test_fragment(self):
        token = ParsedToken(operator=">", body="5", value=5.0, filter_key="$gt")
        assert token.fragment == {"$gt": 5.0}

    def test_fragment_with_options(self):
        token = ParsedToken(operator="^", body="foo", value="^foo", filter_key="$regex", options="i")
        assert token.fragment == {"$regex": "^foo", "$options": "i"}

    def test_fragment_is_serialized(self):
        token = ParsedToken(operator="!", body="", value=False, filter_key="$exists")
        assert token.model_dump()["fragment"] == {"$exists": False}

    def test_fragment_is_a_fresh_dict(self):
        token = ParsedToken(operator="", body="a", value="a", filter_key="$eq")
        token.fragment["$eq"] = "b"
        assert token.fragment == {"$eq": "a"}
