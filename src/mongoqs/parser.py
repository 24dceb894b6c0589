"""
Query string to MongoDB filter parser.

This module provides `MongoQS`, which turns a decoded URL query string (a
flat mapping of field names to a string or a list of strings) into a filter
document for a MongoDB-style query API. Options are fixed when the parser is
built; every `parse` call is independent and returns a fresh filter.
"""

from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .builders import (
    BuilderKind,
    CustomBuilder,
    custom_after,
    custom_bbox,
    custom_before,
    custom_between,
    custom_near,
)
from .constants import ARRAY_KEY_SUFFIX, FilterOp, Sigil
from .exceptions import InvalidConfigError
from .logger import Logger
from .operators import parse_string
from .querystring import decode
from .rules import FieldAction, FieldRules
from .schema import ParsedToken, ParserOptions
from .types import CustomBuilderFn, Filter, Fragment, ListValue, QueryInput, ScalarValue, field_value
from .values import Value, parse_string_val


class MongoQS:
    """Compile request query parameters into a MongoDB filter.

    Each input field is matched against the configured allow/deny lists and
    key patterns, renamed by `alias`, then either handed to a custom builder
    or parsed with the operator grammar (see `mongoqs.operators`). Fields
    that are not allowed or cannot be understood are dropped silently.

    Attributes:
        options: Validated, immutable parser options

    Examples:
        >>> qs = MongoQS(custom={"bbox": "geojson", "near": "geojson"})
        >>> qs.parse({"name": "^Vatn", "near": "6.13037,61.00607,7000"})
        {'name': {'$regex': '^Vatn', '$options': 'i'}, 'geojson': {'$near': {...}}}
        >>> MongoQS().parse({"visits": [">40", "<10000"]})
        {'visits': {'$gt': 40.0, '$lt': 10000.0}}
    """

    def __init__(self, options: Union[ParserOptions, Mapping[str, Any], None] = None, **kwargs: Any) -> None:
        """Initialize the parser.

        Args:
            options: ParserOptions instance or a dict of options
            **kwargs: Options given as keywords; merged over a dict `options`

        Raises:
            InvalidConfigError: If the options do not validate
        """
        self.options = self._load_options(options, kwargs)
        self.logger = Logger(self.__class__.__name__)

        self.custom: Dict[str, CustomBuilderFn] = {
            name: self._bind_builder(name, entry) for name, entry in self.options.custom.items()
        }
        self.rules = FieldRules(
            alias=self.options.alias,
            blacklist=self.options.blacklist,
            whitelist=self.options.whitelist,
            custom=self.custom,
        )
        self.logger.message(
            "MongoQS initialized: operators=%s rules=%d custom=%s",
            "".join(op for op in self.options.operators if len(op) == 1),
            len(self.rules),
            sorted(self.custom),
        )

    @staticmethod
    def _load_options(options: Union[ParserOptions, Mapping[str, Any], None], kwargs: Dict[str, Any]) -> ParserOptions:
        if isinstance(options, ParserOptions):
            if kwargs:
                raise InvalidConfigError(
                    "Pass either a ParserOptions instance or keyword options", options=sorted(kwargs)
                )
            return options
        data: Dict[str, Any] = dict(options or {})
        data.update(kwargs)
        try:
            return ParserOptions.model_validate(data)
        except ValidationError as e:
            raise InvalidConfigError(
                "Invalid parser options",
                errors=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
            ) from e

    def _bind_builder(self, name: str, entry: Any) -> CustomBuilderFn:
        # Built-in names given an output field name become bound builders
        if isinstance(entry, str):
            return CustomBuilder(BuilderKind(name), entry)
        return entry

    # -------------------
    # Properties
    # -------------------

    @property
    def operators(self) -> Tuple[str, ...]:
        return self.options.operators

    @property
    def to_boolean(self) -> bool:
        return self.options.string.to_boolean

    @property
    def to_number(self) -> bool:
        return self.options.string.to_number

    # -------------------
    # Builder factories
    # -------------------

    custom_bbox = staticmethod(custom_bbox)
    custom_near = staticmethod(custom_near)
    custom_after = staticmethod(custom_after)
    custom_before = staticmethod(custom_before)
    custom_between = staticmethod(custom_between)

    # -------------------
    # Token parsing
    # -------------------

    def parse_string_val(self, string: str) -> Value:
        """Coerce one operator-stripped token per the `string` options."""
        return parse_string_val(string, self.to_boolean, self.to_number)

    def parse_string(self, string: str, array: bool = False) -> ParsedToken:
        """Parse one raw token with the operator grammar."""
        return parse_string(
            string,
            array=array,
            to_boolean=self.to_boolean,
            to_number=self.to_number,
            val_regex=self.options.val_regex,
        )

    def _has_operator(self, string: str) -> bool:
        return string[:1] != "" and string[:1] in self.operators

    # -------------------
    # Field dispatch
    # -------------------

    def parse(self, query: QueryInput) -> Filter:
        """Build a filter from a decoded query string mapping.

        Args:
            query: Mapping of field name -> string or list of strings

        Returns:
            Filter document; dropped fields have no key
        """
        result: Filter = {}

        for name, raw in query.items():
            value = field_value(raw)
            key = name
            if isinstance(value, ListValue) and key.endswith(ARRAY_KEY_SUFFIX):
                key = key[: -len(ARRAY_KEY_SUFFIX)]

            rule = self.rules.resolve(key)
            if rule.action == FieldAction.DENIED:
                self.logger.debug("Dropping field %r: %s", name, rule.reason)
                continue
            key = rule.target

            if isinstance(value, ScalarValue):
                if not self.options.key_regex.search(key):
                    self.logger.debug("Dropping field %r: invalid key", name)
                    continue
            elif isinstance(value, ListValue):
                if not self.options.arr_regex.search(key):
                    self.logger.debug("Dropping field %r: invalid key", name)
                    continue

            if rule.action == FieldAction.CUSTOM:
                rule.builder(result, raw)
                continue

            if isinstance(value, ListValue):
                fragment = self._parse_list(value)
                if fragment is None:
                    self.logger.debug("Dropping field %r: empty or unsupported array", name)
                    continue
                result[key] = fragment
            elif isinstance(value, ScalarValue):
                result[key] = self._parse_scalar(value.value)
            else:
                self.logger.debug("Dropping field %r: unsupported value %s", name, type(raw).__name__)

        return result

    def _parse_scalar(self, string: str) -> Any:
        if string == "":
            return {FilterOp.EXISTS: True}
        if self._has_operator(string):
            return self.parse_string(string).fragment
        # Bare equality keeps the value itself rather than {"$eq": value}
        return self.parse_string_val(string)

    def _parse_list(self, value: ListValue) -> Optional[Fragment]:
        if Sigil.IN not in self.operators or not value.values:
            return None

        fragment: Fragment = {}
        for item in value.values:
            if not isinstance(item, str):
                continue
            if not self._has_operator(item):
                fragment.setdefault(FilterOp.IN, []).append(self.parse_string_val(item))
                continue

            token = self.parse_string(item, array=True)
            if token.filter_key in (FilterOp.IN, FilterOp.NIN):
                fragment.setdefault(token.filter_key, []).append(token.value)
            else:
                # A repeated operator overwrites the earlier one: ">1&>2" keeps $gt 2
                fragment.update(token.fragment)
        return fragment or None

    def parse_query_string(self, query_string: str) -> Filter:
        """Decode a raw URL query string and parse it."""
        return self.parse(decode(query_string))
