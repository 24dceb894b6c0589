"""Type aliases for mongoqs.

This module provides the shapes flowing through the parser: the decoded
request input, the produced filter, custom builder callables and the tagged
union a raw input value is classified into before dispatch.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

# Decoded query string: field name -> single value or list of values
QueryValue = Union[str, List[str]]
QueryInput = Mapping[str, Any]

# Produced filter: field name -> literal value or operator fragment
Filter = Dict[str, Any]
Fragment = Dict[str, Any]

# Custom predicate builder: mutates the filter in place
CustomBuilderFn = Callable[[Filter, Any], None]


@dataclass(frozen=True)
class ScalarValue:
    """A single string value, e.g. from `name=foo`."""

    value: str


@dataclass(frozen=True)
class ListValue:
    """A multi-value field, e.g. from `name[]=foo&name[]=bar`."""

    values: Sequence[Any]


@dataclass(frozen=True)
class OtherValue:
    """Anything else (dict, bool, None, ...). Never contributes to a filter."""

    value: Any


FieldValue = Union[ScalarValue, ListValue, OtherValue]


def field_value(raw: Any) -> FieldValue:
    """Classify a raw input value once at the input boundary."""
    if isinstance(raw, str):
        return ScalarValue(raw)
    if isinstance(raw, (list, tuple)):
        return ListValue(raw)
    return OtherValue(raw)
