"""Operator token grammar.

A raw token is a single query string value, optionally prefixed by a sigil:

    =========  =====================================  ==========================
    token      filter fragment                        notes
    =========  =====================================  ==========================
    ``!foo``   ``{"$ne": "foo"}``                     ``$nin`` in array context
    ``!``      ``{"$exists": False}``
    ``>5``     ``{"$gt": 5.0}``                       ``>=5`` gives ``$gte``
    ``<5``     ``{"$lt": 5.0}``                       ``<=5`` gives ``$lte``
    ``^foo``   ``{"$regex": "^foo", "$options": "i"}``
    ``$foo``   ``{"$regex": "foo$", "$options": "i"}``
    ``~foo``   ``{"$regex": "foo", "$options": "i"}``
    ``foo``    ``{"$eq": "foo"}``                     ``$in`` in array context
    ``""``     ``{"$exists": True}``
    =========  =====================================  ==========================

Parsing never fails: tokens without a recognized sigil are equality tokens.
"""

from typing import Optional, Pattern

from .constants import DEFAULT_VAL_REGEX, REGEX_OPTIONS, FilterOp, Sigil
from .schema import ParsedToken
from .values import parse_string_val

_REGEX_SIGILS = (Sigil.STARTS_WITH, Sigil.ENDS_WITH, Sigil.CONTAINS)


def sanitize_pattern(body: str, val_regex: Optional[Pattern[str]] = None) -> str:
    """Strip every character matched by `val_regex` from a regex body."""
    return (val_regex or DEFAULT_VAL_REGEX).sub("", body)


def parse_string(
    string: str,
    array: bool = False,
    to_boolean: bool = True,
    to_number: bool = True,
    val_regex: Optional[Pattern[str]] = None,
) -> ParsedToken:
    """Parse one raw token into a `ParsedToken`.

    Args:
        string: Raw token, e.g. "!10", ">=5", "^foo"
        array: Whether the token is one element of a multi-value field
        to_boolean: Coerce "true"/"false" bodies to booleans
        to_number: Coerce numeral bodies to floats
        val_regex: Pattern of characters removed from regex bodies

    Returns:
        ParsedToken whose `fragment` is ready to be used as a field filter
    """
    op = string[:1]
    inclusive = string[1:2] == Sigil.INCLUSIVE
    body = string[2:] if inclusive else string[1:]
    value = parse_string_val(body, to_boolean, to_number)

    if op == Sigil.NOT:
        if array:
            return ParsedToken(operator=op, body=body, value=value, filter_key=FilterOp.NIN)
        if body == "":
            return ParsedToken(operator=op, body=body, value=False, filter_key=FilterOp.EXISTS)
        return ParsedToken(operator=op, body=body, value=value, filter_key=FilterOp.NE)

    if op == Sigil.GREATER:
        key = FilterOp.GTE if inclusive else FilterOp.GT
        return ParsedToken(operator=op, body=body, value=value, filter_key=key)

    if op == Sigil.LESS:
        key = FilterOp.LTE if inclusive else FilterOp.LT
        return ParsedToken(operator=op, body=body, value=value, filter_key=key)

    if op in _REGEX_SIGILS:
        pattern = sanitize_pattern(body, val_regex)
        if op == Sigil.STARTS_WITH:
            pattern = f"^{pattern}"
        elif op == Sigil.ENDS_WITH:
            pattern = f"{pattern}$"
        return ParsedToken(
            operator=op, body=body, value=pattern, filter_key=FilterOp.REGEX, options=REGEX_OPTIONS
        )

    # No sigil: the whole token is a plain value
    value = parse_string_val(string, to_boolean, to_number)
    if array:
        return ParsedToken(operator="", body=string, value=value, filter_key=FilterOp.IN)
    if string == "":
        return ParsedToken(operator="", body=string, value=True, filter_key=FilterOp.EXISTS)
    return ParsedToken(operator="", body=string, value=value, filter_key=FilterOp.EQ)
