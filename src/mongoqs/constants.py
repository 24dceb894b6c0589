"""
Operator sigils, filter operator tags and default key/value patterns.
"""

import re


class Sigil:
    NOT = "!"
    STARTS_WITH = "^"
    ENDS_WITH = "$"
    CONTAINS = "~"
    GREATER = ">"
    LESS = "<"
    IN = "$in"

    # Second character turning > and < into their inclusive form
    INCLUSIVE = "="


class FilterOp:
    EQ = "$eq"
    NE = "$ne"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    IN = "$in"
    NIN = "$nin"
    EXISTS = "$exists"
    REGEX = "$regex"
    OPTIONS = "$options"
    GEO_WITHIN = "$geoWithin"
    GEOMETRY = "$geometry"
    NEAR = "$near"
    MAX_DISTANCE = "$maxDistance"
    MIN_DISTANCE = "$minDistance"


DEFAULT_OPERATORS = (
    Sigil.NOT,
    Sigil.STARTS_WITH,
    Sigil.ENDS_WITH,
    Sigil.CONTAINS,
    Sigil.GREATER,
    Sigil.LESS,
    Sigil.IN,
)

# Options attached to every $regex produced by ^, $ and ~
REGEX_OPTIONS = "i"

# Letters (incl. æ, ø, å), digits, "-", "_" and "."
DEFAULT_KEY_REGEX = re.compile(r"^[a-zæøå0-9_.-]+\Z", re.IGNORECASE)
# Same charset, optionally suffixed by a literal "[]"
DEFAULT_ARR_REGEX = re.compile(r"^[a-zæøå0-9_.-]+(\[\])?\Z", re.IGNORECASE)
# Characters stripped from regex operator bodies
DEFAULT_VAL_REGEX = re.compile(r"[^a-zæøå0-9_.* -]", re.IGNORECASE)

ARRAY_KEY_SUFFIX = "[]"
