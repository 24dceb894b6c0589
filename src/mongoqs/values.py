"""String value coercion.

Turns one raw, operator-stripped query string token into a boolean, a number
or leaves it as the original string.
"""

import math
import re
from typing import Union

# Optionally signed, optionally whitespace wrapped integer or decimal numeral
# with an optional exponent. The whole string must match. ASCII digits only.
NUMERAL_RE = re.compile(r"^\s*[+-]?\d+(\.\d*)?([eE][+-]?\d+)?\s*\Z", re.ASCII)

Value = Union[bool, float, str]


def is_numeral(string: str) -> bool:
    """Return True when the whole string is a decimal numeral with a finite value.

    "1e400" overflows to infinity and is not a numeral.
    """
    return NUMERAL_RE.match(string) is not None and math.isfinite(float(string))


def parse_string_val(string: str, to_boolean: bool = True, to_number: bool = True) -> Value:
    """Coerce a raw token, first match wins.

    - "true" / "false" in any letter case become booleans (when `to_boolean`)
    - numerals such as "10", " -000100.0099 " become floats (when `to_number`)
    - anything else, including "", "123abc", " + " and "1e400", is returned unchanged

    Examples:
        >>> parse_string_val("TrUe")
        True
        >>> parse_string_val("+000100.0099")
        100.0099
        >>> parse_string_val("123abc")
        '123abc'
    """
    if to_boolean:
        lowered = string.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    if to_number and is_numeral(string):
        return float(string)
    return string
