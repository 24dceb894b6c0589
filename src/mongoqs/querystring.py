"""Query string decoding.

Produces the flat `field -> str | list[str]` mapping `MongoQS.parse` expects
from a raw URL query string. A field becomes a list when its name ends in
"[]" or when it is repeated.
"""

from typing import Dict, List, Union
from urllib.parse import parse_qsl

from .constants import ARRAY_KEY_SUFFIX


def decode(query_string: str) -> Dict[str, Union[str, List[str]]]:
    """Decode `query_string` keeping blank values.

    Examples:
        >>> decode("foo=bar&baz=")
        {'foo': 'bar', 'baz': ''}
        >>> decode("foo[]=10&foo[]=!bar")
        {'foo[]': ['10', '!bar']}
        >>> decode("visits=>40&visits=<10000")
        {'visits': ['>40', '<10000']}
    """
    grouped: Dict[str, List[str]] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        grouped.setdefault(key, []).append(value)

    decoded: Dict[str, Union[str, List[str]]] = {}
    for key, values in grouped.items():
        if key.endswith(ARRAY_KEY_SUFFIX) or len(values) > 1:
            decoded[key] = values
        else:
            decoded[key] = values[0]
    return decoded
