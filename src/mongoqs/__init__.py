"""
mongoqs turns URL query string parameters into MongoDB filter documents.

Exposes the `MongoQS` parser, its options schema and the built-in custom
builder factories.
"""

from .builders import BuilderKind, CustomBuilder, custom_after, custom_bbox, custom_before, custom_between, custom_near
from .exceptions import ConfigurationError, InvalidConfigError, MongoQSError
from .parser import MongoQS
from .querystring import decode
from .schema import ParsedToken, ParserOptions, StringOptions

__version__ = "0.1.0"

__all__ = [
    "MongoQS",
    "ParserOptions",
    "StringOptions",
    "ParsedToken",
    "BuilderKind",
    "CustomBuilder",
    "custom_bbox",
    "custom_near",
    "custom_after",
    "custom_before",
    "custom_between",
    "decode",
    "MongoQSError",
    "ConfigurationError",
    "InvalidConfigError",
]
