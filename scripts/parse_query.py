"""Print the MongoDB filter produced for a URL query string.

Usage examples:
    python scripts/parse_query.py "name=^Vatn&visits[]=>40&visits[]=<10000"
    python scripts/parse_query.py "near=6.13037,61.00607,7000" --custom near=geojson
    python scripts/parse_query.py "foo=bar&bar=foo" --whitelist foo --alias foo=navn
"""

from __future__ import annotations

import argparse
import json

from dotenv import load_dotenv

from mongoqs import MongoQS
from mongoqs.exceptions import InvalidConfigError


def _pairs(values: list[str], option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values:
        name, sep, target = item.partition("=")
        if not sep or not name or not target:
            raise InvalidConfigError(f"--{option} expects name=value", value=item)
        pairs[name] = target
    return pairs


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile a URL query string into a MongoDB filter")
    parser.add_argument("query", help="URL query string, e.g. 'name=foo&age=>18'")
    parser.add_argument("--alias", action="append", default=[], metavar="NAME=FIELD", help="Rename a field")
    parser.add_argument("--blacklist", action="append", default=[], metavar="NAME", help="Always drop a field")
    parser.add_argument("--whitelist", action="append", default=[], metavar="NAME", help="Only keep listed fields")
    parser.add_argument(
        "--custom",
        action="append",
        default=[],
        metavar="BUILDER=FIELD",
        help="Enable a built-in builder (bbox, near, after, before, between) writing to FIELD",
    )
    parser.add_argument("--no-to-boolean", action="store_true", help="Keep 'true'/'false' as strings")
    parser.add_argument("--no-to-number", action="store_true", help="Keep numerals as strings")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    return parser.parse_args(argv)


def build_parser(args: argparse.Namespace) -> MongoQS:
    string: dict[str, bool] = {}
    if args.no_to_boolean:
        string["to_boolean"] = False
    if args.no_to_number:
        string["to_number"] = False
    return MongoQS(
        alias=_pairs(args.alias, "alias"),
        blacklist=args.blacklist,
        whitelist=args.whitelist,
        custom=_pairs(args.custom, "custom"),
        string=string,
    )


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    try:
        qs = build_parser(args)
    except InvalidConfigError as e:
        print("Configuration error:", e)
        return 2
    print(json.dumps(qs.parse_query_string(args.query), indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
