"""Custom predicate builders.

A builder is bound to an output field name when the parser is configured and
later called with the filter being built and the raw request value:

    >>> builder = custom_bbox("geojson")
    >>> query = {}
    >>> builder(query, "0,1,2,3")
    >>> query["geojson"]["$geoWithin"]["$geometry"]["type"]
    'Polygon'

Builders never raise. Input they cannot understand (wrong arity, non-numeral
coordinates, invalid dates, list values) leaves the filter untouched.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .constants import FilterOp
from .values import is_numeral

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Integer timestamp, with an ignored fractional part
_TIMESTAMP_RE = re.compile(r"^([+-]?\d+)(\.\d*)?\Z", re.ASCII)

# Length of a timestamp in whole seconds ("1411386637")
_SECONDS_TIMESTAMP_LEN = 10


class BuilderKind(str, Enum):
    """Built-in builders, named after the request field that triggers them."""

    BBOX = "bbox"
    NEAR = "near"
    AFTER = "after"
    BEFORE = "before"
    BETWEEN = "between"


# ==========================================================================
# Geometry
# ==========================================================================


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle given as `minLon,minLat,maxLon,maxLat`."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_string(cls, raw: Any) -> Optional["BoundingBox"]:
        """Return a BoundingBox, or None unless `raw` holds exactly 4 numerals."""
        if not isinstance(raw, str):
            return None
        parts = raw.split(",")
        if len(parts) != 4 or not all(is_numeral(p) for p in parts):
            return None
        return cls(*(float(p) for p in parts))

    def to_filter(self) -> Dict[str, Any]:
        """Closed polygon ring winding min -> max -> min."""
        return {
            FilterOp.GEO_WITHIN: {
                FilterOp.GEOMETRY: {
                    "type": "Polygon",
                    "coordinates": [
                        [
                            [self.min_lon, self.min_lat],
                            [self.max_lon, self.min_lat],
                            [self.max_lon, self.max_lat],
                            [self.min_lon, self.max_lat],
                            [self.min_lon, self.min_lat],
                        ]
                    ],
                }
            }
        }


@dataclass(frozen=True)
class NearPoint:
    """Point with optional distance bounds, given as `lon,lat[,max[,min]]`."""

    lon: float
    lat: float
    max_distance: Optional[float] = None
    min_distance: Optional[float] = None

    @classmethod
    def from_string(cls, raw: Any) -> Optional["NearPoint"]:
        """Return a NearPoint, or None unless `raw` starts with two numerals.

        Distances are kept only when they are numerals; a minimum distance is
        only kept together with a maximum distance.
        """
        if not isinstance(raw, str):
            return None
        parts = raw.split(",")
        if len(parts) < 2 or not (is_numeral(parts[0]) and is_numeral(parts[1])):
            return None

        max_distance = min_distance = None
        if len(parts) > 2 and is_numeral(parts[2]):
            max_distance = float(parts[2])
            if len(parts) > 3 and is_numeral(parts[3]):
                min_distance = float(parts[3])
        return cls(float(parts[0]), float(parts[1]), max_distance, min_distance)

    def to_filter(self) -> Dict[str, Any]:
        near: Dict[str, Any] = {
            FilterOp.GEOMETRY: {
                "type": "Point",
                "coordinates": [self.lon, self.lat],
            }
        }
        if self.max_distance is not None:
            near[FilterOp.MAX_DISTANCE] = self.max_distance
            if self.min_distance is not None:
                near[FilterOp.MIN_DISTANCE] = self.min_distance
        return {FilterOp.NEAR: near}


# ==========================================================================
# Dates
# ==========================================================================


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 string or a numeric timestamp into a UTC datetime.

    Supported formats:
    - timestamp in seconds, exactly 10 characters before stripping: "1411386637"
    - timestamp in milliseconds: "1411386637843"
    - ISO 8601: "2014-09-22T11:50:37.843Z", "2014-01-01", "2014-01-01T10:00:00+02:00"

    Naive ISO values are taken as UTC.

    Returns:
        timezone-aware datetime, or None when `value` is not a valid date
    """
    if not isinstance(value, str):
        return None
    text = value.strip()

    if _TIMESTAMP_RE.match(text):
        if len(value) == _SECONDS_TIMESTAMP_LEN:
            text = f"{text}000"
        millis = int(_TIMESTAMP_RE.match(text).group(1))
        try:
            return EPOCH + timedelta(milliseconds=millis)
        except OverflowError:
            return None

    try:
        date = datetime.fromisoformat(text)
    except ValueError:
        return None
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    try:
        return date.astimezone(timezone.utc)
    except OverflowError:
        return None


def format_date(date: datetime) -> str:
    """Format as UTC ISO 8601 with milliseconds: "2014-09-22T11:50:37.843Z"."""
    return date.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ==========================================================================
# Builders
# ==========================================================================


def _apply_bbox(field: str, query: Dict[str, Any], raw: Any) -> None:
    box = BoundingBox.from_string(raw)
    if box is not None:
        query[field] = box.to_filter()


def _apply_near(field: str, query: Dict[str, Any], raw: Any) -> None:
    point = NearPoint.from_string(raw)
    if point is not None:
        query[field] = point.to_filter()


def _apply_after(field: str, query: Dict[str, Any], raw: Any) -> None:
    date = parse_date(raw)
    if date is not None:
        query[field] = {FilterOp.GTE: format_date(date)}


def _apply_before(field: str, query: Dict[str, Any], raw: Any) -> None:
    date = parse_date(raw)
    if date is not None:
        query[field] = {FilterOp.LT: format_date(date)}


def _apply_between(field: str, query: Dict[str, Any], raw: Any) -> None:
    if not isinstance(raw, str):
        return
    parts: List[str] = raw.split("|")
    if len(parts) < 2:
        return
    after = parse_date(parts[0])
    before = parse_date(parts[1])
    if after is not None and before is not None:
        query[field] = {
            FilterOp.GTE: format_date(after),
            FilterOp.LT: format_date(before),
        }


_BUILDERS: Dict[BuilderKind, Callable[[str, Dict[str, Any], Any], None]] = {
    BuilderKind.BBOX: _apply_bbox,
    BuilderKind.NEAR: _apply_near,
    BuilderKind.AFTER: _apply_after,
    BuilderKind.BEFORE: _apply_before,
    BuilderKind.BETWEEN: _apply_between,
}


def apply_custom_builder(kind: BuilderKind, field: str, query: Dict[str, Any], raw: Any) -> None:
    """Run the built-in builder `kind` for output `field`."""
    _BUILDERS[kind](field, query, raw)


@dataclass(frozen=True)
class CustomBuilder:
    """Built-in builder bound to an output field name.

    Instances are callables with the same `(query, value)` signature as
    user-supplied custom builders.
    """

    kind: BuilderKind
    field: str

    def __call__(self, query: Dict[str, Any], value: Any) -> None:
        apply_custom_builder(self.kind, self.field, query, value)


def custom_bbox(field: str) -> CustomBuilder:
    """`$geoWithin` polygon builder for `minLon,minLat,maxLon,maxLat`."""
    return CustomBuilder(BuilderKind.BBOX, field)


def custom_near(field: str) -> CustomBuilder:
    """`$near` point builder for `lon,lat[,maxDistance[,minDistance]]`."""
    return CustomBuilder(BuilderKind.NEAR, field)


def custom_after(field: str) -> CustomBuilder:
    """`$gte` date builder."""
    return CustomBuilder(BuilderKind.AFTER, field)


def custom_before(field: str) -> CustomBuilder:
    """`$lt` date builder."""
    return CustomBuilder(BuilderKind.BEFORE, field)


def custom_between(field: str) -> CustomBuilder:
    """`$gte` + `$lt` date builder for `after|before`; both halves must be valid."""
    return CustomBuilder(BuilderKind.BETWEEN, field)
