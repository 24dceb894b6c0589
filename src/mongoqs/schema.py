"""Pydantic schemas for parser options and parsed operator tokens."""

from typing import Any, Dict, FrozenSet, Optional, Pattern, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .builders import BuilderKind
from .constants import DEFAULT_ARR_REGEX, DEFAULT_KEY_REGEX, DEFAULT_OPERATORS, DEFAULT_VAL_REGEX
from .settings import settings


class StringOptions(BaseModel):
    """Value coercion toggles. Defaults come from settings."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    to_boolean: bool = Field(
        default_factory=lambda: settings.STRING_TO_BOOLEAN,
        alias="toBoolean",
        description='Turn "true"/"false" (any case) into booleans.',
    )
    to_number: bool = Field(
        default_factory=lambda: settings.STRING_TO_NUMBER,
        alias="toNumber",
        description="Turn numeral strings into floats.",
    )


class ParserOptions(BaseModel):
    """Options a `MongoQS` parser is built from.

    Every option is optional. Both snake_case names and the camelCase names
    used by query-string parsers in other ecosystems (`ops`, `keyRegex`,
    `valRegex`, `arrRegex`) are accepted.

    Examples:
        ParserOptions(alias={"foo": "bar"}, blacklist={"password": True})
        ParserOptions(whitelist=["name", "age"], string={"to_number": False})
        ParserOptions(custom={"bbox": "geojson", "near": "geojson"})
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    operators: Tuple[str, ...] = Field(
        DEFAULT_OPERATORS, alias="ops", description="Recognized operator sigils, plus '$in' for arrays."
    )
    alias: Dict[str, str] = Field(default_factory=dict, description="Input field name -> output field name.")
    blacklist: FrozenSet[str] = Field(default_factory=frozenset, description="Field names always dropped.")
    whitelist: FrozenSet[str] = Field(
        default_factory=frozenset, description="When non-empty, the only field names processed."
    )
    custom: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field name -> builder callable, or output field name for a built-in builder.",
    )
    string: StringOptions = Field(default_factory=StringOptions)
    key_regex: Pattern[str] = Field(DEFAULT_KEY_REGEX, alias="keyRegex")
    val_regex: Pattern[str] = Field(DEFAULT_VAL_REGEX, alias="valRegex")
    arr_regex: Pattern[str] = Field(DEFAULT_ARR_REGEX, alias="arrRegex")

    @field_validator("operators", mode="before")
    @classmethod
    def _single_operator(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("alias", mode="after")
    @classmethod
    def _drop_empty_alias(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {k: v for k, v in value.items() if v}

    @field_validator("blacklist", "whitelist", mode="before")
    @classmethod
    def _names(cls, value: Any) -> Any:
        # {"foo": True, "bar": False} only lists "foo"
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset([value])
        if isinstance(value, dict):
            return frozenset(k for k, flag in value.items() if flag)
        return value

    @field_validator("custom", mode="after")
    @classmethod
    def _check_custom(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        builtin = {kind.value for kind in BuilderKind}
        for name, entry in value.items():
            if callable(entry):
                continue
            if name in builtin and isinstance(entry, str) and entry:
                continue
            if name in builtin:
                raise ValueError(f"custom '{name}' must be an output field name or a callable")
            raise ValueError(
                f"custom '{name}' must be a callable; output field names only apply to "
                f"built-in builders ({', '.join(sorted(builtin))})"
            )
        return value


class ParsedToken(BaseModel):
    """One raw token parsed by the operator grammar.

    Attributes:
        operator: Recognized sigil ("!", ">", "<", "^", "$", "~") or "" when none
        body: Token with the sigil (and a following "=") stripped; the whole
            token when no sigil was recognized
        value: Coerced value, anchored pattern for $regex, or bool for $exists
        filter_key: Filter operator tag, e.g. "$gte", "$nin", "$exists"
        options: "$options" value for $regex tokens
    """

    model_config = ConfigDict(frozen=True)

    operator: str
    body: str
    value: Any
    filter_key: str
    options: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fragment(self) -> Dict[str, Any]:
        """Filter fragment for a single field, e.g. `{"$gt": 5.0}`."""
        parsed: Dict[str, Any] = {self.filter_key: self.value}
        if self.options:
            parsed["$options"] = self.options
        return parsed
