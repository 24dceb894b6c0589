"""Per-field dispatch rules.

The allow/deny lists, aliases and custom builders a parser is configured with
are folded once into a table mapping each input field name to a single rule.
Field names that appear in none of them share a default rule.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional

from .types import CustomBuilderFn


class FieldAction(str, Enum):
    CUSTOM = "custom"  # run a custom builder for `target`
    ALIAS = "alias"  # generic parsing, output under `target`
    DENIED = "denied"  # drop the field
    DEFAULT = "default"  # generic parsing, output under the input name


@dataclass(frozen=True)
class FieldRule:
    action: FieldAction
    target: str = ""
    builder: Optional[CustomBuilderFn] = None
    reason: str = ""


class FieldRules:
    """Lookup table from input field name to `FieldRule`.

    Resolution order for a field name:
    1. not in a non-empty whitelist -> denied
    2. in the blacklist -> denied
    3. alias applied; everything below uses the aliased name
    4. custom builder registered for the (aliased) name -> custom
    """

    def __init__(
        self,
        alias: Mapping[str, str],
        blacklist: FrozenSet[str],
        whitelist: FrozenSet[str],
        custom: Mapping[str, CustomBuilderFn],
    ) -> None:
        self._alias = dict(alias)
        self._blacklist = blacklist
        self._whitelist = whitelist
        self._custom = dict(custom)

        names = set(self._alias) | set(blacklist) | set(whitelist) | set(self._custom)
        self._rules: Dict[str, FieldRule] = {name: self._build(name) for name in names}
        self._default_denied = FieldRule(FieldAction.DENIED, reason="not whitelisted") if whitelist else None

    def _build(self, name: str) -> FieldRule:
        if self._whitelist and name not in self._whitelist:
            return FieldRule(FieldAction.DENIED, reason="not whitelisted")
        if name in self._blacklist:
            return FieldRule(FieldAction.DENIED, reason="blacklisted")

        target = self._alias.get(name, name)
        builder = self._custom.get(target)
        if builder is not None:
            return FieldRule(FieldAction.CUSTOM, target=target, builder=builder)
        if target != name:
            return FieldRule(FieldAction.ALIAS, target=target)
        return FieldRule(FieldAction.DEFAULT, target=name)

    def resolve(self, name: str) -> FieldRule:
        rule = self._rules.get(name)
        if rule is not None:
            return rule
        if self._default_denied is not None:
            return self._default_denied
        return FieldRule(FieldAction.DEFAULT, target=name)

    def __len__(self) -> int:
        return len(self._rules)
