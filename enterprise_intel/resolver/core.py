from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from enterprise_intel.resolver.aliases import AliasResolver, EMPTY_ALIASES


@dataclass(frozen=True)
class Match:
    name: str  # canonical registry name
    reason: str  # exact|alias|containment


class NameMatcher:
    """Resolve free-text names onto a fixed list of canonical names.

    Order is strict and first success wins:
    - alias table lookup (exact, case-sensitive) rewrites the target
    - exact equality against the registry names => "exact" / "alias"
    - first registry name, in registry order, that contains the target or is
      contained by it => "containment"

    The containment pass is order-dependent and not scored. "JP Morgan" does
    not reach "JPMorgan Chase" without an alias entry. An empty target
    matches nothing, although it is contained in every registry name.
    """

    def __init__(self, registry_names: Iterable[str], aliases: AliasResolver = EMPTY_ALIASES):
        self._names: Tuple[str, ...] = tuple(registry_names)
        self._index = frozenset(self._names)
        self._aliases = aliases

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def match(self, target: str) -> Optional[Match]:
        if not target:
            return None
        resolved = self._aliases.resolve(target)
        if resolved in self._index:
            return Match(resolved, "alias" if resolved != target else "exact")
        if not resolved:
            return None
        for candidate in self._names:
            if candidate in resolved or resolved in candidate:
                return Match(candidate, "containment")
        return None


def match_name(target: str, registry_names: Iterable[str], aliases: AliasResolver = EMPTY_ALIASES) -> Optional[Match]:
    return NameMatcher(registry_names, aliases).match(target)
