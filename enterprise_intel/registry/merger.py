from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from enterprise_intel.linkage.models import NewsItem, Partnership, ResearchRecord
from enterprise_intel.registry.parser import DOMESTIC, GLOBAL, RegistryRow, parse_number

# provenance tags
BOTH = "both"
PROVENANCES = (GLOBAL, DOMESTIC, BOTH)

# global revenues are printed in $M
REVENUE_MULTIPLIER = {GLOBAL: 1_000_000, BOTH: 1_000_000, DOMESTIC: 1}


@dataclass(frozen=True)
class UnifiedEnterprise:
    row: RegistryRow
    provenance: str  # global|domestic|both
    active_partnerships: List[Partnership] = field(default_factory=list)
    research: Optional[ResearchRecord] = None
    news_mentions: List[NewsItem] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.row.name

    @property
    def rank(self) -> int:
        return self.row.rank

    @property
    def key(self) -> Tuple[int, str]:
        # ranks from the two registries overlap; never address by rank alone
        return (self.row.rank, self.provenance)


def revenue_value(enterprise: UnifiedEnterprise) -> float:
    return parse_number(enterprise.row.revenue) * REVENUE_MULTIPLIER[enterprise.provenance]


def unify_registries(global_rows: Iterable[RegistryRow], domestic_rows: Iterable[RegistryRow]) -> List[UnifiedEnterprise]:
    """Unify both registries into one list keyed by canonical name, in merge order.

    - A global row whose name also appears in the domestic registry takes
      industry, ceo, website and HQ from it and is tagged "both".
    - Other global rows are tagged "global".
    - Domestic rows not consumed above are appended as "domestic" and keep
      their domestic rank.
    Global rows come first in global order, then the remaining domestic rows.
    Name matching scans this order.
    """
    domestic_list = list(domestic_rows)
    by_name: Dict[str, RegistryRow] = {}
    for d in domestic_list:
        by_name.setdefault(d.name, d)

    unified: List[UnifiedEnterprise] = []
    covered = set()
    for g in global_rows:
        match = by_name.get(g.name)
        if match is not None:
            row = replace(g, industry=match.industry, ceo=match.ceo, website=match.website, hq_location=match.hq_location)
            unified.append(UnifiedEnterprise(row=row, provenance=BOTH))
        else:
            unified.append(UnifiedEnterprise(row=g, provenance=GLOBAL))
        covered.add(g.name)

    for d in domestic_list:
        if d.name in covered:
            continue
        covered.add(d.name)
        unified.append(UnifiedEnterprise(row=d, provenance=DOMESTIC))
    return unified


def by_revenue(unified: Iterable[UnifiedEnterprise]) -> List[UnifiedEnterprise]:
    """Highest revenue first, normalized to dollars. Ties keep merge order."""
    return sorted(unified, key=revenue_value, reverse=True)


def merge_registries(global_rows: Iterable[RegistryRow], domestic_rows: Iterable[RegistryRow]) -> List[UnifiedEnterprise]:
    """The unified registry as published: `unify_registries` sorted by revenue."""
    return by_revenue(unify_registries(global_rows, domestic_rows))
