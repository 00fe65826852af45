from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from enterprise_intel.directory.models import DirectoryCompany
from enterprise_intel.linkage.activity import classify, news_mentions
from enterprise_intel.linkage.models import NewsItem, ResearchRecord, Status, lookup_research
from enterprise_intel.linkage.partnerships import link_partnerships
from enterprise_intel.registry.merger import UnifiedEnterprise, by_revenue, unify_registries
from enterprise_intel.registry.parser import RegistryRow
from enterprise_intel.resolver.aliases import AliasResolver, EMPTY_ALIASES


def build_enterprise_view(
    global_rows: Iterable[RegistryRow],
    domestic_rows: Iterable[RegistryRow],
    companies: Iterable[DirectoryCompany],
    research: Mapping[str, ResearchRecord],
    news: Sequence[NewsItem],
    aliases: AliasResolver = EMPTY_ALIASES,
) -> List[UnifiedEnterprise]:
    """Unified registry with partnerships, research and news attached.

    Always a full recompute from the inputs; nothing here is incremental.
    Partners are matched against the registry in merge order, and the result
    is returned sorted by revenue.
    """
    merged = unify_registries(global_rows, domestic_rows)
    links = link_partnerships(companies, [e.name for e in merged], aliases)
    records = dict(research)
    out: List[UnifiedEnterprise] = []
    for e in by_revenue(merged):
        out.append(replace(
            e,
            active_partnerships=links.get(e.name, []),
            research=lookup_research(records, e.name, e.rank),
            news_mentions=news_mentions(news, e.name),
        ))
    return out


def find_enterprise(view: Sequence[UnifiedEnterprise], name: str) -> Optional[UnifiedEnterprise]:
    for e in view:
        if e.name == name:
            return e
    lowered = name.strip().lower()
    for e in view:
        if e.name.lower() == lowered:
            return e
    return None


def filter_enterprises(
    view: Iterable[UnifiedEnterprise],
    search: str = "",
    status: Optional[str] = None,
) -> List[UnifiedEnterprise]:
    """Case-insensitive name/industry search plus an optional status filter."""
    if status and status not in {s.value for s in Status}:
        raise ValueError(f"status must be one of {', '.join(s.value for s in Status)}")
    term = search.strip().lower()
    out = []
    for e in view:
        if term and term not in e.name.lower() and term not in (e.row.industry or "").lower():
            continue
        if status and classify(e).value != status:
            continue
        out.append(e)
    return out


def coverage_stats(view: Iterable[UnifiedEnterprise]) -> Dict[str, float]:
    counts = {s: 0 for s in Status}
    total = 0
    for e in view:
        counts[classify(e)] += 1
        total += 1
    active = counts[Status.STRATEGIC] + counts[Status.EXPLORING]
    adoption = round(active / total * 100, 1) if total else 0.0
    return {
        "total": total,
        "strategic": counts[Status.STRATEGIC],
        "exploring": counts[Status.EXPLORING],
        "evaluating": counts[Status.EVALUATING],
        "adoption_rate": adoption,
    }
