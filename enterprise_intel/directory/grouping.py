from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from enterprise_intel.directory.models import DirectoryCompany

# A parent name followed by one of these denotes a separate business unit
# ("Coinbase Ventures"), not a local office ("PwC India").
CORPORATE_UNIT_SUFFIXES = (
    "Ventures", "Capital", "Labs", "Investments", "Fund", "Funds", "Crypto",
    "Digital", "Asset Management", "Research", "Foundation",
)

# region filter value -> region values it covers
REGION_GROUPS = {
    "Europe": ("EU", "Europe"),
    "MEA": ("MEA", "EMEA"),
}

SORT_KEYS = ("name", "lastAdded", "mostPartners")


@dataclass(frozen=True)
class GroupedEntry:
    company: DirectoryCompany
    subsidiaries: List[DirectoryCompany] = field(default_factory=list)


def is_corporate_unit(company_name: str, parent_name: str) -> bool:
    suffix = company_name[len(parent_name) + 1:]
    return any(suffix == s or suffix.startswith(s + " ") for s in CORPORATE_UNIT_SUFFIXES)


def detect_parent(company: DirectoryCompany, names: Sequence[str]) -> Optional[str]:
    """Explicit parent_company, else the first name that prefixes this one.

    `names` is scanned in order; a candidate qualifies when this company's
    name starts with it plus a space and the remainder is not a corporate
    unit suffix.
    """
    if company.parent_company and company.parent_company != company.name:
        return company.parent_company
    for other in names:
        if other == company.name:
            continue
        if company.name.startswith(other + " ") and not is_corporate_unit(company.name, other):
            return other
    return None


def group_subsidiaries(companies: Sequence[DirectoryCompany]) -> List[GroupedEntry]:
    """Group a filtered, sorted directory view into parents and subsidiaries.

    Output keeps the input order of top-level companies. Subsidiaries whose
    parent is not a top-level entry of this view (filtered out, or itself
    grouped under another parent) are appended as standalone entries so
    nothing in the view disappears. Pure: same input, same grouping.
    """
    name_map: Dict[str, DirectoryCompany] = {}
    for c in companies:
        name_map[c.name] = c
    names = list(name_map.keys())

    assigned = set()
    parent_to_subs: Dict[str, List[DirectoryCompany]] = {}
    for company in companies:
        parent = detect_parent(company, names)
        if parent is None:
            continue
        parent_to_subs.setdefault(parent, []).append(company)
        assigned.add(company.id)

    groups: List[GroupedEntry] = []
    top_level = set()
    for company in companies:
        if company.id in assigned:
            continue
        top_level.add(company.name)
        groups.append(GroupedEntry(company, list(parent_to_subs.get(company.name, []))))

    for parent, subs in parent_to_subs.items():
        if parent in top_level:
            continue
        for sub in subs:
            groups.append(GroupedEntry(sub, []))
    return groups


def _added_ts(c: DirectoryCompany) -> float:
    if not c.added_at:
        return 0.0
    try:
        return datetime.fromisoformat(c.added_at.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def filter_directory(
    companies: Sequence[DirectoryCompany],
    category: str = "All",
    region: str = "All",
    focus: str = "All",
    search: str = "",
    sort_by: str = "name",
) -> List[DirectoryCompany]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")
    term = (search or "").lower()
    regions = REGION_GROUPS.get(region, (region,))

    out = [
        c for c in companies
        if (category == "All" or category in c.categories)
        and (region == "All" or c.region in regions)
        and (focus == "All" or c.focus == focus)
        and (not term or term in c.name.lower() or term in c.description.lower())
    ]
    if sort_by == "lastAdded":
        out.sort(key=_added_ts, reverse=True)
    elif sort_by == "mostPartners":
        out.sort(key=lambda c: len(c.partners), reverse=True)
    else:
        out.sort(key=lambda c: c.name.casefold())
    return out
