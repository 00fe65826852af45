from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Sequence
import logging

from enterprise_intel.directory.models import DirectoryCompany, Partner
from enterprise_intel.resolver.aliases import AliasResolver, EMPTY_ALIASES
from enterprise_intel.resolver.ids import company_id, name_key

logger = logging.getLogger(__name__)

PLACEHOLDER_MARKERS = (
    "Fetching", "Intelligence unavailable", "Queued", "Analysis unavailable",
    "Basic profile created", "currently unavailable", "Pending",
)

_SCALARS = ("description", "website", "headquarters", "region", "focus", "country", "industry", "parent_company")


@dataclass(frozen=True)
class MergeReport:
    merged: int  # groups collapsed
    removed: int  # records folded into a survivor

    def to_dict(self) -> Dict[str, int]:
        return {"merged": self.merged, "removed": self.removed}


@dataclass(frozen=True)
class MergeResult:
    companies: List[DirectoryCompany]
    report: MergeReport
    id_map: Dict[str, str] = field(default_factory=dict)  # stale id -> surviving id


class _UnionFind:
    def __init__(self, n: int):
        self._parent = list(range(n))

    def find(self, x: int) -> int:
        while self._parent[x] != x:
            self._parent[x] = self._parent[self._parent[x]]
            x = self._parent[x]
        return x

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            # lower index stays root so groups keep first-seen order
            self._parent[max(ra, rb)] = min(ra, rb)


def is_placeholder(value: Any) -> bool:
    if not value:
        return True
    return isinstance(value, str) and any(m in value for m in PLACEHOLDER_MARKERS)


def data_score(c: DirectoryCompany) -> int:
    score = 0
    if c.description and len(c.description) > 30:
        score += 2
    if c.website:
        score += 1
    if c.headquarters and c.headquarters != "Pending...":
        score += 1
    score += len(c.partners)
    if c.categories:
        score += 1
    if c.investors:
        score += 2
    return score


def find_duplicate_groups(companies: Sequence[DirectoryCompany], aliases: AliasResolver = EMPTY_ALIASES) -> List[List[int]]:
    """Indexes of records that denote the same company, in first-seen order.

    Two records are linked when their generated ids collide, when they carry
    the same stored id, or when their names agree after alias resolution and
    removal of every trailing legal suffix ("Acme Holdings Inc" == "Acme").
    Prefix relations are not links: "Coinbase Ventures" and "PwC India" stay
    apart from "Coinbase" and "PwC". Name containment is not checked at all;
    a containment rule would fold those divisions into their parents.
    """
    uf = _UnionFind(len(companies))
    first_seen: Dict[str, int] = {}

    def link(key: str, idx: int) -> None:
        if key in first_seen:
            uf.union(first_seen[key], idx)
        else:
            first_seen[key] = idx

    for idx, c in enumerate(companies):
        link("gen:" + company_id(c.name), idx)
        link("id:" + c.id, idx)
        key = name_key(aliases.resolve(c.name))
        if key:
            link("name:" + key, idx)

    groups: Dict[int, List[int]] = defaultdict(list)
    for idx in range(len(companies)):
        groups[uf.find(idx)].append(idx)
    return [groups[root] for root in sorted(groups)]


def _merge_group(members: List[DirectoryCompany]) -> DirectoryCompany:
    ranked = sorted(members, key=data_score, reverse=True)  # stable: ties keep directory order
    best = ranked[0]

    changes: Dict[str, Any] = {}
    for name in _SCALARS:
        for m in ranked:
            value = getattr(m, name)
            if not is_placeholder(value):
                changes[name] = value
                break

    categories: List[str] = []
    partners: List[Partner] = []
    investors: List[str] = []
    seen_partners = set()
    for m in ranked:
        categories += [c for c in m.categories if c not in categories]
        investors += [i for i in m.investors if i not in investors]
        for p in m.partners:
            if p.name.lower() in seen_partners:
                continue
            seen_partners.add(p.name.lower())
            partners.append(p)

    added = sorted(m.added_at for m in members if m.added_at)
    return replace(
        best,
        id=company_id(best.name),
        categories=categories,
        partners=partners,
        investors=investors,
        added_at=added[0] if added else None,
        **changes,
    )


def merge_duplicates(companies: Sequence[DirectoryCompany], aliases: AliasResolver = EMPTY_ALIASES) -> MergeResult:
    """Collapse every duplicate group into one surviving record.

    The survivor is the record with the most data; it gets the first real
    (non-placeholder) value of each scalar field in that order, the union of
    categories and investors, and partners deduplicated by name. Singletons
    whose stored id drifted from the generated one are re-keyed but not
    counted. Running this on its own output reports zero merges.
    """
    out: List[DirectoryCompany] = []
    id_map: Dict[str, str] = {}
    merged = removed = 0
    for idxs in find_duplicate_groups(companies, aliases):
        members = [companies[i] for i in idxs]
        if len(members) == 1:
            only = members[0]
            canonical = company_id(only.name)
            if only.id != canonical:
                id_map[only.id] = canonical
                only = replace(only, id=canonical)
            out.append(only)
            continue
        survivor = _merge_group(members)
        merged += 1
        removed += len(members) - 1
        for m in members:
            if m.id != survivor.id:
                id_map[m.id] = survivor.id
        logger.info("merged %d records into %s", len(members), survivor.id)
        out.append(survivor)
    return MergeResult(companies=out, report=MergeReport(merged=merged, removed=removed), id_map=id_map)
