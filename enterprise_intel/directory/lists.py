from __future__ import annotations
from dataclasses import dataclass, field, replace, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
import uuid

PRIORITIES = ("Critical", "High", "Medium", "Low")


@dataclass(frozen=True)
class ListEntry:
    company_id: str
    label: str = ""
    priority: str = "Medium"
    added_at: str = ""


@dataclass(frozen=True)
class CompanyList:
    id: str
    name: str
    entries: List[ListEntry] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CompanyList":
        entries = []
        for e in d.get("entries") or []:
            entries.append(ListEntry(
                company_id=str(e.get("company_id") or e.get("companyId") or ""),
                label=str(e.get("label") or ""),
                priority=str(e.get("priority") or "Medium"),
                added_at=str(e.get("added_at") or e.get("addedAt") or ""),
            ))
        return CompanyList(
            id=str(d.get("id") or ""),
            name=str(d.get("name") or ""),
            entries=entries,
            created_at=str(d.get("created_at") or d.get("createdAt") or ""),
            updated_at=str(d.get("updated_at") or d.get("updatedAt") or ""),
        )


def _now(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def new_list(name: str, now: Optional[datetime] = None) -> CompanyList:
    if not name.strip():
        raise ValueError("list name is required")
    ts = _now(now)
    return CompanyList(id=f"list_{uuid.uuid4().hex[:8]}", name=name.strip(), created_at=ts, updated_at=ts)


def add_entry(lst: CompanyList, company_id: str, label: str = "", priority: str = "Medium", now: Optional[datetime] = None) -> CompanyList:
    """Add or update the entry for `company_id`."""
    if priority not in PRIORITIES:
        raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
    ts = _now(now)
    entry = ListEntry(company_id=company_id, label=label, priority=priority, added_at=ts)
    entries = [e for e in lst.entries if e.company_id != company_id] + [entry]
    return replace(lst, entries=entries, updated_at=ts)


def remap_entries(lst: CompanyList, id_map: Mapping[str, str]) -> CompanyList:
    """Point entries at surviving ids after a duplicate merge; one entry per company."""
    if not id_map:
        return lst
    out: List[ListEntry] = []
    seen = set()
    for e in lst.entries:
        cid = id_map.get(e.company_id, e.company_id)
        if cid in seen:
            continue
        seen.add(cid)
        out.append(replace(e, company_id=cid))
    return replace(lst, entries=out)
