from __future__ import annotations
from dataclasses import dataclass, field, fields, replace, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from enterprise_intel.resolver.ids import company_id

PARTNER_TYPES = ("Fortune500Global", "CryptoNative", "Investor")
FOCUS_VALUES = ("Crypto-First", "Crypto-Second")
DEFAULT_CATEGORY = "Infrastructure"


@dataclass(frozen=True)
class Partner:
    name: str
    description: str = ""
    type: str = "Fortune500Global"
    date: Optional[str] = None
    source_url: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    industry: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.name.lower(), self.type)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Partner":
        ptype = str(d.get("type") or "")
        return Partner(
            name=str(d.get("name") or "").strip(),
            description=str(d.get("description") or ""),
            type=ptype if ptype in PARTNER_TYPES else "Fortune500Global",
            date=d.get("date"),
            source_url=d.get("source_url") or d.get("sourceUrl"),
            country=d.get("country"),
            region=d.get("region"),
            industry=d.get("industry"),
        )


@dataclass(frozen=True)
class DirectoryCompany:
    id: str
    name: str
    description: str = ""
    categories: List[str] = field(default_factory=list)
    partners: List[Partner] = field(default_factory=list)
    website: str = ""
    headquarters: str = ""
    region: str = "Global"
    focus: str = "Crypto-Second"
    country: Optional[str] = None
    industry: Optional[str] = None
    parent_company: Optional[str] = None
    investors: List[str] = field(default_factory=list)  # funding round investors
    added_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "DirectoryCompany":
        name = str(d.get("name") or "").strip()
        return DirectoryCompany(
            id=str(d.get("id") or company_id(name)),
            name=name,
            description=str(d.get("description") or ""),
            categories=[str(c) for c in d.get("categories") or []],
            partners=[Partner.from_dict(p) for p in d.get("partners") or [] if p.get("name")],
            website=str(d.get("website") or ""),
            headquarters=str(d.get("headquarters") or ""),
            region=str(d.get("region") or "Global"),
            focus=str(d.get("focus") or "Crypto-Second"),
            country=d.get("country"),
            industry=d.get("industry"),
            parent_company=d.get("parent_company") or d.get("parentCompany"),
            investors=[str(i) for i in d.get("investors") or []],
            added_at=d.get("added_at") or d.get("addedAt"),
        )


def new_company(name: str, description: str = "Fetching intelligence...", now: Optional[datetime] = None) -> DirectoryCompany:
    """Skeleton record created before enrichment runs."""
    clean = name.strip()
    if not clean:
        raise ValueError("company name is required")
    ts = (now or datetime.now(timezone.utc)).isoformat()
    return DirectoryCompany(
        id=company_id(clean),
        name=clean,
        description=description,
        categories=[DEFAULT_CATEGORY],
        headquarters="Pending...",
        added_at=ts,
    )


@dataclass(frozen=True)
class CompanyPatch:
    """Partial company record, e.g. an enrichment response.

    Every field is optional; ``None`` or empty means "no information" and
    never overwrites an existing value.
    """
    description: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    region: Optional[str] = None
    focus: Optional[str] = None
    country: Optional[str] = None
    industry: Optional[str] = None
    parent_company: Optional[str] = None
    categories: Optional[List[str]] = None
    partners: Optional[List[Partner]] = None
    investors: Optional[List[str]] = None

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> "CompanyPatch":
        d = d or {}
        funding = d.get("funding") or {}
        investors = d.get("investors") or (funding.get("investors") if isinstance(funding, dict) else None)
        partners = d.get("partners")
        return CompanyPatch(
            description=_str_or_none(d.get("description")),
            website=_str_or_none(d.get("website")),
            headquarters=_str_or_none(d.get("headquarters")),
            region=_str_or_none(d.get("region")),
            focus=_str_or_none(d.get("focus")),
            country=_str_or_none(d.get("country")),
            industry=_str_or_none(d.get("industry")),
            parent_company=_str_or_none(d.get("parent_company") or d.get("parentCompany")),
            categories=[str(c) for c in d["categories"]] if isinstance(d.get("categories"), list) else None,
            partners=[Partner.from_dict(p) for p in partners if isinstance(p, dict) and p.get("name")] if isinstance(partners, list) else None,
            investors=[str(i) for i in investors] if isinstance(investors, list) else None,
        )

    def is_empty(self) -> bool:
        return all(not getattr(self, f.name) for f in fields(self))


def _str_or_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def merge_partners(existing: List[Partner], incoming: Optional[List[Partner]]) -> List[Partner]:
    """Append incoming partners not already present by (name, type)."""
    if not incoming:
        return list(existing)
    seen = {p.key for p in existing}
    out = list(existing)
    for p in incoming:
        if p.key in seen:
            continue
        seen.add(p.key)
        out.append(p)
    return out


def sync_investor_partners(company: DirectoryCompany) -> DirectoryCompany:
    """Every funding investor also appears as an Investor partner."""
    if not company.investors:
        return company
    known = {p.name.lower() for p in company.partners if p.type == "Investor"}
    extra: List[Partner] = []
    for raw in company.investors:
        name = raw.strip()
        if not name or name.lower() in known:
            continue
        known.add(name.lower())
        extra.append(Partner(name=name, type="Investor"))
    if not extra:
        return company
    return replace(company, partners=list(company.partners) + extra)


_SCALARS = ("description", "website", "headquarters", "region", "focus", "country", "industry", "parent_company")


def apply_patch(company: DirectoryCompany, patch: CompanyPatch) -> DirectoryCompany:
    """Field-by-field merge, last non-empty value wins.

    Scalars are replaced only by non-empty patch values, categories only by a
    non-empty list, partners and investors are unioned.
    """
    changes: Dict[str, Any] = {}
    for name in _SCALARS:
        value = getattr(patch, name)
        if value:
            changes[name] = value
    if patch.categories:
        changes["categories"] = list(patch.categories)
    changes["partners"] = merge_partners(company.partners, patch.partners)
    if patch.investors:
        merged = list(company.investors)
        merged += [i for i in patch.investors if i not in merged]
        changes["investors"] = merged
    return sync_investor_partners(replace(company, **changes))


def ensure_bidirectional_partners(companies: List[DirectoryCompany]) -> List[DirectoryCompany]:
    """If A lists directory company B as a partner, B lists A back.

    Partners are resolved to directory records through `company_id`. The
    reverse link is CryptoNative, except that a Crypto-Second company
    listing a non-investor partner is mirrored as Fortune500Global.
    Records keep their order; when two share an id, the first one receives
    the reverse link.
    """
    out = list(companies)
    index: Dict[str, int] = {}
    for i, c in enumerate(out):
        index.setdefault(c.id, i)
    for company in companies:
        for partner in company.partners:
            pid = company_id(partner.name)
            at = index.get(pid)
            if at is None or pid == company.id:
                continue
            target = out[at]
            reverse_type = "CryptoNative"
            if partner.type not in ("Investor", "Fortune500Global") and company.focus == "Crypto-Second":
                reverse_type = "Fortune500Global"
            if any(p.name.lower() == company.name.lower() and p.type == reverse_type for p in target.partners):
                continue
            back = Partner(
                name=company.name,
                type=reverse_type,
                description=partner.description or f"Partnership with {company.name}.",
                date=partner.date,
                source_url=partner.source_url,
            )
            out[at] = replace(target, partners=list(target.partners) + [back])
    return out
