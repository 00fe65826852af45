from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class Status(str, Enum):
    STRATEGIC = "Strategic"
    EXPLORING = "Exploring"
    EVALUATING = "Evaluating"


@dataclass(frozen=True)
class Partnership:
    directory_company: str
    description: str


@dataclass(frozen=True)
class Initiative:
    title: str
    date: str = ""
    description: str = ""
    source_url: str = ""

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Initiative":
        return Initiative(
            title=str(d.get("title") or ""),
            date=str(d.get("date") or ""),
            description=str(d.get("description") or ""),
            source_url=str(d.get("source_url") or d.get("sourceUrl") or ""),
        )


@dataclass(frozen=True)
class ResearchRecord:
    company_name: str  # canonical enterprise name
    rank: int
    summary: str
    initiatives: List[Initiative] = field(default_factory=list)
    last_updated: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ResearchRecord":
        return ResearchRecord(
            company_name=str(d.get("company_name") or d.get("companyName") or ""),
            rank=int(d.get("rank") or 0),
            summary=str(d.get("summary") or ""),
            initiatives=[Initiative.from_dict(i) for i in d.get("initiatives") or []],
            last_updated=float(d.get("last_updated") or d.get("lastUpdated") or 0.0),
        )


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    source: str = ""
    date: str = ""
    summary: str = ""
    url: str = ""
    related_companies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "NewsItem":
        related = d.get("related_companies", d.get("relatedCompanies"))
        return NewsItem(
            id=str(d.get("id") or ""),
            title=str(d.get("title") or ""),
            source=str(d.get("source") or ""),
            date=str(d.get("date") or ""),
            summary=str(d.get("summary") or ""),
            url=str(d.get("url") or ""),
            related_companies=[str(r) for r in related] if isinstance(related, list) else [],
        )


def research_key(record: ResearchRecord) -> str:
    return record.company_name or str(record.rank)


def lookup_research(records: Dict[str, ResearchRecord], name: str, rank: Optional[int] = None) -> Optional[ResearchRecord]:
    """By canonical name; rank-keyed records are a fallback for older data."""
    found = records.get(name)
    if found is None and rank is not None:
        found = records.get(str(rank))
    return found
