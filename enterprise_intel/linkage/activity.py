from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
import re
import time

from enterprise_intel.linkage.models import Initiative, NewsItem, ResearchRecord, Status
from enterprise_intel.directory.models import Partner
from enterprise_intel.registry.merger import UnifiedEnterprise


def classify(enterprise: UnifiedEnterprise) -> Status:
    """Strategic > Exploring > Evaluating, first true wins.

    The only place the status is derived; list and detail views both call it.
    """
    if enterprise.active_partnerships:
        return Status.STRATEGIC
    has_initiatives = enterprise.research is not None and len(enterprise.research.initiatives) > 0
    if has_initiatives or enterprise.news_mentions:
        return Status.EXPLORING
    return Status.EVALUATING


def merge_initiatives(new: List[Initiative], old: Iterable[Initiative]) -> List[Initiative]:
    """New list in full, then old items whose title is not in the new list."""
    titles = {i.title for i in new}
    return list(new) + [i for i in old if i.title not in titles]


def merge_research(
    existing: Optional[ResearchRecord],
    company_name: str,
    rank: int,
    response: Dict[str, Any],
    now: Optional[float] = None,
) -> ResearchRecord:
    """Fold a research response into the stored record for an enterprise.

    A missing summary keeps the previous one; prior initiatives survive
    unless a new initiative carries the same title.
    """
    new = [Initiative.from_dict(i) for i in response.get("initiatives") or [] if isinstance(i, dict) and i.get("title")]
    old = existing.initiatives if existing is not None else []
    summary = str(response.get("summary") or "") or (existing.summary if existing is not None else "")
    return ResearchRecord(
        company_name=company_name,
        rank=rank,
        summary=summary,
        initiatives=merge_initiatives(new, old),
        last_updated=now if now is not None else time.time(),
    )


def _contains_either(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return a in b or b in a


def news_mentions(news: Iterable[NewsItem], canonical_name: str) -> List[NewsItem]:
    return [
        n for n in news
        if _contains_either(n.title, canonical_name)
        or any(_contains_either(rc, canonical_name) for rc in n.related_companies)
    ]


def _today() -> str:
    return date.today().isoformat()


def research_news_items(company_name: str, rank: int, initiatives: Iterable[Initiative], stamp: Optional[int] = None) -> List[NewsItem]:
    stamp = stamp if stamp is not None else int(time.time() * 1000)
    return [
        NewsItem(
            id=f"res-{rank}-{stamp}-{idx}",
            title=f"{company_name}: {init.title}",
            source="AI Research",
            date=init.date or _today(),
            summary=init.description,
            url=init.source_url or "#",
            related_companies=[company_name, "Fortune 500"],
        )
        for idx, init in enumerate(initiatives)
    ]


def manual_news_item(company_name: str, title: str, url: str = "", date_str: str = "", summary: str = "", stamp: Optional[int] = None) -> NewsItem:
    if not title.strip():
        raise ValueError("news title is required")
    stamp = stamp if stamp is not None else int(time.time() * 1000)
    return NewsItem(
        id=f"manual-news-{stamp}",
        title=title.strip(),
        source="Manual Entry",
        date=date_str or _today(),
        summary=summary,
        url=url,
        related_companies=[company_name],
    )


_SAFE_RE = re.compile(r"[^a-zA-Z0-9]")


def partnership_news_items(company_name: str, partners: Iterable[Partner]) -> List[NewsItem]:
    """One news item per partner; ids are deterministic so re-runs overwrite."""
    safe_name = _SAFE_RE.sub("", company_name)
    return [
        NewsItem(
            id=f"ptnr-{safe_name}-{_SAFE_RE.sub('', p.name)}",
            title=f"{company_name} Partnership: {p.name}",
            source="Directory Intelligence",
            date=p.date or _today(),
            summary=p.description,
            url=p.source_url or "#",
            related_companies=[company_name, p.name],
        )
        for p in partners
    ]
