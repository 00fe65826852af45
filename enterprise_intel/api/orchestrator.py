from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
import logging
import threading
import time

from enterprise_intel.config.env import get_registry_config, get_store_config
from enterprise_intel.directory.duplicates import MergeReport, is_placeholder, merge_duplicates
from enterprise_intel.directory.grouping import GroupedEntry, filter_directory, group_subsidiaries
from enterprise_intel.directory.lists import CompanyList, add_entry, new_list, remap_entries
from enterprise_intel.directory.models import (
    FOCUS_VALUES,
    CompanyPatch,
    DirectoryCompany,
    apply_patch,
    ensure_bidirectional_partners,
    new_company,
)
from enterprise_intel.enrichment.base import Enricher, EnrichmentError, NullEnricher
from enterprise_intel.linkage.activity import (
    classify,
    manual_news_item,
    merge_research,
    partnership_news_items,
    research_news_items,
)
from enterprise_intel.linkage.models import Initiative, NewsItem, ResearchRecord, lookup_research
from enterprise_intel.linkage.view import build_enterprise_view, coverage_stats, filter_enterprises, find_enterprise
from enterprise_intel.registry.merger import UnifiedEnterprise
from enterprise_intel.registry.parser import DOMESTIC, GLOBAL, RegistryRow, load_registry
from enterprise_intel.resolver.aliases import EMPTY_ALIASES, AliasResolver, load_default_aliases, logo_domain
from enterprise_intel.resolver.ids import company_id
from enterprise_intel.store.json_store import JsonStore

logger = logging.getLogger(__name__)

ENRICHMENT_FAILED = "Intelligence unavailable. Try refreshing later."
BASIC_PROFILE = "Basic profile created. Detailed intelligence is currently unavailable."
QUEUED = "Queued for analysis..."
# descriptions shorter than this are re-enriched by refresh_pending
MIN_DESCRIPTION = 30


class NotFound(LookupError):
    pass


class DuplicateCompanyError(ValueError):
    def __init__(self, company: DirectoryCompany):
        super().__init__(f"{company.name} already exists as {company.id}")
        self.company = company


def serialize_enterprise(e: UnifiedEnterprise, aliases: AliasResolver, detail: bool = False) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "rank": e.rank,
        "name": e.name,
        "provenance": e.provenance,
        "revenue": e.row.revenue,
        "employees": e.row.employees,
        "industry": e.row.industry,
        "website": e.row.website,
        "hq_location": e.row.hq_location,
        "status": classify(e).value,
        "logo_domain": logo_domain(e.name, e.row.website, aliases),
        "partnership_count": len(e.active_partnerships),
        "news_count": len(e.news_mentions),
    }
    if detail:
        out.update({
            "ceo": e.row.ceo,
            "profits": e.row.profits,
            "assets": e.row.assets,
            "active_partnerships": [
                {"directory_company": p.directory_company, "description": p.description}
                for p in e.active_partnerships
            ],
            "research": e.research.to_dict() if e.research else None,
            "news_mentions": [n.to_dict() for n in e.news_mentions],
        })
    return out


def serialize_group(g: GroupedEntry) -> Dict[str, Any]:
    return {**g.company.to_dict(), "subsidiaries": [s.to_dict() for s in g.subsidiaries]}


class IntelService:
    """Service layer: loads snapshots from the store, runs the engine, saves.

    The enrichment and persistence calls happen here and only here. Mutations
    are serialized by one lock so read-modify-write of a collection is safe
    under the threaded dev server.
    """

    def __init__(
        self,
        store: JsonStore,
        enricher: Optional[Enricher] = None,
        global_rows: Sequence[RegistryRow] = (),
        domestic_rows: Sequence[RegistryRow] = (),
        aliases: Optional[AliasResolver] = None,
    ):
        self.store = store
        self.enricher = enricher or NullEnricher()
        self.global_rows = tuple(global_rows)
        self.domestic_rows = tuple(domestic_rows)
        self.aliases = aliases if aliases is not None else EMPTY_ALIASES
        self._lock = threading.RLock()

    # Enterprises

    def view(self) -> List[UnifiedEnterprise]:
        return build_enterprise_view(
            self.global_rows,
            self.domestic_rows,
            self.store.load_companies(),
            self.store.load_research(),
            self.store.load_news(),
            self.aliases,
        )

    def enterprises(self, search: str = "", status: Optional[str] = None) -> List[UnifiedEnterprise]:
        return filter_enterprises(self.view(), search=search, status=status)

    def enterprise(self, name: str) -> UnifiedEnterprise:
        found = find_enterprise(self.view(), name)
        if found is None:
            raise NotFound(name)
        return found

    def stats(self) -> Dict[str, float]:
        return coverage_stats(self.view())

    def research(self, name: str) -> ResearchRecord:
        """Run research for an enterprise and fold it into the stored record.

        New initiatives are also published as news items.
        """
        e = self.enterprise(name)
        response = self.enricher.research_enterprise(e.name) or {}
        with self._lock:
            existing = lookup_research(self.store.load_research(), e.name, e.rank)
            record = merge_research(existing, e.name, e.rank, response)
            self.store.save_research(record)
            fresh = [Initiative.from_dict(i) for i in response.get("initiatives") or [] if isinstance(i, dict) and i.get("title")]
            if fresh:
                self.store.save_news(research_news_items(e.name, e.rank, fresh))
        logger.info("research updated for %s (%d initiatives)", e.name, len(record.initiatives), extra={"enterprise": e.name})
        return record

    def add_news(self, name: str, title: str, url: str = "", date_str: str = "", summary: str = "") -> NewsItem:
        e = self.enterprise(name)
        item = manual_news_item(e.name, title, url=url, date_str=date_str, summary=summary)
        with self._lock:
            self.store.save_news([item])
        return item

    # Directory

    def companies(self) -> List[DirectoryCompany]:
        return self.store.load_companies()

    def company(self, cid: str) -> DirectoryCompany:
        for c in self.store.load_companies():
            if c.id == cid:
                return c
        raise NotFound(cid)

    def directory(self, category: str = "All", region: str = "All", focus: str = "All", search: str = "", sort_by: str = "name") -> List[GroupedEntry]:
        filtered = filter_directory(self.store.load_companies(), category, region, focus, search, sort_by)
        return group_subsidiaries(filtered)

    def _enrich(self, company: DirectoryCompany) -> DirectoryCompany:
        """Apply one enrichment response; raises EnrichmentError unchanged."""
        patch = CompanyPatch.from_dict(self.enricher.enrich_company(company.name, company))
        enriched = apply_patch(company, patch)
        if is_placeholder(enriched.description):
            enriched = replace(enriched, description=BASIC_PROFILE)
        if patch.partners:
            with self._lock:
                self.store.save_news(partnership_news_items(enriched.name, patch.partners))
        return enriched

    def _put(self, company: DirectoryCompany) -> None:
        companies = [c for c in self.store.load_companies() if c.id != company.id] + [company]
        self.store.save_companies(ensure_bidirectional_partners(companies))

    def add_company(self, name: str) -> DirectoryCompany:
        """Create a skeleton record, persist it, then enrich it.

        On enrichment failure the skeleton stays with an "unavailable"
        description and the EnrichmentError propagates.
        """
        skeleton = new_company(name)
        with self._lock:
            companies = self.store.load_companies()
            for c in companies:
                if c.id == skeleton.id:
                    raise DuplicateCompanyError(c)
            self.store.save_companies(companies + [skeleton])
        logger.info("company added: %s", skeleton.name, extra={"company": skeleton.id})
        try:
            enriched = self._enrich(skeleton)
        except EnrichmentError:
            logger.warning("enrichment failed for %s", skeleton.name, exc_info=True, extra={"company": skeleton.id})
            with self._lock:
                self._put(replace(skeleton, description=ENRICHMENT_FAILED))
            raise
        with self._lock:
            self._put(enriched)
        return enriched

    def import_companies(self, names: Sequence[str]) -> Dict[str, List[str]]:
        """Queue skeleton records; names colliding with existing ids are skipped."""
        added: List[str] = []
        skipped: List[str] = []
        with self._lock:
            companies = self.store.load_companies()
            taken = {c.id for c in companies}
            for raw in names:
                name = (raw or "").strip()
                if not name:
                    continue
                cid = company_id(name)
                if cid in taken:
                    skipped.append(name)
                    continue
                taken.add(cid)
                companies.append(new_company(name, description=QUEUED))
                added.append(name)
            self.store.save_companies(companies)
        logger.info("import: %d added, %d skipped", len(added), len(skipped))
        return {"added": added, "skipped": skipped}

    def update_company(self, cid: str, data: Dict[str, Any]) -> DirectoryCompany:
        patch = CompanyPatch.from_dict(data)
        if patch.focus and patch.focus not in FOCUS_VALUES:
            raise ValueError(f"focus must be one of {', '.join(FOCUS_VALUES)}")
        with self._lock:
            updated = apply_patch(self.company(cid), patch)
            self._put(updated)
        return updated

    def delete_company(self, cid: str) -> None:
        with self._lock:
            companies = self.store.load_companies()
            kept = [c for c in companies if c.id != cid]
            if len(kept) == len(companies):
                raise NotFound(cid)
            self.store.save_companies(kept)

    def merge_duplicates(self) -> MergeReport:
        with self._lock:
            result = merge_duplicates(self.store.load_companies(), self.aliases)
            self.store.save_companies(result.companies)
            if result.id_map:
                self.store.save_lists([remap_entries(lst, result.id_map) for lst in self.store.load_lists()])
        logger.info("duplicate merge: %d groups, %d removed", result.report.merged, result.report.removed)
        return result.report

    def refresh_pending(self) -> Dict[str, int]:
        """Re-enrich records whose description is a placeholder or too short."""
        pending = [
            c for c in self.store.load_companies()
            if is_placeholder(c.description) or len(c.description) < MIN_DESCRIPTION
        ]
        refreshed = failed = 0
        for c in pending:
            try:
                enriched = self._enrich(c)
            except EnrichmentError:
                logger.warning("refresh failed for %s", c.name, exc_info=True, extra={"company": c.id})
                failed += 1
                continue
            with self._lock:
                self._put(enriched)
            refreshed += 1
        self.store.set_last_scan(time.time())
        return {"pending": len(pending), "refreshed": refreshed, "failed": failed}

    # Lists

    def lists(self) -> List[CompanyList]:
        return self.store.load_lists()

    def create_list(self, name: str) -> CompanyList:
        lst = new_list(name)
        with self._lock:
            self.store.save_lists(self.store.load_lists() + [lst])
        return lst

    def add_list_entry(self, list_id: str, cid: str, label: str = "", priority: str = "Medium") -> CompanyList:
        with self._lock:
            self.company(cid)
            lists = self.store.load_lists()
            for idx, lst in enumerate(lists):
                if lst.id == list_id:
                    lists[idx] = add_entry(lst, cid, label, priority, now=datetime.now(timezone.utc))
                    self.store.save_lists(lists)
                    return lists[idx]
        raise NotFound(list_id)


def build_default_service(enricher: Optional[Enricher] = None) -> IntelService:
    """Service wired from the environment (DATA_ROOT, registry and alias paths)."""
    reg = get_registry_config()
    return IntelService(
        store=JsonStore(get_store_config().data_root),
        enricher=enricher,
        global_rows=load_registry(reg.global_path, GLOBAL),
        domestic_rows=load_registry(reg.domestic_path, DOMESTIC),
        aliases=load_default_aliases(),
    )
