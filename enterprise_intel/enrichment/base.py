from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from enterprise_intel.directory.models import DirectoryCompany


class EnrichmentError(RuntimeError):
    """The enrichment/research service failed or returned garbage."""


class Enricher(ABC):
    """External enrichment service.

    Both calls return loose dicts; missing keys mean "no information".
    Implementations raise EnrichmentError on failure.
    """

    @abstractmethod
    def enrich_company(self, name: str, existing: Optional[DirectoryCompany] = None) -> Dict[str, Any]:
        """Partial company record: description, website, partners, funding..."""

    @abstractmethod
    def research_enterprise(self, name: str) -> Dict[str, Any]:
        """``{"summary": str, "initiatives": [{title, date, description, sourceUrl}]}``"""


class NullEnricher(Enricher):
    def enrich_company(self, name: str, existing: Optional[DirectoryCompany] = None) -> Dict[str, Any]:
        return {}

    def research_enterprise(self, name: str) -> Dict[str, Any]:
        return {"summary": "", "initiatives": []}
