from __future__ import annotations
from typing import Dict, Iterable, List
import logging

from enterprise_intel.directory.models import DirectoryCompany
from enterprise_intel.linkage.models import Partnership
from enterprise_intel.resolver.aliases import AliasResolver, EMPTY_ALIASES
from enterprise_intel.resolver.core import NameMatcher

logger = logging.getLogger(__name__)


def link_partnerships(
    companies: Iterable[DirectoryCompany],
    enterprise_names: Iterable[str],
    aliases: AliasResolver = EMPTY_ALIASES,
) -> Dict[str, List[Partnership]]:
    """Map canonical enterprise name -> directory companies partnered with it.

    One entry per (enterprise, directory company): a second partner record
    resolving to the same enterprise keeps the first description. Partner
    names that resolve to nothing are skipped.
    """
    matcher = NameMatcher(enterprise_names, aliases)
    out: Dict[str, List[Partnership]] = {}
    for company in companies:
        for partner in company.partners:
            m = matcher.match(partner.name)
            if m is None:
                logger.debug("no registry match for partner %r of %s", partner.name, company.name)
                continue
            entries = out.setdefault(m.name, [])
            if any(e.directory_company == company.name for e in entries):
                continue
            entries.append(Partnership(directory_company=company.name, description=partner.description))
    return out
