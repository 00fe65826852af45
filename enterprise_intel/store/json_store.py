from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import json
import logging
import os
import tempfile
import threading

from enterprise_intel.directory.lists import CompanyList
from enterprise_intel.directory.models import DirectoryCompany
from enterprise_intel.linkage.models import NewsItem, ResearchRecord, research_key

logger = logging.getLogger(__name__)

# collection names
COMPANIES = "companies"
NEWS = "news"
LISTS = "lists"
RESEARCH = "global-activity-by-enterprise-name"
LAST_SCAN = "last-scan-timestamp"


class StoreError(RuntimeError):
    """A collection could not be read or written."""


class JsonStore:
    """Whole-collection key-value store, one JSON file per collection."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def get(self, name: str, default: Any = None) -> Any:
        path = self._path(name)
        with self._lock:
            if not path.exists():
                return default
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.error("failed to read collection %s", name, extra={"collection": name})
                raise StoreError(f"cannot read {name}: {e}") from e

    def save(self, name: str, value: Any) -> None:
        path = self._path(name)
        with self._lock:
            tmp = None
            try:
                fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2)
                os.replace(tmp, path)
            except (OSError, TypeError) as e:
                if tmp is not None and os.path.exists(tmp):
                    os.unlink(tmp)
                logger.error("failed to write collection %s", name, extra={"collection": name})
                raise StoreError(f"cannot write {name}: {e}") from e

    # Typed helpers

    def load_companies(self) -> List[DirectoryCompany]:
        return [DirectoryCompany.from_dict(d) for d in self.get(COMPANIES, []) or [] if d.get("name")]

    def save_companies(self, companies: Iterable[DirectoryCompany]) -> None:
        self.save(COMPANIES, [c.to_dict() for c in companies])

    def load_news(self) -> List[NewsItem]:
        return [NewsItem.from_dict(d) for d in self.get(NEWS, []) or []]

    def save_news(self, items: Iterable[NewsItem]) -> List[NewsItem]:
        """Merge by id into the stored news; newer items replace older ones."""
        merged: Dict[str, NewsItem] = {n.id: n for n in self.load_news()}
        for n in items:
            merged[n.id] = n
        out = list(merged.values())
        self.save(NEWS, [n.to_dict() for n in out])
        return out

    def load_research(self) -> Dict[str, ResearchRecord]:
        raw = self.get(RESEARCH, {}) or {}
        return {k: ResearchRecord.from_dict(v) for k, v in raw.items()}

    def save_research(self, record: ResearchRecord) -> None:
        records = self.load_research()
        records[research_key(record)] = record
        self.save(RESEARCH, {k: r.to_dict() for k, r in records.items()})

    def load_lists(self) -> List[CompanyList]:
        return [CompanyList.from_dict(d) for d in self.get(LISTS, []) or []]

    def save_lists(self, lists: Iterable[CompanyList]) -> None:
        self.save(LISTS, [lst.to_dict() for lst in lists])

    def last_scan(self) -> Optional[float]:
        value = self.get(LAST_SCAN)
        return float(value) if value is not None else None

    def set_last_scan(self, ts: float) -> None:
        self.save(LAST_SCAN, ts)
