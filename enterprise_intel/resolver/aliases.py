from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping
from urllib.parse import urlparse
import json
import re

from enterprise_intel.config.env import get_alias_config


@dataclass(frozen=True, eq=False)
class AliasResolver:
    """Informal name -> canonical registry name, plus logo domain overrides.

    Lookups are exact and case-sensitive. Both maps are read-only views so a
    table loaded once can be shared by every matcher.
    """
    aliases: Mapping[str, str] = field(default_factory=dict)
    logo_domains: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        object.__setattr__(self, "logo_domains", MappingProxyType(dict(self.logo_domains)))

    @staticmethod
    def from_json_path(path: str | Path) -> "AliasResolver":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return AliasResolver(
            aliases={str(k): str(v) for k, v in data.get("aliases", {}).items()},
            logo_domains={str(k): str(v) for k, v in data.get("logo_domains", {}).items()},
        )

    def resolve(self, name: str) -> str:
        return self.aliases.get(name, name)

    def __contains__(self, name: object) -> bool:
        return name in self.aliases


EMPTY_ALIASES = AliasResolver()


@lru_cache(maxsize=4)
def _load(path: str) -> AliasResolver:
    return AliasResolver.from_json_path(path)


def load_default_aliases() -> AliasResolver:
    return _load(str(get_alias_config().path))


_LOGO_NOISE_RE = re.compile(r" (?:Group|Holdings|Corporation|Limited|Company|Inc)", re.IGNORECASE)


def logo_domain(name: str, website: str | None, table: AliasResolver = EMPTY_ALIASES) -> str:
    """Best-guess domain for an enterprise logo.

    Override table first, then the host of the registry website, then a
    domain guessed from the cleaned name ("BNP Paribas" -> "bnpparibas.com").
    """
    if name in table.logo_domains:
        return table.logo_domains[name]
    if website:
        url = website if website.startswith("http") else f"https://{website}"
        host = urlparse(url).hostname
        if host:
            return host
    clean = _LOGO_NOISE_RE.sub("", name).replace("&", "and")
    return re.sub(r"[^a-zA-Z0-9]", "", clean).lower() + ".com"
