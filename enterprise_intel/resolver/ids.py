from __future__ import annotations
import re

ID_PREFIX = "c-"

LEGAL_SUFFIXES = ("Inc", "LLC", "Ltd", "Limited", "Corp", "Corporation", "Group", "Holdings", "PLC", "SA", "AG", "GmbH")

_PUNCT_RE = re.compile(r"[,.]")
_LEGAL_SUFFIX_RE = re.compile(r"\s+(?:" + "|".join(LEGAL_SUFFIXES) + r")$", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def strip_legal_suffix(name: str) -> str:
    """Drop one trailing legal-entity word ("Acme Holdings" -> "Acme")."""
    return _LEGAL_SUFFIX_RE.sub("", name)


def company_id(name: str) -> str:
    """Stable directory id for a company name.

    Only the final legal suffix is removed: "Circle Internet Group, Inc."
    maps to ``c-circleinternetgroup`` while "circle internet group" maps to
    ``c-circleinternet``. Empty input gives ``c-``.
    """
    clean = _PUNCT_RE.sub("", (name or "").strip())
    clean = strip_legal_suffix(clean).strip()
    return ID_PREFIX + _NON_ALNUM_RE.sub("", clean.lower())


def name_key(name: str) -> str:
    """Aggressive normalization: every trailing legal suffix removed, no prefix."""
    clean = _PUNCT_RE.sub("", (name or "").strip())
    prev = None
    while prev != clean:
        prev = clean
        clean = strip_legal_suffix(clean).strip()
    return _NON_ALNUM_RE.sub("", clean.lower())
