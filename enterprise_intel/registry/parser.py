"""
Registry tables: a global-scale list (revenues stated in $M) and a
domestic-scale list (revenues stated in full dollars). Both are comma
delimited with a header row and RFC4180-style quoting. Column positions are
fixed per scale and must not move.
"""
from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)

GLOBAL = "global"
DOMESTIC = "domestic"
SCALES = (GLOBAL, DOMESTIC)

GLOBAL_COLUMNS = (
    "Rank", "Name", "Revenues ($M)", "Revenue Percent Change", "Profits ($M)",
    "Profits Percent Change", "Assets ($M)", "Employees", "Change in Rank", "Years on Global 500 List",
)
DOMESTIC_COLUMNS = (
    "Rank", "Company", "Industry", "City", "State", "Zip Code", "Website", "Employees", "Revenue (rounded)", "CEO",
)

_NUMERIC_NOISE_RE = re.compile(r"[^0-9.\-]")


@dataclass(frozen=True)
class RegistryRow:
    rank: int  # scoped to its own registry
    name: str
    revenue: str  # as printed; scale depends on `scale`
    employees: int
    scale: str  # global|domestic
    industry: Optional[str] = None
    ceo: Optional[str] = None
    website: Optional[str] = None
    hq_location: Optional[str] = None
    # global-only columns
    revenue_change: Optional[str] = None
    profits: Optional[str] = None
    profits_change: Optional[str] = None
    assets: Optional[str] = None
    change_in_rank: Optional[str] = None
    years_on_list: int = 0


def split_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one delimited line, honouring double quotes.

    A quote toggles the in-quotes state, so delimiters inside quotes are
    kept. Quoted fields are unwrapped and ``""`` decodes to ``"``.
    """
    fields: List[str] = []
    start = 0
    in_quotes = False
    for i, ch in enumerate(line):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append(line[start:i])
            start = i + 1
    fields.append(line[start:])
    return [_unquote(f) for f in fields]


def _unquote(field: str) -> str:
    s = field.strip()
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        return s[1:-1].replace('""', '"')
    return s


def parse_number(raw: Optional[str]) -> float:
    """'$1,234.5' -> 1234.5; anything unparsable -> 0.0."""
    clean = _NUMERIC_NOISE_RE.sub("", raw or "")
    try:
        return float(clean)
    except ValueError:
        return 0.0


def _int(raw: Optional[str]) -> int:
    return int(parse_number(raw))


def _col(row: List[str], idx: int) -> str:
    return row[idx] if idx < len(row) else ""


def _data_lines(text: str, columns: Tuple[str, ...]) -> List[Tuple[int, str]]:
    lines = text.strip().splitlines()
    if lines and tuple(split_line(lines[0])[:2]) != columns[:2]:
        logger.warning("unexpected registry header: %r", lines[0][:80])
    return [(n, line) for n, line in enumerate(lines[1:], start=2) if line.strip()]


@lru_cache(maxsize=8)
def parse_global(text: str) -> Tuple[RegistryRow, ...]:
    out: List[RegistryRow] = []
    for lineno, line in _data_lines(text, GLOBAL_COLUMNS):
        row = split_line(line)
        name = _col(row, 1)
        if not name:
            logger.debug("dropping global registry line %d: empty name", lineno)
            continue
        out.append(RegistryRow(
            rank=_int(_col(row, 0)),
            name=name,
            revenue=_col(row, 2) or "$0",
            employees=_int(_col(row, 7)),
            scale=GLOBAL,
            revenue_change=_col(row, 3) or "0%",
            profits=_col(row, 4) or "$0",
            profits_change=_col(row, 5) or "0%",
            assets=_col(row, 6) or "$0",
            change_in_rank=_col(row, 8) or "-",
            years_on_list=_int(_col(row, 9)),
        ))
    return tuple(out)


@lru_cache(maxsize=8)
def parse_domestic(text: str) -> Tuple[RegistryRow, ...]:
    out: List[RegistryRow] = []
    for lineno, line in _data_lines(text, DOMESTIC_COLUMNS):
        row = split_line(line)
        name = _col(row, 1)
        if not name:
            logger.debug("dropping domestic registry line %d: empty name", lineno)
            continue
        city, state = _col(row, 3), _col(row, 4)
        out.append(RegistryRow(
            rank=_int(_col(row, 0)),
            name=name,
            revenue=_col(row, 8) or "$0",
            employees=_int(_col(row, 7)),
            scale=DOMESTIC,
            industry=_col(row, 2),
            ceo=_col(row, 9),
            website=_col(row, 6),
            hq_location=f"{city}, {state}" if (city or state) else None,
        ))
    return tuple(out)


def parse_registry(text: str, scale: str) -> Tuple[RegistryRow, ...]:
    if scale == GLOBAL:
        return parse_global(text)
    if scale == DOMESTIC:
        return parse_domestic(text)
    raise ValueError(f"unknown registry scale: {scale!r}")


def load_registry(path: str | Path, scale: str) -> Tuple[RegistryRow, ...]:
    return parse_registry(Path(path).read_text(encoding="utf-8"), scale)
