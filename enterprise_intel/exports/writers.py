from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

# CSV schemas for the enterprise view and the directory
SCHEMAS = {
    "enterprises": [
        "rank","name","provenance","status","revenue","employees","industry","hq_location","website","logo_domain","partnership_count","news_count"
    ],
    "directory": [
        "id","name","focus","region","country","industry","headquarters","website","categories","partners","parent_company","added_at"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_enterprises(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["enterprises"])


def write_directory(rows: Iterable[Dict[str, Any]]) -> str:
    # list columns are flattened to "; "-joined names
    flat = []
    for r in rows:
        flat.append({
            **r,
            "categories": "; ".join(r.get("categories") or []),
            "partners": "; ".join(p.get("name", "") for p in r.get("partners") or []),
        })
    return write_csv(flat, SCHEMAS["directory"])
