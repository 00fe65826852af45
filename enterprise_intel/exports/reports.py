from __future__ import annotations
from typing import Dict, Any, List


def coverage_report_md(stats: Dict[str, Any], enterprises: List[Dict[str, Any]] | None = None) -> str:
    lines = ["# Coverage Report", ""]
    lines.append(f"- total: {stats.get('total', 0)}")
    lines.append(f"- strategic: {stats.get('strategic', 0)}")
    lines.append(f"- exploring: {stats.get('exploring', 0)}")
    lines.append(f"- evaluating: {stats.get('evaluating', 0)}")
    lines.append(f"- adoption_rate: {stats.get('adoption_rate', 0.0)}%")
    strategic = [e for e in enterprises or [] if e.get("status") == "Strategic"]
    if strategic:
        lines.append("\n## Strategic")
        for e in strategic:
            lines.append(f"- {e['name']} ({e['provenance']}, rank {e['rank']}): {e.get('partnership_count', 0)} partnerships")
    return "\n".join(lines) + "\n"
