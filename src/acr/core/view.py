"""Read-only helpers the UI uses to filter and group findings."""

from __future__ import annotations

from typing import Dict, List, Sequence

from acr.core.schemas import ALL, FILTER_OPTIONS, SEVERITIES, Finding


def display_severity(severity: str) -> str:
    """Severity to render; anything unrecognized is shown as the lowest tier."""
    return severity if severity in SEVERITIES else SEVERITIES[-1]


def filter_findings(findings: Sequence[Finding], severity_filter: str = ALL) -> List[Finding]:
    if severity_filter not in FILTER_OPTIONS:
        raise ValueError(f"Unknown severity filter: {severity_filter!r}")
    if severity_filter == ALL:
        return list(findings)
    return [f for f in findings if f.severity == severity_filter]


def count_by_severity(findings: Sequence[Finding]) -> Dict[str, int]:
    counts = {s: 0 for s in SEVERITIES}
    for f in findings:
        counts[display_severity(f.severity)] += 1
    counts[ALL] = len(findings)
    return counts


def group_by_severity(findings: Sequence[Finding]) -> Dict[str, List[Finding]]:
    groups: Dict[str, List[Finding]] = {s: [] for s in SEVERITIES}
    for f in findings:
        groups[display_severity(f.severity)].append(f)
    return {s: items for s, items in groups.items() if items}
