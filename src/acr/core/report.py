from __future__ import annotations

from typing import Dict, List, Sequence

from acr.core.schemas import SEVERITIES, Finding

REPORT_FILENAME = "code-review-report.md"
REPORT_MIME = "text/markdown"

REPORT_TITLE = "# AI Code Review Report"
EMPTY_REPORT = f"{REPORT_TITLE}\n\nNo issues found. Great job!"

SEVERITY_EMOJI = {
    "Critical": "🔴",
    "Major": "🟠",
    "Minor": "🟡",
    "Info": "🔵",
}


def _finding_block(f: Finding) -> str:
    return "\n\n".join(
        [
            f"### Issue on Line(s): `{f.location}`",
            f"**Description:** {f.description}",
            "**Suggestion:**",
            "```",
            f.suggestion,
            "```",
        ]
    )


def generate_markdown_report(findings: Sequence[Finding]) -> str:
    """Render findings as a Markdown document grouped by severity.

    The output depends only on the findings, so identical input always gives
    identical bytes.
    """
    if not findings:
        return EMPTY_REPORT

    sections: Dict[str, List[str]] = {s: [] for s in SEVERITIES}
    for f in findings:
        sections[f.severity].append(_finding_block(f))

    lines = [REPORT_TITLE, "", "## Summary", "", "| Severity | Count |", "|:---|:---|"]
    for s in SEVERITIES:
        if sections[s]:
            lines.append(f"| {SEVERITY_EMOJI[s]} **{s}** | {len(sections[s])} |")
    lines += ["", "## Detailed Issues", ""]

    for s in SEVERITIES:
        if sections[s]:
            lines += [f"## {SEVERITY_EMOJI[s]} {s} Issues", ""]
            lines.append("\n\n---\n\n".join(sections[s]))
            lines.append("")

    return "\n".join(lines).strip()
