from __future__ import annotations

from acr.core.report import EMPTY_REPORT, generate_markdown_report
from acr.core.schemas import Finding


def _finding(idx, severity, location="1", description="d", suggestion="s"):
    return Finding(id=idx, location=location, severity=severity, description=description, suggestion=suggestion)


def test_empty_report() -> None:
    assert generate_markdown_report([]) == EMPTY_REPORT
    assert EMPTY_REPORT == "# AI Code Review Report\n\nNo issues found. Great job!"


def test_single_finding_document() -> None:
    report = generate_markdown_report([_finding(0, "Major", "4-6", "Loop is O(n^2)", "Use a set")])

    assert report == (
        "# AI Code Review Report\n"
        "\n"
        "## Summary\n"
        "\n"
        "| Severity | Count |\n"
        "|:---|:---|\n"
        "| 🟠 **Major** | 1 |\n"
        "\n"
        "## Detailed Issues\n"
        "\n"
        "## 🟠 Major Issues\n"
        "\n"
        "### Issue on Line(s): `4-6`\n"
        "\n"
        "**Description:** Loop is O(n^2)\n"
        "\n"
        "**Suggestion:**\n"
        "\n"
        "```\n"
        "\n"
        "Use a set\n"
        "\n"
        "```"
    )


def test_summary_lists_only_present_severities_in_order() -> None:
    findings = [_finding(0, "Info"), _finding(1, "Critical"), _finding(2, "Info")]
    report = generate_markdown_report(findings)

    assert "| 🔴 **Critical** | 1 |" in report
    assert "| 🔵 **Info** | 2 |" in report
    assert "Major" not in report
    assert "Minor" not in report
    assert report.index("## 🔴 Critical Issues") < report.index("## 🔵 Info Issues")


def test_groups_keep_input_order() -> None:
    findings = [
        _finding(0, "Minor", description="first minor"),
        _finding(1, "Critical", description="only critical"),
        _finding(2, "Minor", description="second minor"),
    ]
    report = generate_markdown_report(findings)

    assert report.index("only critical") < report.index("first minor") < report.index("second minor")
    assert "first minor\n\n**Suggestion:**\n\n```\n\ns\n\n```\n\n---\n\n### Issue" in report


def test_report_is_deterministic() -> None:
    findings = [_finding(i, s) for i, s in enumerate(["Info", "Major", "Critical", "Minor"])]
    assert generate_markdown_report(findings) == generate_markdown_report(list(findings))


def test_resolved_flag_does_not_change_report() -> None:
    f = _finding(0, "Minor")
    assert generate_markdown_report([f]) == generate_markdown_report([f.model_copy(update={"resolved": True})])
