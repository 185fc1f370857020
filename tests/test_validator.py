from __future__ import annotations

import json

import pytest

from acr.core.errors import MalformedResponse
from acr.core.schemas import Finding
from acr.core.validator import parse_findings


@pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
def test_blank_response_means_no_findings(raw) -> None:
    assert parse_findings(raw) == []


def test_single_finding_keeps_exact_values() -> None:
    raw = '[{"line":"5","severity":"Critical","description":"d","suggestion":"s"}]'
    findings = parse_findings(raw)

    assert len(findings) == 1
    f = findings[0]
    assert f.location == "5"
    assert f.severity == "Critical"
    assert f.description == "d"
    assert f.suggestion == "s"
    assert f.resolved is False
    assert f.id == 0


def test_empty_array() -> None:
    assert parse_findings("[]") == []


@pytest.mark.parametrize("raw", ["not json", "{}", '{"findings": []}', '"text"', "42", "[1, 2]", '[["a"]]'])
def test_malformed_responses(raw) -> None:
    with pytest.raises(MalformedResponse):
        parse_findings(raw)


def test_malformed_error_has_user_message() -> None:
    with pytest.raises(MalformedResponse) as excinfo:
        parse_findings("not json")
    assert excinfo.value.user_message == "The AI returned a malformed response. Please try again."
    assert "not json" not in excinfo.value.user_message


def test_missing_field_rejects_whole_batch() -> None:
    raw = json.dumps(
        [
            {"line": "1", "severity": "Minor", "description": "ok", "suggestion": "ok"},
            {"line": "2", "severity": "Minor", "description": "no suggestion"},
        ]
    )
    with pytest.raises(MalformedResponse, match="finding 1 is missing suggestion"):
        parse_findings(raw)


def test_unknown_severity_is_rejected() -> None:
    raw = '[{"line":"1","severity":"Blocker","description":"d","suggestion":"s"}]'
    with pytest.raises(MalformedResponse):
        parse_findings(raw)


def test_empty_description_is_rejected() -> None:
    raw = '[{"line":"1","severity":"Info","description":"","suggestion":"s"}]'
    with pytest.raises(MalformedResponse):
        parse_findings(raw)


def test_empty_line_is_accepted() -> None:
    raw = json.dumps(
        [
            {"line": "", "severity": "Info", "description": "general remark", "suggestion": "s"},
            {"line": "3", "severity": "Major", "description": "d", "suggestion": "s"},
        ]
    )
    findings = parse_findings(raw)

    assert len(findings) == 2
    assert findings[0].location == ""
    assert findings[1].location == "3"


def test_null_line_is_rejected() -> None:
    raw = '[{"line":null,"severity":"Info","description":"d","suggestion":"s"}]'
    with pytest.raises(MalformedResponse, match="finding 0 is missing line"):
        parse_findings(raw)


def test_numeric_line_becomes_string() -> None:
    raw = '[{"line":12,"severity":"Major","description":"d","suggestion":"s"}]'
    assert parse_findings(raw)[0].location == "12"


def test_ids_follow_response_order() -> None:
    raw = json.dumps(
        [{"line": str(i), "severity": "Info", "description": "d", "suggestion": "s"} for i in range(3)]
    )
    assert [f.id for f in parse_findings(raw)] == [0, 1, 2]


def test_provider_cannot_set_resolved() -> None:
    raw = '[{"line":"1","severity":"Info","description":"d","suggestion":"s","resolved":true,"done":true}]'
    assert parse_findings(raw)[0].resolved is False


def test_code_fence_is_stripped() -> None:
    raw = '```json\n[{"line":"1","severity":"Info","description":"d","suggestion":"s"}]\n```'
    findings = parse_findings(raw)
    assert findings == [Finding(id=0, location="1", severity="Info", description="d", suggestion="s")]


@pytest.mark.parametrize("raw", ["```json\n```", "```\n\n```", "  ```json\n   \n```  "])
def test_empty_code_fence_means_no_findings(raw) -> None:
    assert parse_findings(raw) == []
