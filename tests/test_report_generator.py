import json

import pytest

from risk_scanner.services.auditor import SolidityAuditor
from risk_scanner.services.report_generator import ReportGenerator
from tests.sources import CLEAN_SOURCE, WITHDRAW_CALL_LINE, WITHDRAW_SOURCE


@pytest.fixture
def generator():
    return ReportGenerator()


@pytest.fixture
def withdraw_result():
    return SolidityAuditor().audit_source(WITHDRAW_SOURCE)


def test_json_report_matches_result_dict(generator, withdraw_result):
    report = json.loads(generator.generate_json_report(withdraw_result))

    assert report == withdraw_result.to_dict()


def test_text_report(generator, withdraw_result):
    report = generator.generate_text_report(withdraw_result, "Bank.sol")

    assert "Source: Bank.sol" in report
    assert f"Risk score: {withdraw_result.risk_score}/100" in report
    assert "[HIGH] Reentrancy Vulnerability" in report
    assert f"lines {WITHDRAW_CALL_LINE}-" in report


def test_text_report_without_location(generator):
    result = SolidityAuditor().audit_source(CLEAN_SOURCE)
    report = generator.generate_text_report(result)

    assert "No Critical Issues Detected" in report
    assert "Location" not in report


def test_sarif_report(generator, withdraw_result):
    sarif = json.loads(generator.generate_sarif_report(withdraw_result, "Bank.sol"))
    run = sarif["runs"][0]

    assert sarif["version"] == "2.1.0"
    assert {rule["id"] for rule in run["tool"]["driver"]["rules"]} == {
        "SOLIDITY-REENTRANCY", "SOLIDITY-ACCESS-CONTROL"
    }
    first = run["results"][0]
    assert first["level"] == "error"
    location = first["locations"][0]["physicalLocation"]
    assert location["artifactLocation"]["uri"] == "Bank.sol"
    assert location["region"]["startLine"] == WITHDRAW_CALL_LINE


def test_sarif_informational_finding_has_no_location(generator):
    result = SolidityAuditor().audit_source(CLEAN_SOURCE)
    run = json.loads(generator.generate_sarif_report(result))["runs"][0]

    assert run["results"][0]["level"] == "warning"
    assert "locations" not in run["results"][0]


def test_sarif_rules_link_to_references(generator, withdraw_result):
    rules = json.loads(generator.generate_sarif_report(withdraw_result))["runs"][0]["tool"]["driver"]["rules"]
    help_uris = {rule["id"]: rule.get("helpUri") for rule in rules}

    assert help_uris["SOLIDITY-REENTRANCY"] == "https://swcregistry.io/docs/SWC-107"
    assert help_uris["SOLIDITY-ACCESS-CONTROL"] == "https://swcregistry.io/docs/SWC-105"


def test_informational_rule_has_no_reference(generator):
    result = SolidityAuditor().audit_source(CLEAN_SOURCE)
    rule = json.loads(generator.generate_sarif_report(result))["runs"][0]["tool"]["driver"]["rules"][0]

    assert "helpUri" not in rule
    assert "References" not in generator.generate_text_report(result)


def test_text_and_html_reports_list_references(generator, withdraw_result):
    text = generator.generate_text_report(withdraw_result)
    html = generator.generate_html_report(withdraw_result)

    assert "• References:" in text
    assert "    https://swcregistry.io/docs/SWC-107" in text
    assert '<a href="https://swcregistry.io/docs/SWC-107">' in html


def test_html_report_escapes_snippets(generator, withdraw_result, tmp_path):
    output = tmp_path / "report.html"
    html = generator.generate_html_report(withdraw_result, "Bank.sol", output_path=str(output))

    assert html.startswith("<!DOCTYPE html>")
    assert "Reentrancy Vulnerability" in html
    assert 'call{value: amount}("")' not in html
    assert "call{value: amount}(&#34;&#34;)" in html
    assert output.read_text(encoding="utf-8") == html


@pytest.mark.parametrize("report_format", ReportGenerator.FORMATS)
def test_generate_dispatch(generator, withdraw_result, report_format):
    assert generator.generate(withdraw_result, report_format)


def test_generate_unknown_format(generator, withdraw_result):
    with pytest.raises(ValueError):
        generator.generate(withdraw_result, "pdf")
