"""
Report generator for Solidity audit results.
"""
import json
import os
import datetime
from typing import Dict, List, Optional
from jinja2 import Environment, FileSystemLoader, select_autoescape

from risk_scanner.data.vulnerability_catalog import get_vulnerability
from risk_scanner.models.audit_result import AuditResult, Vulnerability


class ReportGenerator:
    """Generator for different formats of audit reports."""

    FORMATS = ("text", "json", "sarif", "html")

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the report generator.

        Args:
            template_dir: Directory containing report templates
        """
        if template_dir is None:
            # Use the templates shipped with the package
            current_dir = os.path.dirname(os.path.abspath(__file__))
            template_dir = os.path.join(os.path.dirname(current_dir), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True
        )

    def generate(self, audit_result: AuditResult, report_format: str, source_name: str = "<input>") -> str:
        """Render a report in one of FORMATS."""
        if report_format == "text":
            return self.generate_text_report(audit_result, source_name)
        elif report_format == "json":
            return self.generate_json_report(audit_result)
        elif report_format == "sarif":
            return self.generate_sarif_report(audit_result, source_name)
        elif report_format == "html":
            return self.generate_html_report(audit_result, source_name)
        raise ValueError(f"Unknown report format: {report_format!r}")

    @staticmethod
    def _category(vuln: Vulnerability) -> str:
        return vuln.id.rsplit("-", 1)[0]

    def _references(self, audit_result: AuditResult) -> Dict[str, List[str]]:
        """Catalog reference links per vulnerability id."""
        references = {}
        for vuln in audit_result.vulnerabilities:
            info = get_vulnerability(self._category(vuln))
            references[vuln.id] = info.references if info else []
        return references

    def generate_text_report(self, audit_result: AuditResult, source_name: str = "<input>") -> str:
        """
        Generate a plain text report.

        Args:
            audit_result: Audit result to generate report for
            source_name: File name shown in the header

        Returns:
            Text report
        """
        template = self.env.get_template("text_report.txt")
        return template.render(
            audit_result=audit_result,
            source_name=source_name,
            references=self._references(audit_result),
            date=datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        )

    def generate_json_report(self, audit_result: AuditResult) -> str:
        """
        Generate a JSON report in the front end's result shape.

        Args:
            audit_result: Audit result to generate report for

        Returns:
            JSON report
        """
        return json.dumps(audit_result.to_dict(), indent=2)

    def generate_sarif_report(self, audit_result: AuditResult, source_name: str = "<input>") -> str:
        """
        Generate a SARIF report.

        Args:
            audit_result: Audit result to generate report for
            source_name: Artifact URI for every result

        Returns:
            SARIF report
        """
        sarif_data = {
            "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json",
            "version": "2.1.0",
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": "Solidity Risk Scanner",
                            "version": "1.0.0",
                            "rules": []
                        }
                    },
                    "results": []
                }
            ]
        }

        run = sarif_data["runs"][0]

        # One rule per category title
        rule_index = {}
        for vuln in audit_result.vulnerabilities:
            if vuln.title in rule_index:
                continue
            category = self._category(vuln)
            rule_id = f"SOLIDITY-{category.upper()}"
            rule_index[vuln.title] = rule_id

            rule = {
                "id": rule_id,
                "shortDescription": {
                    "text": vuln.title
                },
                "help": {
                    "text": vuln.suggested_fix
                },
                "properties": {
                    "tags": ["security", "solidity", "smart-contract"]
                }
            }
            info = get_vulnerability(category)
            if info and info.references:
                rule["helpUri"] = info.references[0]
            run["tool"]["driver"]["rules"].append(rule)

        for vuln in audit_result.vulnerabilities:
            result = {
                "ruleId": rule_index[vuln.title],
                "level": "error" if vuln.severity in ("high", "critical") else "warning",
                "message": {
                    "text": f"{vuln.title}: {vuln.description}"
                },
                "properties": {
                    "severity": vuln.severity
                }
            }

            context = vuln.code_context
            if context.line_start is not None:
                region = {
                    "startLine": context.line_start,
                    "endLine": context.line_end or context.line_start
                }
                if context.snippet:
                    region["snippet"] = {"text": context.snippet}

                result["locations"] = [
                    {
                        "physicalLocation": {
                            "artifactLocation": {
                                "uri": source_name
                            },
                            "region": region
                        }
                    }
                ]

            run["results"].append(result)

        return json.dumps(sarif_data, indent=2)

    def generate_html_report(self, audit_result: AuditResult, source_name: str = "<input>",
                             output_path: Optional[str] = None) -> str:
        """
        Generate an HTML report.

        Args:
            audit_result: Audit result to generate report for
            source_name: File name shown in the header
            output_path: Path to save the HTML report, if any

        Returns:
            The rendered HTML
        """
        template = self.env.get_template("html_report.html")

        html_content = template.render(
            audit_result=audit_result,
            source_name=source_name,
            references=self._references(audit_result),
            date=datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        )

        if output_path:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(html_content)

        return html_content
