"""
Code metrics derived from the source and the final finding list.
"""
from typing import Sequence

from risk_scanner.models.audit_result import AuditMetrics, Vulnerability
from risk_scanner.services.code_analyzer import count_function_declarations, split_lines


def calculate_metrics(code: str, vulnerabilities: Sequence[Vulnerability]) -> AuditMetrics:
    """
    Calculate code metrics.

    Args:
        code: Solidity source that was audited
        vulnerabilities: Final finding list

    Returns:
        Metrics for the report
    """
    counts = {"critical": 0, "high": 0, "medium": 0, "low": 0}
    for vuln in vulnerabilities:
        counts[vuln.severity] += 1

    return AuditMetrics(
        total_vulnerabilities=len(vulnerabilities),
        critical_count=counts["critical"],
        high_count=counts["high"],
        medium_count=counts["medium"],
        low_count=counts["low"],
        lines_of_code=sum(1 for line in split_lines(code) if line.strip()),
        function_count=count_function_declarations(code)
    )
