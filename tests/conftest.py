import pytest

from risk_scanner.models.audit_result import CodeContext, Vulnerability
from risk_scanner.services.auditor import SolidityAuditor


@pytest.fixture
def auditor():
    return SolidityAuditor()


@pytest.fixture
def make_vulnerability():
    """Factory for vulnerabilities with a given severity."""
    def _make(severity, title="Test Finding", line=None):
        return Vulnerability(
            id=f"test-{severity}",
            title=title,
            severity=severity,
            description="test",
            code_context=CodeContext(line_start=line, line_end=line),
            suggested_fix="test"
        )
    return _make
