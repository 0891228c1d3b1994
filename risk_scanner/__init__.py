"""
Heuristic security scanner for Solidity smart contracts.
"""
from risk_scanner.exceptions import AuditError, InvalidInputError, UnsupportedModeError
from risk_scanner.models.audit_result import AuditResult
from risk_scanner.services.auditor import SolidityAuditor, analyze_contract

__version__ = "1.0.0"

__all__ = [
    "AuditError",
    "AuditResult",
    "InvalidInputError",
    "SolidityAuditor",
    "UnsupportedModeError",
    "analyze_contract",
]
