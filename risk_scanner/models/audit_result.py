"""
Models for audit results.
"""
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["low", "medium", "high", "critical"]
RiskLevel = Literal["low", "medium", "high", "critical"]

_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CodeContext(BaseModel):
    """Model for the location of a vulnerability in code."""
    model_config = _MODEL_CONFIG

    line_start: Optional[int] = None
    line_end: Optional[int] = None
    snippet: Optional[str] = None

    def is_empty(self) -> bool:
        return self.line_start is None and self.line_end is None and self.snippet is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Vulnerability(BaseModel):
    """Model for a vulnerability found in the audit."""
    model_config = _MODEL_CONFIG

    id: str
    title: str
    severity: Severity
    description: str
    code_context: CodeContext = CodeContext()
    suggested_fix: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity,
            "description": self.description,
            "codeContext": self.code_context.to_dict(),
            "suggestedFix": self.suggested_fix
        }


class AuditMetrics(BaseModel):
    """Model for aggregate counts derived from the finding list."""
    model_config = _MODEL_CONFIG

    total_vulnerabilities: int
    critical_count: int
    high_count: int
    medium_count: int
    low_count: int
    lines_of_code: int
    function_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True)


class AuditResult(BaseModel):
    """Model for the complete audit result."""
    model_config = _MODEL_CONFIG

    risk_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    summary: str
    vulnerabilities: List[Vulnerability]
    metrics: AuditMetrics

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level,
            "summary": self.summary,
            "vulnerabilities": [vuln.to_dict() for vuln in self.vulnerabilities],
            "metrics": self.metrics.to_dict()
        }
