"""
Solidity code auditor service.
"""
import logging
from typing import List, Dict, Any, Optional, Sequence, Tuple, Union

from risk_scanner.config import Settings
from risk_scanner.exceptions import InvalidInputError, UnsupportedModeError
from risk_scanner.models.audit_request import AuditRequest
from risk_scanner.models.audit_result import AuditResult, AuditMetrics, CodeContext, Vulnerability
from risk_scanner.models.function_record import FunctionRecord
from risk_scanner.data.vulnerability_catalog import INFO, get_vulnerability
from risk_scanner.services.code_analyzer import parse_version, segment_functions
from risk_scanner.services.detectors import Detector, default_detectors
from risk_scanner.services.metrics_calculator import calculate_metrics
from risk_scanner.services.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)

SOURCE_MODES = ("source", "solidity")
ADDRESS_MODE = "address"


class SolidityAuditor:
    """Service for auditing Solidity code."""

    def __init__(self, thresholds: Union[str, Tuple[int, int, int]] = "standard",
                 default_visibility: str = "public", call_check_window: int = 5,
                 safe_arithmetic_version: str = "0.8.0",
                 detectors: Optional[List[Tuple[str, Detector]]] = None):
        """
        Initialize the auditor.

        Args:
            thresholds: Score-to-level table name or (medium, high, critical) tuple
            default_visibility: Visibility assumed for functions that declare none
            call_check_window: Lines after a low-level call searched for a success check
            safe_arithmetic_version: First compiler version with checked arithmetic
            detectors: Replacement detector battery, mainly for tests
        """
        self.scorer = RiskScorer(thresholds)
        self.default_visibility = default_visibility
        self.detectors = detectors if detectors is not None else default_detectors(
            call_check_window=call_check_window,
            safe_version=parse_version(safe_arithmetic_version)
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SolidityAuditor":
        """Build an auditor from application settings."""
        settings = settings or Settings()
        return cls(
            thresholds=settings.risk_thresholds,
            default_visibility=settings.default_visibility,
            call_check_window=settings.call_check_window,
            safe_arithmetic_version=settings.safe_arithmetic_version
        )

    def audit(self, request: AuditRequest) -> AuditResult:
        """Audit the source carried by a request."""
        return self.audit_source(request.source_text, request.input_mode)

    def audit_source(self, source_text: Optional[str], input_mode: str = "source") -> AuditResult:
        """
        Audit Solidity source text.

        Args:
            source_text: Contract source
            input_mode: "source" for raw text; "address" is recognized but unsupported

        Returns:
            Audit result for the source

        Raises:
            UnsupportedModeError: For address lookups
            InvalidInputError: For empty source or an unknown input mode
        """
        if input_mode == ADDRESS_MODE:
            raise UnsupportedModeError("Address lookup not yet implemented")
        if input_mode not in SOURCE_MODES:
            raise InvalidInputError(f"Unknown input mode: {input_mode!r}")
        if not source_text or not source_text.strip():
            raise InvalidInputError("Code cannot be empty")

        functions = segment_functions(source_text, self.default_visibility)
        logger.info(f"Auditing {len(source_text.splitlines())} lines, {len(functions)} functions segmented")

        vulnerabilities = self._run_detectors(source_text, functions)
        metrics = calculate_metrics(source_text, vulnerabilities)
        risk_score = self.scorer.calculate_score(vulnerabilities)
        risk_level = self.scorer.get_risk_level(risk_score)

        logger.info(f"Audit finished: {len(vulnerabilities)} findings, risk {risk_score} ({risk_level})")

        return AuditResult(
            risk_score=risk_score,
            risk_level=risk_level,
            summary=self._generate_summary(risk_level, metrics),
            vulnerabilities=vulnerabilities,
            metrics=metrics
        )

    def _run_detectors(self, code: str, functions: Sequence[FunctionRecord]) -> List[Vulnerability]:
        """
        Run every detector and combine their drafts.

        Drafts are turned into vulnerabilities in detector order. A draft
        whose title and start line were already reported is dropped.
        """
        all_vulnerabilities: List[Vulnerability] = []
        seen_vulnerabilities = set()

        for name, detector in self.detectors:
            results = detector(code, functions)
            logger.debug(f"Detector {name} produced {len(results)} candidate findings")

            for result in results:
                info = get_vulnerability(result['category'])
                key = (info.title, result.get('line_start'))

                if key in seen_vulnerabilities:
                    continue
                seen_vulnerabilities.add(key)

                all_vulnerabilities.append(self._build_vulnerability(result, len(all_vulnerabilities) + 1))

        if not all_vulnerabilities:
            all_vulnerabilities.append(self._build_vulnerability({'category': INFO, 'severity': 'low'}, 1))

        return all_vulnerabilities

    @staticmethod
    def _build_vulnerability(result: Dict[str, Any], number: int) -> Vulnerability:
        info = get_vulnerability(result['category'])

        description = info.description
        if result.get('note'):
            description = f"{description} {result['note']}"

        return Vulnerability(
            id=f"{info.key}-{number}",
            title=info.title,
            severity=result['severity'],
            description=description,
            code_context=CodeContext(
                line_start=result.get('line_start'),
                line_end=result.get('line_end'),
                snippet=result.get('snippet')
            ),
            suggested_fix=info.remediation_example
        )

    @staticmethod
    def _generate_summary(risk_level: str, metrics: AuditMetrics) -> str:
        """Generate human-readable summary."""
        return (
            f"The contract analysis indicates a {RiskScorer.describe_level(risk_level)} security posture. "
            f"Found {metrics.total_vulnerabilities} potential vulnerability/vulnerabilities across "
            f"{metrics.lines_of_code} lines of code. {metrics.function_count} function(s) analyzed."
        )


def analyze_contract(source_text: str, input_mode: str = "source",
                     settings: Optional[Settings] = None) -> AuditResult:
    """Audit source text with an auditor configured from settings."""
    return SolidityAuditor.from_settings(settings).audit_source(source_text, input_mode)
