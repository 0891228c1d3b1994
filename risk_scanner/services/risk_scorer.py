"""
Risk scorer for audit findings.
"""
from typing import Iterable, Tuple, Union

from risk_scanner.models.audit_result import Vulnerability


class RiskScorer:
    """
    Maps a finding list to a 0-100 score and a four-level risk label.

    Scores are the capped sum of per-severity weights. Levels come from an
    ascending (medium, high, critical) threshold table: a score at or above a
    threshold reaches that level.
    """

    SEVERITY_WEIGHTS = {
        "critical": 30,
        "high": 20,
        "medium": 10,
        "low": 5
    }

    MAX_SCORE = 100
    # Score reported for an empty finding list
    BASELINE_SCORE = 10

    THRESHOLD_TABLES = {
        "standard": (25, 50, 70),
        "strict": (20, 40, 65)
    }

    LEVEL_LABELS = {
        "low": "relatively secure",
        "medium": "moderately risky",
        "high": "highly risky",
        "critical": "critically vulnerable"
    }

    def __init__(self, thresholds: Union[str, Tuple[int, int, int]] = "standard"):
        """
        Initialize the scorer.

        Args:
            thresholds: Name of a built-in table or a (medium, high, critical) tuple
        """
        if isinstance(thresholds, str):
            if thresholds not in self.THRESHOLD_TABLES:
                raise ValueError(
                    f"Unknown threshold table {thresholds!r}; expected one of {sorted(self.THRESHOLD_TABLES)}"
                )
            thresholds = self.THRESHOLD_TABLES[thresholds]

        thresholds = tuple(thresholds)
        if len(thresholds) != 3 or not (0 < thresholds[0] < thresholds[1] < thresholds[2] <= self.MAX_SCORE):
            raise ValueError(f"Thresholds must be three ascending scores in (0, 100]: {thresholds}")

        self.thresholds = thresholds

    def calculate_score(self, vulnerabilities: Iterable[Vulnerability]) -> int:
        """Sum severity weights, capped at 100."""
        vulnerabilities = list(vulnerabilities)
        if not vulnerabilities:
            return self.BASELINE_SCORE

        score = sum(self.SEVERITY_WEIGHTS[vuln.severity] for vuln in vulnerabilities)
        return min(self.MAX_SCORE, score)

    def get_risk_level(self, score: int) -> str:
        """Get risk level from score."""
        medium, high, critical = self.thresholds
        if score >= critical:
            return "critical"
        elif score >= high:
            return "high"
        elif score >= medium:
            return "medium"
        else:
            return "low"

    @classmethod
    def describe_level(cls, level: str) -> str:
        """Qualitative phrase used in report summaries."""
        return cls.LEVEL_LABELS[level]

