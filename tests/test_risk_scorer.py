import pytest

from risk_scanner.services.risk_scorer import RiskScorer


@pytest.mark.parametrize("severities, expected", [
    (["low"], 5),
    (["medium"], 10),
    (["high"], 20),
    (["critical"], 30),
    (["critical", "high", "medium", "low"], 65),
    (["critical"] * 4, 100),
    (["high"] * 10, 100),
])
def test_calculate_score(make_vulnerability, severities, expected):
    vulnerabilities = [make_vulnerability(s) for s in severities]

    assert RiskScorer().calculate_score(vulnerabilities) == expected


def test_empty_finding_list_scores_baseline():
    assert RiskScorer().calculate_score([]) == 10


def test_adding_critical_never_decreases_score(make_vulnerability):
    scorer = RiskScorer()
    vulnerabilities = []
    previous = 0
    for severity in ["low", "medium", "high", "low", "critical", "medium", "high", "critical"]:
        vulnerabilities.append(make_vulnerability(severity))
        with_critical = vulnerabilities + [make_vulnerability("critical")]

        assert scorer.calculate_score(with_critical) >= scorer.calculate_score(vulnerabilities)
        assert scorer.calculate_score(vulnerabilities) >= previous
        previous = scorer.calculate_score(vulnerabilities)


@pytest.mark.parametrize("score, expected", [
    (0, "low"),
    (24, "low"),
    (25, "medium"),
    (49, "medium"),
    (50, "high"),
    (69, "high"),
    (70, "critical"),
    (100, "critical"),
])
def test_standard_levels(score, expected):
    assert RiskScorer("standard").get_risk_level(score) == expected


@pytest.mark.parametrize("score, expected", [
    (19, "low"),
    (20, "medium"),
    (40, "high"),
    (64, "high"),
    (65, "critical"),
])
def test_strict_levels(score, expected):
    assert RiskScorer("strict").get_risk_level(score) == expected


@pytest.mark.parametrize("thresholds", ["standard", "strict", (10, 30, 90)])
def test_levels_are_monotonic(thresholds):
    scorer = RiskScorer(thresholds)
    order = ["low", "medium", "high", "critical"]
    ranks = [order.index(scorer.get_risk_level(score)) for score in range(0, 101)]

    assert ranks == sorted(ranks)
    assert ranks[0] == 0 and ranks[-1] == 3


def test_custom_thresholds():
    scorer = RiskScorer((10, 30, 90))

    assert scorer.get_risk_level(10) == "medium"
    assert scorer.get_risk_level(89) == "high"


@pytest.mark.parametrize("thresholds", ["lenient", (50, 40, 70), (0, 10, 20), (10, 20, 101), (10, 20)])
def test_invalid_thresholds(thresholds):
    with pytest.raises(ValueError):
        RiskScorer(thresholds)


def test_describe_level():
    assert RiskScorer.describe_level("low") == "relatively secure"
    assert RiskScorer.describe_level("critical") == "critically vulnerable"
