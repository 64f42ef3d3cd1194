from engine.confidence import score, weakest
from engine.enums import Confidence


def test_high_requires_all_three_thresholds():
    assert score(0.7, 5.0, 8) is Confidence.high
    assert score(0.69, 5.0, 8) is Confidence.medium
    assert score(0.9, 4.9, 8) is Confidence.medium
    assert score(0.9, 10.0, 7) is Confidence.medium


def test_medium_and_low_boundaries():
    assert score(0.4, 3.0, 5) is Confidence.medium
    assert score(0.39, 3.0, 5) is Confidence.low
    assert score(0.9, 2.9, 20) is Confidence.low
    assert score(0.9, 10.0, 4) is Confidence.low


def test_non_finite_inputs_are_low():
    assert score(float("nan"), 10.0, 20) is Confidence.low
    assert score(0.9, float("inf"), 20) is Confidence.low


def test_monotone_in_each_input():
    tiers = [score(r / 10, 6.0, 10).weight() for r in range(11)]
    assert tiers == sorted(tiers)
    tiers = [score(0.8, float(s), 10).weight() for s in range(10)]
    assert tiers == sorted(tiers)
    tiers = [score(0.8, 6.0, n).weight() for n in range(12)]
    assert tiers == sorted(tiers)


def test_weakest():
    assert weakest(Confidence.high, Confidence.low, Confidence.medium) is Confidence.low
    assert weakest(Confidence.high) is Confidence.high
    assert weakest() is Confidence.low
