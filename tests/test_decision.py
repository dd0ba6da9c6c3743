import itertools

import pytest

from vmhealth.models.health import (
    HealthState,
    MetricName,
    ThresholdPolicy,
    UtilizationReading,
)
from vmhealth.services.decision import decide


def _r(percent, valid=True):
    return UtilizationReading(percent=percent, valid=valid)


def _policy(threshold):
    return ThresholdPolicy(threshold_percent=threshold, sample_interval_seconds=1)


def test_all_metrics_at_or_above_threshold_is_unhealthy():
    verdict = decide(_r(70.0), _r(80.0), _r(90.0), _policy(60))

    assert verdict.state is HealthState.UNHEALTHY
    assert verdict.per_metric_below_threshold == {
        MetricName.CPU: False,
        MetricName.MEMORY: False,
        MetricName.DISK: False,
    }
    assert verdict.exit_code == 1
    assert verdict.metrics_below_threshold == []


def test_single_metric_below_threshold_is_healthy():
    verdict = decide(_r(50.0), _r(80.0), _r(90.0), _policy(60))

    assert verdict.state is HealthState.HEALTHY
    assert verdict.per_metric_below_threshold[MetricName.CPU] is True
    assert verdict.per_metric_below_threshold[MetricName.MEMORY] is False
    assert verdict.per_metric_below_threshold[MetricName.DISK] is False
    assert verdict.exit_code == 0
    assert verdict.metrics_below_threshold == [MetricName.CPU]


def test_unmeasured_metric_counts_as_below_threshold():
    """An invalid CPU reading keeps its 0.0 default and carries the verdict."""
    cpu = UtilizationReading.unavailable()

    verdict = decide(cpu, _r(80.0), _r(90.0), _policy(60))

    assert verdict.per_metric_below_threshold[MetricName.CPU] is True
    assert verdict.state is HealthState.HEALTHY


@pytest.mark.parametrize(
    "readings",
    [
        (0.0, 0.0, 0.0),
        (0.0, 50.0, 100.0),
        (99.9, 99.9, 99.9),
    ],
)
def test_zero_threshold_is_always_unhealthy(readings):
    cpu, mem, disk = (_r(value) for value in readings)
    verdict = decide(cpu, mem, disk, _policy(0))
    assert verdict.state is HealthState.UNHEALTHY


def test_comparison_uses_real_numbers():
    # Truncated to integers both sides would read 59 < 59.
    verdict = decide(_r(59.96), _r(80.0), _r(90.0), _policy(59.95))
    assert verdict.state is HealthState.UNHEALTHY

    verdict = decide(_r(59.94), _r(80.0), _r(90.0), _policy(59.95))
    assert verdict.state is HealthState.HEALTHY


def test_value_equal_to_threshold_is_not_below():
    verdict = decide(_r(60.0), _r(60.0), _r(60.0), _policy(60))
    assert verdict.state is HealthState.UNHEALTHY


def test_healthy_iff_minimum_below_threshold():
    values = [0.0, 30.0, 59.9, 60.0, 60.1, 100.0, 100.4]
    for threshold in (0.0, 30.0, 60.0, 100.0):
        for c, m, d in itertools.product(values, repeat=3):
            verdict = decide(_r(c), _r(m), _r(d), _policy(threshold))
            expected = min(c, m, d) < threshold
            assert verdict.is_healthy is expected, (c, m, d, threshold)


def test_decide_is_idempotent():
    args = (_r(50.0), _r(80.0), _r(90.0), _policy(60))
    assert decide(*args) == decide(*args)
