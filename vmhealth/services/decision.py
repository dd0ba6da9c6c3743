import logging

from vmhealth.models.health import (
    HealthState,
    MetricName,
    ThresholdPolicy,
    UtilizationReading,
    Verdict,
)

logger = logging.getLogger(__name__)


def decide(
    cpu: UtilizationReading,
    memory: UtilizationReading,
    disk: UtilizationReading,
    policy: ThresholdPolicy,
) -> Verdict:
    """
    Combine three readings into a verdict.

    The host is HEALTHY if ANY metric is strictly below the threshold and
    UNHEALTHY only if all three are at or above it: a single metric with
    headroom is taken as capacity to absorb load.

    Invalid readings take part with their 0.0 default, so an unmeasurable
    metric counts as below any positive threshold.
    """
    readings = {
        MetricName.CPU: cpu,
        MetricName.MEMORY: memory,
        MetricName.DISK: disk,
    }
    flags = {
        name: reading.percent < policy.threshold_percent
        for name, reading in readings.items()
    }
    state = HealthState.HEALTHY if any(flags.values()) else HealthState.UNHEALTHY

    if state is HealthState.HEALTHY and all(
        not readings[name].valid for name, below in flags.items() if below
    ):
        logger.info(
            "Verdict HEALTHY rests only on unmeasured metric(s): %s",
            ", ".join(name.value for name, below in flags.items() if below),
        )

    return Verdict(state=state, per_metric_below_threshold=flags)
