from typing import Dict, List, Sequence, Tuple

from vmhealth.models.health import (
    DiskMountReading,
    Explanation,
    MetricExplanation,
    MetricName,
    ThresholdPolicy,
    UtilizationReading,
    Verdict,
)

# (within limits, high) per metric
_INTERPRETATIONS: Dict[MetricName, Tuple[str, str]] = {
    MetricName.CPU: (
        "CPU load is within limits.",
        "CPU is high.",
    ),
    MetricName.MEMORY: (
        "Memory usage is within limits.",
        "Memory usage is high.",
    ),
    MetricName.DISK: (
        "Disk usage (highest mount) is within limits.",
        "Disk usage (highest mount) is high.",
    ),
}

NEXT_STEPS: List[str] = [
    "Investigate top CPU consumers: run 'top' or 'htop' or "
    "'ps aux --sort=-%cpu | head -n 10'.",
    "Check memory usage and cached/buffered memory: 'free -h' and "
    "'ps aux --sort=-%mem | head -n 10'.",
    "Identify large files or clean package caches to free disk: 'du -sh /*' or "
    "check '/var/log', '/var/lib/apt/lists', '/var/cache/apt/archives'.",
    "Consider resizing the VM (more vCPU / RAM / disk) or reducing workload.",
]


def format_threshold(policy: ThresholdPolicy) -> str:
    """
    Threshold as shown in reports.

    The user's own spelling is echoed back when known ("060", "60.50");
    otherwise 60.0 renders as "60" and 72.5 as "72.5".
    """
    if policy.threshold_text:
        return policy.threshold_text
    threshold_percent = policy.threshold_percent
    if threshold_percent.is_integer():
        return str(int(threshold_percent))
    return str(threshold_percent)


def _explain_metric(
    name: MetricName,
    reading: UtilizationReading,
    policy: ThresholdPolicy,
    below: bool,
) -> MetricExplanation:
    threshold = format_threshold(policy)
    operator = "<" if below else ">="
    within, high = _INTERPRETATIONS[name]
    return MetricExplanation(
        name=name,
        reading=reading,
        threshold_percent=policy.threshold_percent,
        below_threshold=below,
        comparison=f"{reading.formatted}% {operator} {threshold}%",
        interpretation=within if below else high,
    )


def explain(
    verdict: Verdict,
    cpu: UtilizationReading,
    memory: UtilizationReading,
    disk: UtilizationReading,
    policy: ThresholdPolicy,
    disk_mounts: Sequence[DiskMountReading] = (),
) -> Explanation:
    """
    Describe why ``verdict`` was reached.

    A HEALTHY explanation names the metric(s) below the threshold as reasons;
    an UNHEALTHY one lists all three values and generic next steps.
    """
    readings = {
        MetricName.CPU: cpu,
        MetricName.MEMORY: memory,
        MetricName.DISK: disk,
    }
    threshold = format_threshold(policy)

    metrics = [
        _explain_metric(
            name,
            readings[name],
            policy,
            verdict.per_metric_below_threshold.get(name, False),
        )
        for name in MetricName
    ]
    mounts = [str(mount) for mount in disk_mounts]

    if verdict.is_healthy:
        return Explanation(
            summary=(
                f"At least one metric is below the threshold ({threshold}%). "
                "The following metric(s) are below threshold:"
            ),
            metrics=metrics,
            reasons=[
                f"{name.value} ({readings[name].formatted}%) below threshold"
                for name in verdict.metrics_below_threshold
            ],
            disk_mounts=mounts,
        )

    return Explanation(
        summary=(
            f"All three metrics are at or above the threshold ({threshold}%), "
            "so the VM is considered UNHEALTHY."
        ),
        metrics=metrics,
        disk_mounts=mounts,
        next_steps=list(NEXT_STEPS),
    )
