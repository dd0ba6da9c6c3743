from vmhealth.config import parse_policy
from vmhealth.models.health import (
    DiskMountReading,
    HealthReport,
    ThresholdPolicy,
    UtilizationReading,
)
from vmhealth.report import render_report
from vmhealth.services.decision import decide
from vmhealth.services.explain import explain


def _report(cpu, mem, disk, threshold=60.0, with_explanation=False):
    policy = ThresholdPolicy(threshold_percent=threshold, sample_interval_seconds=1)
    readings = [UtilizationReading(percent=v) for v in (cpu, mem, disk)]
    mounts = [
        DiskMountReading(mount_path="/", percent_used=45),
        DiskMountReading(mount_path="/data", percent_used=int(disk)),
    ]
    verdict = decide(*readings, policy)
    explanation = None
    if with_explanation:
        explanation = explain(verdict, *readings, policy, mounts)
    return HealthReport(
        hostname="vm-01",
        cpu=readings[0],
        memory=readings[1],
        disk=readings[2],
        disk_mounts=mounts,
        policy=policy,
        verdict=verdict,
        explanation=explanation,
    )


def test_render_report_without_explanation():
    text = render_report(_report(12.3, 45.6, 78.0))

    assert text.splitlines() == [
        "CPU Usage:    12.3%",
        "Memory Usage: 45.6%",
        "Disk Usage:   78.0% (highest across mounts)",
        "Threshold:    60%",
        "VM STATE: HEALTHY",
    ]


def test_render_report_healthy_explanation():
    text = render_report(_report(50.0, 80.0, 90.0, with_explanation=True))
    lines = text.splitlines()

    assert lines[4] == "VM STATE: HEALTHY"
    assert lines[5] == ""
    assert lines[6] == "Explanation:"
    assert "  * CPU:    50.0% < 60%  --> CPU load is within limits." in lines
    assert "  * Memory: 80.0% >= 60%  --> Memory usage is high." in lines
    assert "  * Disk:   90.0% >= 60%  --> Disk usage (highest mount) is high." in lines
    assert "    Detailed mount usages (mount:used%):" in lines
    assert "      /:45%" in lines
    assert "      /data:90%" in lines
    assert lines[-1] == "Reason: CPU (50.0%) below threshold"


def test_render_report_shows_fractional_threshold():
    text = render_report(_report(70.0, 80.0, 90.0, threshold=72.5))
    assert "Threshold:    72.5%" in text.splitlines()


def test_render_report_unhealthy_explanation():
    text = render_report(_report(70.0, 80.0, 90.0, with_explanation=True))
    lines = text.splitlines()

    assert "VM STATE: UNHEALTHY" in lines
    assert "  Metric values:" in lines
    assert "  * CPU:    70.0% (>= 60%)" in lines
    assert "  * Memory: 80.0% (>= 60%)" in lines
    assert "  * Disk:   90.0% (highest mount) (>= 60%)" in lines
    assert "    /data:90%" in lines
    assert "Possible next steps (Ubuntu):" in lines
    assert not any(line.startswith("Reason:") for line in lines)


def test_render_report_echoes_threshold_as_entered():
    report = _report(70.0, 80.0, 90.0, with_explanation=True)
    policy = parse_policy("060", "1")
    report = report.model_copy(update={"policy": policy})

    lines = render_report(report).splitlines()

    assert "Threshold:    060%" in lines
    assert "  * CPU:    70.0% (>= 060%)" in lines
