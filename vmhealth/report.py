from typing import List

from vmhealth.models.health import Explanation, HealthReport, MetricName
from vmhealth.services.explain import format_threshold


def _label(name: MetricName) -> str:
    # "CPU:    ", "Memory: ", "Disk:   "
    return f"{name.value + ':':<7} "


def _mount_lines(mounts: List[str], indent: str) -> List[str]:
    if not mounts:
        return []
    lines = [f"{indent}Detailed mount usages (mount:used%):"]
    lines.extend(f"{indent}  {mount}" for mount in mounts)
    return lines


def _healthy_lines(explanation: Explanation) -> List[str]:
    lines = [f"- {explanation.summary}"]
    for metric in explanation.metrics:
        lines.append(
            f"  * {_label(metric.name)}{metric.comparison}  --> {metric.interpretation}"
        )
        if metric.name is MetricName.DISK:
            lines.extend(_mount_lines(explanation.disk_mounts, "    "))
    lines.append("")
    lines.append("Reason: " + "; ".join(explanation.reasons))
    return lines


def _unhealthy_lines(explanation: Explanation, threshold: str) -> List[str]:
    lines = [f"- {explanation.summary}", "  Metric values:"]
    for metric in explanation.metrics:
        suffix = " (highest mount)" if metric.name is MetricName.DISK else ""
        lines.append(
            f"  * {_label(metric.name)}{metric.reading.formatted}%{suffix} "
            f"(>= {threshold}%)"
        )
    lines.extend(_mount_lines(explanation.disk_mounts, "  "))
    lines.append("")
    lines.append("Possible next steps (Ubuntu):")
    lines.extend(f"  - {step}" for step in explanation.next_steps)
    return lines


def render_report(report: HealthReport) -> str:
    """
    Render a HealthReport as the plain-text block printed by the CLI.

    The first five lines (readings, threshold, state) are always present;
    the explanation follows only if the report carries one.
    """
    threshold = format_threshold(report.policy)
    lines = [
        f"CPU Usage:    {report.cpu.formatted}%",
        f"Memory Usage: {report.memory.formatted}%",
        f"Disk Usage:   {report.disk.formatted}% (highest across mounts)",
        f"Threshold:    {threshold}%",
        f"VM STATE: {report.verdict.state.value}",
    ]

    explanation = report.explanation
    if explanation is not None:
        lines.append("")
        lines.append("Explanation:")
        if report.verdict.is_healthy:
            lines.extend(_healthy_lines(explanation))
        else:
            lines.extend(_unhealthy_lines(explanation, threshold))

    return "\n".join(lines)
