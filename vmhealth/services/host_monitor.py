import logging
import socket
import time

import psutil

from vmhealth.models.health import HealthReport, ThresholdPolicy
from vmhealth.models.host import HostStatus
from vmhealth.services.cpu_sampler import sample_cpu
from vmhealth.services.decision import decide
from vmhealth.services.disk_sampler import sample_disk
from vmhealth.services.explain import explain as build_explanation
from vmhealth.services.memory_sampler import sample_memory

logger = logging.getLogger(__name__)

# Short enough for a status request, long enough for the CPU counters to move.
STATUS_CPU_WINDOW_SECONDS = 0.1


def run_health_check(policy: ThresholdPolicy, explain: bool = False) -> HealthReport:
    """
    Run one complete health check and return it as a HealthReport.

    Sampling is strictly sequential: CPU (blocks for the sample interval),
    then memory, then disk. The verdict and the optional explanation are
    derived from those readings only.
    """
    cpu = sample_cpu(policy.sample_interval_seconds)
    memory = sample_memory()
    disk, mounts = sample_disk()

    verdict = decide(cpu, memory, disk, policy)
    logger.info(
        "cpu=%s%% memory=%s%% disk=%s%% threshold=%s%% -> %s",
        cpu.formatted,
        memory.formatted,
        disk.formatted,
        policy.threshold_percent,
        verdict.state.value,
    )

    explanation = None
    if explain:
        explanation = build_explanation(verdict, cpu, memory, disk, policy, mounts)

    return HealthReport(
        hostname=socket.gethostname(),
        cpu=cpu,
        memory=memory,
        disk=disk,
        disk_mounts=list(mounts),
        policy=policy,
        verdict=verdict,
        explanation=explanation,
    )


def get_host_status(interval_seconds: float = STATUS_CPU_WINDOW_SECONDS) -> HostStatus:
    """
    Readings snapshot of this host plus hostname and uptime, without a verdict.

    Samples in the same order as run_health_check but over a short CPU window,
    so the status endpoint answers quickly.
    """
    boot_time = psutil.boot_time()
    uptime_seconds = max(int(time.time() - boot_time), 0)

    cpu = sample_cpu(interval_seconds)
    memory = sample_memory()
    disk, mounts = sample_disk()
    return HostStatus(
        hostname=socket.gethostname(),
        uptime_seconds=uptime_seconds,
        cpu=cpu,
        memory=memory,
        disk=disk,
        disk_mounts=list(mounts),
    )
