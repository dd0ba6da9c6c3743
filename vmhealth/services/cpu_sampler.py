import logging
import time
from typing import Tuple

import psutil

from vmhealth.models.health import UtilizationReading

logger = logging.getLogger(__name__)

# guest/guest_nice are already accounted in user/nice and are left out.
_IDLE_FIELDS = ("idle", "iowait")
_BUSY_FIELDS = ("user", "nice", "system", "irq", "softirq", "steal")


def _read_cpu_times() -> Tuple[float, float]:
    """
    Take one snapshot of the aggregated CPU time counters.

    Returns (idle, total) in seconds. Counters the platform does not expose
    (e.g. iowait or steal outside Linux) count as zero.
    """
    times = psutil.cpu_times()
    idle = sum(getattr(times, name, 0.0) for name in _IDLE_FIELDS)
    busy = sum(getattr(times, name, 0.0) for name in _BUSY_FIELDS)
    return idle, idle + busy


def sample_cpu(interval_seconds: float = 1) -> UtilizationReading:
    """
    Measure CPU utilisation over ``interval_seconds``.

    Two counter snapshots are taken around a blocking sleep; usage is the
    non-idle share of the elapsed CPU time, rounded to one decimal. A zero or
    negative elapsed total (zero interval, clock anomaly, counter wrap) yields
    an invalid reading instead of a division error.
    """
    try:
        idle_start, total_start = _read_cpu_times()
        time.sleep(interval_seconds)
        idle_end, total_end = _read_cpu_times()
    except (psutil.Error, OSError) as exc:
        logger.warning("CPU counters unavailable: %s", exc)
        return UtilizationReading.unavailable()
    except (OverflowError, ValueError) as exc:
        logger.warning("Cannot sleep for %ss: %s", interval_seconds, exc)
        return UtilizationReading.unavailable()

    delta_total = total_end - total_start
    delta_idle = idle_end - idle_start

    if delta_total <= 0:
        logger.warning(
            "CPU counters did not advance over %ss window (delta=%s)",
            interval_seconds,
            delta_total,
        )
        return UtilizationReading.unavailable()

    percent = round((delta_total - delta_idle) / delta_total * 100, 1)
    logger.debug("CPU usage %.1f%% over %ss", percent, interval_seconds)
    return UtilizationReading(percent=max(percent, 0.0), valid=True)
