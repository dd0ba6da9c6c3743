import logging

import psutil

from vmhealth.models.health import UtilizationReading

logger = logging.getLogger(__name__)


def sample_memory() -> UtilizationReading:
    """
    Return memory utilisation based on *available* memory.

    psutil's ``available`` mirrors MemAvailable on Linux, so reclaimable page
    cache and buffers are not counted as used.
    """
    try:
        vm = psutil.virtual_memory()
    except (psutil.Error, OSError) as exc:
        logger.warning("Memory statistics unavailable: %s", exc)
        return UtilizationReading.unavailable()

    total = getattr(vm, "total", None)
    available = getattr(vm, "available", None)

    if total is None or available is None or total <= 0:
        logger.warning(
            "Memory statistics incomplete (total=%s, available=%s)", total, available
        )
        return UtilizationReading.unavailable()

    used = total - available
    percent = round(used / total * 100, 1)
    logger.debug("Memory usage %.1f%% (%s of %s bytes)", percent, used, total)
    return UtilizationReading(percent=max(percent, 0.0), valid=True)
