import logging
from typing import List, Optional, Tuple

import psutil

from vmhealth.models.health import DiskMountReading, UtilizationReading

logger = logging.getLogger(__name__)

# In-memory and kernel pseudo filesystems report misleading capacity;
# read-only squashfs images (snaps) always read 100%.
EXCLUDED_FSTYPES = frozenset(
    {
        "tmpfs",
        "devtmpfs",
        "ramfs",
        "proc",
        "sysfs",
        "devpts",
        "cgroup",
        "cgroup2",
        "securityfs",
        "debugfs",
        "tracefs",
        "pstore",
        "bpf",
        "autofs",
        "mqueue",
        "hugetlbfs",
        "configfs",
        "fusectl",
        "squashfs",
        "nsfs",
        "binfmt_misc",
        "rpc_pipefs",
        "efivarfs",
        "selinuxfs",
    }
)


def _list_mountpoints() -> List[str]:
    """
    Mount points worth measuring, in enumeration order, without duplicates.

    Every mount is listed (all=True) so network, FUSE and overlay roots are
    kept; only in-memory and kernel pseudo filesystems are filtered here.
    Remaining zero-capacity mounts are dropped by _percent_used().
    """
    try:
        partitions = psutil.disk_partitions(all=True)
    except (psutil.Error, OSError) as exc:
        logger.warning("Could not enumerate mounted filesystems: %s", exc)
        return []

    mountpoints: List[str] = []
    for part in partitions:
        if part.fstype in EXCLUDED_FSTYPES:
            continue
        if part.mountpoint in mountpoints:
            continue
        mountpoints.append(part.mountpoint)
    return mountpoints


def _percent_used(mountpoint: str) -> Optional[int]:
    """
    Capacity used on ``mountpoint`` as a truncated integer percent.

    Uses the same basis as ``df``: used / (used + available to unprivileged
    users). Returns None if the mount cannot be read or has no capacity.
    """
    try:
        usage = psutil.disk_usage(mountpoint)
    except (psutil.Error, OSError) as exc:
        logger.debug("Skipping %s: %s", mountpoint, exc)
        return None

    capacity = usage.used + usage.free
    if capacity <= 0:
        logger.debug("Skipping %s: zero capacity", mountpoint)
        return None

    return min(int(usage.used * 100 / capacity), 100)


def sample_disk() -> Tuple[UtilizationReading, Tuple[DiskMountReading, ...]]:
    """
    Measure usage of every real mounted filesystem.

    Returns the scalar reading (the fullest mount drives it) and the per-mount
    breakdown in enumeration order. No eligible mounts yields an invalid
    reading and an empty breakdown.
    """
    mounts: List[DiskMountReading] = []
    for mountpoint in _list_mountpoints():
        percent = _percent_used(mountpoint)
        if percent is None:
            continue
        mounts.append(DiskMountReading(mount_path=mountpoint, percent_used=percent))

    if not mounts:
        logger.warning("No eligible mounted filesystems found")
        return UtilizationReading.unavailable(), ()

    highest = max(mount.percent_used for mount in mounts)
    logger.debug(
        "Disk usage %s%% (highest of %s)", highest, ", ".join(str(m) for m in mounts)
    )
    return UtilizationReading(percent=float(highest), valid=True), tuple(mounts)
