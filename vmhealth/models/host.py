from typing import List

from pydantic import BaseModel, Field

from vmhealth.models.health import DiskMountReading, UtilizationReading


class HostStatus(BaseModel):
    """Point-in-time utilisation snapshot of the local host, without a verdict."""

    hostname: str = Field(..., description="System hostname")
    uptime_seconds: int = Field(
        ...,
        ge=0,
        description="Number of seconds since the system was booted",
    )
    cpu: UtilizationReading = Field(
        ...,
        description="CPU utilisation over the sampling window",
    )
    memory: UtilizationReading = Field(
        ...,
        description="Memory in use, based on available (not free) memory",
    )
    disk: UtilizationReading = Field(
        ...,
        description="Usage of the fullest mounted filesystem",
    )
    disk_mounts: List[DiskMountReading] = Field(
        default_factory=list,
        description="Per-mount usage in enumeration order",
    )
