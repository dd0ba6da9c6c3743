from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricName(str, Enum):
    CPU = "CPU"
    MEMORY = "Memory"
    DISK = "Disk"


class HealthState(str, Enum):
    HEALTHY = "HEALTHY"
    UNHEALTHY = "UNHEALTHY"


class UtilizationReading(BaseModel):
    """One metric's utilisation at sample time."""

    model_config = ConfigDict(frozen=True)

    percent: float = Field(
        0.0,
        ge=0.0,
        description="Utilisation in percent; sampling artifacts may exceed 100",
    )
    valid: bool = Field(
        True,
        description="False if the underlying data source was unusable",
    )

    @classmethod
    def unavailable(cls) -> "UtilizationReading":
        return cls(percent=0.0, valid=False)

    @property
    def formatted(self) -> str:
        return f"{self.percent:.1f}"


class DiskMountReading(BaseModel):
    """Utilisation of a single mounted filesystem."""

    model_config = ConfigDict(frozen=True)

    mount_path: str = Field(..., description="Mount point, e.g. / or /data")
    percent_used: int = Field(
        ...,
        ge=0,
        le=100,
        description="Capacity used in percent, truncated",
    )

    def __str__(self) -> str:
        return f"{self.mount_path}:{self.percent_used}%"


class ThresholdPolicy(BaseModel):
    """Validated threshold and CPU sampling window."""

    model_config = ConfigDict(frozen=True)

    threshold_percent: float = Field(
        60.0,
        ge=0.0,
        allow_inf_nan=False,
        description="A metric strictly below this value counts as healthy",
    )
    sample_interval_seconds: int = Field(
        1,
        ge=0,
        description="Length of the CPU sampling window in seconds",
    )
    threshold_text: Optional[str] = Field(
        None,
        description="Threshold exactly as the user entered it, for display",
    )


class Verdict(BaseModel):
    """Outcome of the decision engine for one run."""

    model_config = ConfigDict(frozen=True)

    state: HealthState
    per_metric_below_threshold: Dict[MetricName, bool]

    @property
    def is_healthy(self) -> bool:
        return self.state is HealthState.HEALTHY

    @property
    def exit_code(self) -> int:
        return 0 if self.is_healthy else 1

    @property
    def metrics_below_threshold(self) -> List[MetricName]:
        return [
            name
            for name in MetricName
            if self.per_metric_below_threshold.get(name, False)
        ]


class MetricExplanation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: MetricName
    reading: UtilizationReading
    threshold_percent: float
    below_threshold: bool
    comparison: str = Field(..., description='e.g. "50.0% < 60%"')
    interpretation: str


class Explanation(BaseModel):
    """Human readable reasoning behind a verdict."""

    model_config = ConfigDict(frozen=True)

    summary: str
    metrics: List[MetricExplanation]
    reasons: List[str] = Field(
        default_factory=list,
        description="Metrics that made the host pass (HEALTHY only)",
    )
    disk_mounts: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(
        default_factory=list,
        description="Generic remediation hints (UNHEALTHY only)",
    )


class HealthReport(BaseModel):
    """Everything one health check produced."""

    model_config = ConfigDict(frozen=True)

    hostname: str
    cpu: UtilizationReading
    memory: UtilizationReading
    disk: UtilizationReading
    disk_mounts: List[DiskMountReading] = Field(default_factory=list)
    policy: ThresholdPolicy
    verdict: Verdict
    explanation: Optional[Explanation] = None
