from typing import Optional

from fastapi import APIRouter, HTTPException, Response

from vmhealth.config import ConfigurationError, get_settings, parse_policy
from vmhealth.models.health import HealthReport
from vmhealth.models.host import HostStatus
from vmhealth.services import host_monitor

router = APIRouter()


@router.get("/status", response_model=HostStatus, summary="Host status")
def host_status() -> HostStatus:
    """
    Return the current utilisation readings without a verdict.

    All data collection is delegated to the host_monitor service.
    """
    return host_monitor.get_host_status()


@router.get("/health", response_model=HealthReport, summary="Host health verdict")
def host_health(
    response: Response,
    threshold: Optional[str] = None,
    interval: Optional[str] = None,
    explain: Optional[bool] = None,
) -> HealthReport:
    """
    Run one health check and return the full report.

    Declared sync so the CPU sampling sleep runs in the threadpool rather than
    on the event loop. Responds 200 when HEALTHY and 503 when UNHEALTHY; a
    malformed threshold or interval is rejected with 422 before sampling.
    """
    settings = get_settings()
    try:
        policy = parse_policy(
            threshold if threshold is not None else settings.threshold,
            interval if interval is not None else settings.interval,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    report = host_monitor.run_health_check(
        policy,
        explain=settings.explain if explain is None else explain,
    )
    if not report.verdict.is_healthy:
        response.status_code = 503
    return report
