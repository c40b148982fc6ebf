"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - authz_decisions_total{scope, outcome}
    - club_switch_total{outcome}
    - sessions_started_total{auto_selected}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
