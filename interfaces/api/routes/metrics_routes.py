from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status
from lagom import Container
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from application.ports.upload_metrics import UploadMetrics
from infrastructure.metrics.upload_metrics_recorder import UploadMetricsRecorder
from interfaces.dependencies import get_container

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("/uploads", status_code=status.HTTP_200_OK)
async def get_upload_metrics(
    container: Annotated[Container, Depends(get_container)],
) -> dict[str, Any]:
    """Return the profile image upload counters and rates."""
    return container[UploadMetrics].summary()


@router.get("/prometheus", status_code=status.HTTP_200_OK)
async def get_prometheus_metrics(
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    registry = container[UploadMetricsRecorder].registry
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
