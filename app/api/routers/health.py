"""Health endpoint router composition for app and ledger store checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.db import LedgerStoreHealthPort
from app.domain import AppMetadata


def api_create_health_router(store_health_service: LedgerStoreHealthPort, metadata: AppMetadata) -> APIRouter:
    """Create health-check router with app status, uptime, and store status.

    Args:
        store_health_service: Store-layer health service interface.
        metadata: Application metadata carrying the process start time.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if store_health_service is None:
        raise ValueError("store_health_service must not be None")
    if metadata is None:
        raise ValueError("metadata must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application and ledger store health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            ConnectionError: Raised when store health check fails.
        """

        now_utc = datetime.now(timezone.utc)
        common_payload = {
            "app": "up",
            "service": metadata.application_name,
            "timestamp": now_utc.isoformat(),
            "uptime_seconds": round((now_utc - metadata.started_at_utc).total_seconds(), 3),
            "target": store_health_service.db_connection_label(),
        }
        try:
            store_health = store_health_service.db_check_health()
            payload = {
                "status": "ok",
                **common_payload,
                "store": store_health.status,
                "detail": store_health.detail,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        except ConnectionError as error:
            payload = {
                "status": "degraded",
                **common_payload,
                "store": "down",
                "detail": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return router
