"""Health Probes — liveness and readiness.

Invariants:
    - GET /health/ answers 200 whenever the process serves requests
    - GET /health/ready answers 503 unless the database round-trips; the
      activity log writer state is reported but never fails readiness
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_INFO = {"service": "worksite-api", "version": "1.0.0"}


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", **SERVICE_INFO}


@router.get("/ready")
async def readiness(request: Request):
    manager = getattr(request.app.state, "db", None)
    dispatcher = getattr(request.app.state, "activity_log", None)
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "activity_log": (
                "running" if dispatcher is not None and dispatcher.running
                else "stopped"
            ),
        },
    }
