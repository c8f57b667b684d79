"""Health check endpoints."""

from fastapi import APIRouter


router = APIRouter(tags=["health"])


@router.get("/api/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/up", include_in_schema=False)
def up() -> dict[str, str]:
    return {"status": "up"}
