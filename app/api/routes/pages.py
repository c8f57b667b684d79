"""Console pages served behind the navigation gate."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request


router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/")
def index(request: Request) -> dict[str, Any]:
    # Anonymous visitors land here; the login form lives on the index page.
    return {"page": "index", "redirect": request.query_params.get("redirect")}


@router.get("/dashboard")
def dashboard() -> dict[str, str]:
    return {"page": "dashboard"}


@router.get("/settings")
def settings() -> dict[str, str]:
    return {"page": "settings"}


@router.get("/list/{resource}")
def resource_list(resource: str) -> dict[str, str]:
    return {"page": "list", "resource": resource}
