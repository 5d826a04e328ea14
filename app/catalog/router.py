"""
Route definitions for the catalogue API.

Endpoints:
- GET  /catalog          : every book enriched with its author name

The handler is a thin wrapper around ``fetch_catalog``. Settings and
the outbound HTTP client arrive through dependencies so that tests can
swap them without touching the environment or the network.
"""

from __future__ import annotations

from typing import List

import httpx
from fastapi import APIRouter, Depends, Request

from app.config import Settings, get_settings

from .aggregator import fetch_catalog
from .schemas import CatalogItem


router = APIRouter(tags=["catalog"])


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared client opened in the application lifespan."""
    return request.app.state.http_client


@router.get("/catalog", response_model=List[CatalogItem])
async def get_catalog(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> List[CatalogItem]:
    """Return the consolidated catalog.

    Upstream and configuration failures are raised as ``CatalogError``
    and rendered as plain text by the application's error handler.
    """
    return await fetch_catalog(settings, client)
