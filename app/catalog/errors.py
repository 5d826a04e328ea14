"""
Error hierarchy for catalog aggregation.

Each error carries the HTTP status it maps to and a plain-text
message that is safe to show to clients. The exception handler
registered in ``app.main`` turns any ``CatalogError`` into a
``text/plain`` response.
"""

from typing import Optional

from fastapi import status

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


class CatalogError(Exception):
    """Base exception for all catalog failures."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status


class ConfigurationError(CatalogError):
    """Upstream base URLs are missing."""


class UpstreamUnavailableError(CatalogError):
    """The upstream could not be reached or answered with an error status."""

    http_status = status.HTTP_502_BAD_GATEWAY


class UpstreamResponseError(CatalogError):
    """The upstream body could not be read or decoded."""

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)
