"""
HTTP access to the Authors and Books upstream services.

Both upstreams expose a single collection endpoint returning a JSON
array (``GET {base}/authors`` and ``GET {base}/books``). This module
fetches those collections with a shared ``httpx.AsyncClient`` and
decodes them into the ``Author`` and ``Book`` schemas.

Failures are split in two families so the HTTP layer can answer with
the right status:

* ``UpstreamUnavailableError`` (502) when the request itself fails
  (connection refused, timeout before the response arrives...) or the
  upstream answers with a non-2xx status once redirects are followed.
* ``UpstreamResponseError`` (500) when the body cannot be read in
  time or does not decode as a list of records.

The timeout bounds the whole exchange, body included, not each
network operation. Nothing is retried or cached; every call hits the
upstream.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import UpstreamResponseError, UpstreamUnavailableError
from .schemas import Author, Book


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

RecordT = TypeVar("RecordT", bound=BaseModel)


def create_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the client used for every upstream call."""
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport)


async def _get_body(
    client: httpx.AsyncClient,
    url: str,
    label: str,
    unavailable_message: str,
    timeout: float,
) -> bytes:
    """Perform a GET and return the raw body within ``timeout`` seconds.

    The response is streamed so that a failure while reading the
    body can be told apart from a failure to obtain a response.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    try:
        request = client.build_request("GET", url, headers={"Accept": "application/json"})
        response = await asyncio.wait_for(client.send(request, stream=True), timeout)
    except asyncio.TimeoutError as exc:
        logger.error("Timed out after %ss fetching %s from %s", timeout, label, url)
        raise UpstreamUnavailableError(unavailable_message) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Error fetching %s from %s: %s", label, url, exc)
        raise UpstreamUnavailableError(unavailable_message) from exc

    try:
        if not response.is_success:
            logger.error(
                "Error fetching %s: %s returned status %s", label, url, response.status_code
            )
            raise UpstreamUnavailableError(unavailable_message)
        try:
            return await asyncio.wait_for(response.aread(), max(deadline - loop.time(), 0))
        except asyncio.TimeoutError as exc:
            logger.error("Timed out after %ss reading %s response from %s", timeout, label, url)
            raise UpstreamResponseError() from exc
        except httpx.HTTPError as exc:
            logger.error("Error reading %s response from %s: %s", label, url, exc)
            raise UpstreamResponseError() from exc
    finally:
        await response.aclose()


def decode_records(body: bytes, model: Type[RecordT], label: str) -> List[RecordT]:
    """Decode a JSON array body into a list of ``model`` instances.

    A ``null`` body decodes to an empty list. Malformed JSON or a
    value of the wrong type raises ``UpstreamResponseError``.
    """
    adapter = TypeAdapter(Optional[List[model]])
    try:
        records = adapter.validate_json(body)
    except ValidationError as exc:
        logger.error("Error decoding %s: %s", label, exc)
        raise UpstreamResponseError() from exc
    return records or []


async def fetch_authors(
    client: httpx.AsyncClient, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> List[Author]:
    """Fetch every author from ``{base_url}/authors``."""
    body = await _get_body(
        client, f"{base_url}/authors", "authors", "Error al obtener autores", timeout
    )
    return decode_records(body, Author, "authors")


async def fetch_books(
    client: httpx.AsyncClient, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> List[Book]:
    """Fetch every book from ``{base_url}/books``."""
    body = await _get_body(
        client, f"{base_url}/books", "books", "Error al obtener libros", timeout
    )
    return decode_records(body, Book, "books")
