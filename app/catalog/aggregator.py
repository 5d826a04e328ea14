"""
Join authors and books into the consolidated catalog.

The join is done in memory: authors are indexed by id, then every
book is enriched with the display name of its author. Books are never
dropped; a book whose ``autor_id`` matches no author gets the
``UNKNOWN_AUTHOR`` sentinel. Output order is the order in which the
Books service returned its records.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Tuple

import httpx

from app.config import Settings

from .errors import ConfigurationError
from .schemas import Author, Book, CatalogItem
from .upstream_service import fetch_authors, fetch_books


logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Desconocido"

MISSING_URLS_MESSAGE = (
    "Service URLs not configured. Please set AUTHORS_SERVICE_URL and "
    "BOOKS_SERVICE_URL environment variables."
)


def build_author_index(authors: Iterable[Author]) -> Dict[int, Author]:
    """Map author id to author. On duplicate ids the last record wins."""
    return {author.id: author for author in authors}


def resolve_author_name(author_id: int, index: Dict[int, Author]) -> str:
    author = index.get(author_id)
    if author is None:
        return UNKNOWN_AUTHOR
    return author.display_name


def consolidate(books: Iterable[Book], index: Dict[int, Author]) -> List[CatalogItem]:
    """Build one ``CatalogItem`` per book, preserving book order."""
    return [
        CatalogItem(
            **book.model_dump(),
            author_name=resolve_author_name(book.author_id, index),
        )
        for book in books
    ]


async def _fetch_concurrently(
    client: httpx.AsyncClient, settings: Settings
) -> Tuple[List[Author], List[Book]]:
    """Fetch authors and books at the same time.

    Both requests always run to completion. When both fail, the
    authors error is the one raised.
    """
    timeout = settings.upstream_timeout_seconds
    authors, books = await asyncio.gather(
        fetch_authors(client, settings.authors_service_url, timeout),
        fetch_books(client, settings.books_service_url, timeout),
        return_exceptions=True,
    )
    for result in (authors, books):
        if isinstance(result, BaseException):
            raise result
    return authors, books


async def fetch_catalog(settings: Settings, client: httpx.AsyncClient) -> List[CatalogItem]:
    """Fetch both upstreams and return the consolidated catalog.

    By default the Books service is only called once the authors have
    been fetched and decoded, so an Authors failure never reaches the
    Books service. With ``parallel_fetch`` both requests run at the
    same time. Any failure aborts the whole aggregation.
    """
    if not settings.upstreams_configured:
        raise ConfigurationError(MISSING_URLS_MESSAGE)

    if settings.parallel_fetch:
        authors, books = await _fetch_concurrently(client, settings)
        index = build_author_index(authors)
    else:
        timeout = settings.upstream_timeout_seconds
        authors = await fetch_authors(client, settings.authors_service_url, timeout)
        index = build_author_index(authors)
        books = await fetch_books(client, settings.books_service_url, timeout)

    catalog = consolidate(books, index)
    logger.info(
        "Catalog built: %d items from %d books and %d authors",
        len(catalog), len(books), len(authors),
    )
    return catalog
