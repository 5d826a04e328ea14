"""
Catalog package for the catalog aggregation service.

This package contains the schemas, upstream client, aggregation logic
and route definitions behind ``GET /catalog``. The endpoint pulls the
full author list and the full book list from two independent upstream
services, joins them in memory on the book's ``autor_id`` and returns
each book together with its author's display name.
"""

from .router import router as catalog_router  # noqa: F401
