"""
Catalog package for the worksheet storefront.

Exposes the read-only catalogue API: product listing with tag-group
filters, free-text search and pagination, single product lookup and
the tag groups used to build the filter sidebar. The query engine in
``query.py`` only depends on the ``RelationalStore`` interface from
``store.py``, so another backend can be dropped in behind it.
"""

from .router import router as catalog_router  # noqa: F401
