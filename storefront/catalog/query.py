"""
Catalogue query engine.

Resolves a ``CatalogQuery`` into one page of visible products plus the
total number of matches:

1. Each active tag group (one with selected tags) is looked up in the
   product/tag join table. A product matches a group when it carries at
   least one of the group's selected tags.
2. The per-group id sets are intersected, so a product must match every
   active group. The first empty set ends the lookup; the remaining
   groups are never queried and the result is empty.
3. The visibility gate (status + active flag) and the optional text
   search are applied to both the count and the page query through the
   same ``ProductFilter``, newest products first.

The engine keeps no state between calls. Store failures surface as
``StoreQueryError`` and nothing is returned for that call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set

from ..models import Product
from .filters import FilterSpec, normalize_search
from .store import ProductFilter, RelationalStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogQuery:
    filters: FilterSpec = field(default_factory=FilterSpec)
    search_text: Optional[str] = None
    status: str = "published"
    is_active: bool = True
    page: int = 0
    page_size: int = 20


@dataclass
class CatalogResult:
    items: List[Product]
    total_count: int


def intersect_all(id_sets: Iterable[Set[str]]) -> Set[str]:
    """Intersect id sets in order, stopping at the first empty one.

    ``id_sets`` is consumed lazily, so sets after an empty one are never
    produced.
    """
    current: Optional[Set[str]] = None
    for ids in id_sets:
        if not ids:
            return set()
        current = set(ids) if current is None else current & ids
        if not current:
            return set()
    return current or set()


def _group_matches(store: RelationalStore, spec: FilterSpec) -> Iterator[Set[str]]:
    for slug, tag_ids in spec.active_groups:
        ids = store.product_ids_for_tags(tag_ids)
        logger.debug("Tag group %s (%d tags) matched %d products", slug, len(tag_ids), len(ids))
        yield ids


def matching_product_ids(store: RelationalStore, spec: FilterSpec) -> Optional[List[str]]:
    """Return the ids matching every active group, or ``None`` without tag filters."""
    if not spec:
        return None
    matched = intersect_all(_group_matches(store, spec))
    if not matched:
        logger.debug("Tag filters %s have no products in common", spec.to_query_params())
    return sorted(matched)


def query_catalog(store: RelationalStore, query: CatalogQuery) -> CatalogResult:
    matched_ids = matching_product_ids(store, query.filters)
    if matched_ids is not None and not matched_ids:
        return CatalogResult(items=[], total_count=0)

    flt = ProductFilter(
        status=query.status,
        is_active=query.is_active,
        product_ids=matched_ids,
        search_text=normalize_search(query.search_text),
    )

    total = store.count_products(flt)
    offset = query.page * query.page_size
    if offset >= total:
        logger.debug("Catalog page %d is past the last of %d products", query.page, total)
        return CatalogResult(items=[], total_count=total)

    # The window never reaches past the counted rows, which also keeps
    # LIMIT/OFFSET inside the driver's integer range.
    limit = min(query.page_size, total - offset)
    items = store.fetch_products(flt, offset=offset, limit=limit)

    logger.debug(
        "Catalog page %d (size %d): %d of %d products",
        query.page,
        query.page_size,
        len(items),
        total,
    )
    return CatalogResult(items=items, total_count=total)
