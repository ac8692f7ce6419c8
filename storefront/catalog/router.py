"""
Route definitions for the catalogue API.

Endpoints under /api:
- GET  /products         : list visible products with tag filters, search and pagination
- GET  /product/{key}    : get one visible product by id or slug
- GET  /tag-groups       : tag groups with their tags, for the filter sidebar
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import Settings
from ..storage import get_session
from .errors import StoreQueryError
from .filters import FilterSpec, parse_flag
from .query import CatalogQuery, query_catalog
from .schemas import (
    ErrorBody,
    ProductDetail,
    ProductEnvelope,
    ProductPage,
    ProductSummary,
    TagGroupOut,
)
from .store import RelationalStore, SqlAlchemyStore


logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

router = APIRouter(prefix="/api", tags=["catalog"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(session: Session = Depends(get_session)) -> RelationalStore:
    return SqlAlchemyStore(session)


def _is_public(product) -> bool:
    return product.status == "published" and product.is_active is True


@router.get(
    "/products",
    response_model=ProductPage,
    responses={500: {"model": ErrorBody}},
)
def list_products(
    q: Optional[str] = Query(default=None, description="Search title, slug and description"),
    type_: Optional[str] = Query(default=None, alias="type", description="Comma-separated tag ids"),
    grade_level: Optional[str] = Query(default=None, alias="grade-level"),
    subject: Optional[str] = Query(default=None),
    framework: Optional[str] = Query(default=None),
    status: str = Query(default="published"),
    is_active: Optional[str] = Query(default=None, description="Anything but 'false' means true"),
    page: int = Query(default=0, ge=0, description="Zero-based page"),
    page_size: Optional[int] = Query(default=None, alias="pageSize", ge=1),
    store: RelationalStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ProductPage:
    filters = FilterSpec.from_query_params(
        {
            "type": type_,
            "grade-level": grade_level,
            "subject": subject,
            "framework": framework,
        }
    )
    query = CatalogQuery(
        filters=filters,
        search_text=q,
        status=status,
        is_active=parse_flag(is_active),
        page=page,
        page_size=page_size or settings.default_page_size,
    )
    try:
        result = query_catalog(store, query)
    except StoreQueryError as exc:
        logger.warning("Catalog query %s failed: %s", filters.to_query_params(), exc.message)
        raise
    return ProductPage(
        products=[ProductSummary.model_validate(p) for p in result.items],
        count=result.total_count,
    )


@router.get(
    "/product/{key}",
    response_model=ProductEnvelope,
    responses={400: {"model": ErrorBody}, 404: {"model": ErrorBody}},
)
def get_product(key: str, store: RelationalStore = Depends(get_store)):
    """Look a product up by UUID or, failing that shape, by slug.

    Drafts, archived and inactive products answer 404 like missing ones.
    """
    key = key.strip()
    if not key or key == "undefined":
        return JSONResponse(status_code=400, content={"error": "missing_id"})

    if UUID_PATTERN.match(key):
        product = store.get_product_by_id(key)
    else:
        product = store.get_product_by_slug(key)

    if product is None or not _is_public(product):
        return JSONResponse(status_code=404, content={"error": "not_found"})
    return ProductEnvelope(product=ProductDetail.model_validate(product))


@router.get("/tag-groups", response_model=List[TagGroupOut])
def list_tag_groups(store: RelationalStore = Depends(get_store)) -> List[TagGroupOut]:
    return [TagGroupOut.model_validate(g) for g in store.list_tag_groups()]
