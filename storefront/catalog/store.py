"""
Relational store access for the catalogue.

``RelationalStore`` is the narrow interface the query engine needs:
a join-table lookup, a count and a windowed page fetch, all driven by
one ``ProductFilter`` value. ``SqlAlchemyStore`` implements it on top of
a SQLAlchemy session (SQLite for development and tests, Postgres in
production). Any ``SQLAlchemyError`` is logged and re-raised as
``StoreQueryError`` so callers only ever deal with one failure type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from typing_extensions import Protocol

from ..models import Product, ProductTag, TagGroup
from .errors import StoreQueryError
from .filters import contains_pattern


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProductFilter:
    """Row filter shared by the count and the page query.

    ``product_ids`` of ``None`` means no id restriction; an empty tuple
    matches nothing.
    """

    status: str = "published"
    is_active: bool = True
    product_ids: Optional[Sequence[str]] = None
    search_text: Optional[str] = None


class RelationalStore(Protocol):
    def product_ids_for_tags(self, tag_ids: Sequence[str]) -> Set[str]:
        ...

    def count_products(self, flt: ProductFilter) -> int:
        ...

    def fetch_products(self, flt: ProductFilter, offset: int, limit: int) -> List[Product]:
        ...

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        ...

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        ...

    def list_tag_groups(self) -> List[TagGroup]:
        ...


class SqlAlchemyStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _run(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except SQLAlchemyError as exc:
            logger.error("Store operation %s failed: %s", operation, exc)
            raise StoreQueryError(f"{operation} failed: {exc}") from exc

    def _apply(self, stmt: Select, flt: ProductFilter) -> Select:
        stmt = stmt.where(Product.status == flt.status, Product.is_active == flt.is_active)
        if flt.product_ids is not None:
            stmt = stmt.where(Product.id.in_(list(flt.product_ids)))
        if flt.search_text:
            pattern = contains_pattern(flt.search_text)
            stmt = stmt.where(
                or_(
                    Product.title.ilike(pattern, escape="\\"),
                    Product.slug.ilike(pattern, escape="\\"),
                    Product.description.ilike(pattern, escape="\\"),
                )
            )
        return stmt

    def product_ids_for_tags(self, tag_ids: Sequence[str]) -> Set[str]:
        stmt = select(ProductTag.product_id).where(ProductTag.tag_id.in_(list(tag_ids)))
        return self._run(
            "product_tags lookup",
            lambda: set(self.session.scalars(stmt).all()),
        )

    def count_products(self, flt: ProductFilter) -> int:
        stmt = self._apply(select(func.count()).select_from(Product), flt)
        return self._run("products count", lambda: int(self.session.scalar(stmt) or 0))

    def fetch_products(self, flt: ProductFilter, offset: int, limit: int) -> List[Product]:
        # id breaks created_at ties so windows never overlap between pages
        stmt = (
            self._apply(select(Product), flt)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._run("products page", lambda: list(self.session.scalars(stmt).all()))

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return self._run("product lookup", lambda: self.session.get(Product, product_id))

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        stmt = select(Product).where(Product.slug == slug)
        return self._run("product lookup", lambda: self.session.scalars(stmt).first())

    def list_tag_groups(self) -> List[TagGroup]:
        stmt = (
            select(TagGroup)
            .options(selectinload(TagGroup.tags))
            .order_by(TagGroup.sort_order, TagGroup.name)
        )
        return self._run("tag_groups list", lambda: list(self.session.scalars(stmt).all()))
