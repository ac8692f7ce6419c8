"""
Pydantic schema definitions for the catalog module.

``ProductSummary`` carries only what a catalogue card needs; asset
fields are object-store paths that the front-end turns into URLs.
``ProductPage`` is the body of the listing endpoint: one window of
products plus the total number of matches so clients can render
"load more" or page N of M controls.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductSummary(BaseModel):
    """A single catalogue card.

    ``price_cents`` is in minor currency units of ``currency``.
    ``cover_image_path`` and ``pdf_path`` may be ``None`` while an
    upload is pending.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    cover_image_path: Optional[str] = None
    pdf_path: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    price_cents: int = 0
    currency: str = "usd"


class ProductDetail(BaseModel):
    """A single product page. Same card fields plus ``description``, no ``updated_at``."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    cover_image_path: Optional[str] = None
    pdf_path: Optional[str] = None
    created_at: datetime
    price_cents: int = 0
    currency: str = "usd"
    description: Optional[str] = None


class ProductPage(BaseModel):
    """A wrapper for paginated results returned from the ``/products`` endpoint."""

    products: List[ProductSummary]
    count: int


class ProductEnvelope(BaseModel):
    product: ProductDetail


class TagOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    sort_order: int = 0


class TagGroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    sort_order: int = 0
    tags: List[TagOut] = Field(default_factory=list)


class ErrorBody(BaseModel):
    error: str
