"""
Load a catalogue payload into the relational store.

The payload mirrors what the admin back office writes::

    {
      "tag_groups": [
        {"name": "Subject", "slug": "subject", "sort_order": 2,
         "tags": [{"name": "Math", "slug": "math", "sort_order": 0}]}
      ],
      "products": [
        {"title": "Grade 4 Math", "slug": "grade-4-math",
         "status": "published", "is_active": true, "price_cents": 499,
         "created_at": "2024-05-01T10:00:00+00:00", "tags": ["math"]}
      ]
    }

Products reference tags by slug. Used for development data and tests.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import PRODUCT_STATUSES, Product, ProductTag, Tag, TagGroup


logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    """Ids assigned while seeding, keyed by slug."""

    tag_ids: Dict[str, str] = field(default_factory=dict)
    product_ids: Dict[str, str] = field(default_factory=dict)


def _parse_datetime(value: Any) -> Any:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def seed_catalog(session: Session, payload: Mapping[str, Any]) -> SeedResult:
    """Insert tag groups, tags and products from ``payload`` and commit.

    Raises
    ------
    ValueError
        If a product has an unknown status or references a tag slug that
        the payload does not define.
    """
    result = SeedResult()

    for g in payload.get("tag_groups") or []:
        group = TagGroup(
            name=g["name"],
            slug=g["slug"],
            sort_order=int(g.get("sort_order") or 0),
        )
        session.add(group)
        session.flush()
        for t in g.get("tags") or []:
            tag = Tag(
                name=t["name"],
                slug=t["slug"],
                sort_order=int(t.get("sort_order") or 0),
                tag_group_id=group.id,
            )
            if t.get("id"):
                tag.id = str(t["id"])
            session.add(tag)
            session.flush()
            result.tag_ids[tag.slug] = tag.id

    for p in payload.get("products") or []:
        status = p.get("status", "draft")
        if status not in PRODUCT_STATUSES:
            raise ValueError(f"Unknown product status {status!r} for {p.get('slug')!r}")

        product = Product(
            title=p["title"],
            slug=p["slug"],
            description=p.get("description"),
            price_cents=int(p.get("price_cents") or 0),
            currency=p.get("currency") or "usd",
            status=status,
            is_active=bool(p.get("is_active", True)),
            cover_image_path=p.get("cover_image_path"),
            pdf_path=p.get("pdf_path"),
        )
        if p.get("id"):
            product.id = str(p["id"])
        if p.get("created_at"):
            product.created_at = _parse_datetime(p["created_at"])
        session.add(product)
        session.flush()
        result.product_ids[product.slug] = product.id

        for tag_slug in dict.fromkeys(p.get("tags") or []):
            tag_id = result.tag_ids.get(tag_slug)
            if tag_id is None:
                raise ValueError(f"Product {product.slug!r} references unknown tag {tag_slug!r}")
            session.add(ProductTag(product_id=product.id, tag_id=tag_id))

    session.commit()
    logger.info(
        "Seeded %d tags and %d products", len(result.tag_ids), len(result.product_ids)
    )
    return result


def seed_if_empty(session: Session, path: Union[str, Path]) -> bool:
    """Seed from a JSON file when the products table is empty."""
    existing = session.scalar(select(func.count()).select_from(Product)) or 0
    if existing:
        logger.info("Skipping seed: %d products already present", existing)
        return False
    with Path(path).open("r", encoding="utf-8") as f:
        payload = json.load(f)
    seed_catalog(session, payload)
    return True
