"""Product catalogue: create products with sizes and list them."""

import re

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import Product
from luna_ops.db.repositories import inventory_repo, product_repo
from luna_ops.db.repositories.inventory_repo import inventory_key
from luna_ops.exceptions import ProductNotFound, ValidationError
from luna_ops.models.catalog import ProductCreate
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.catalog")


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class CatalogService:
    def __init__(self, db: Database):
        self._db = db

    def create_product(self, data: ProductCreate) -> Product:
        """Create the product and a zero-quantity inventory entry for each of its sizes."""
        slug = data.slug or slugify(data.name)
        seen = set()
        for s in data.sizes:
            normalized = "".join(s.size.split())
            if normalized in seen:
                raise ValidationError(f"Duplicate size {s.size!r} for {data.name}")
            seen.add(normalized)

        def _create(session: Session) -> Product:
            if product_repo.get_by_slug(session, slug) is not None:
                raise ValidationError(f"A product with slug {slug!r} already exists")
            product = product_repo.add_product(
                session,
                sizes=[s.model_dump() for s in data.sizes],
                slug=slug,
                name=data.name,
                category=data.category,
                description=data.description,
                image_url=data.image_url,
                delivery_fee=data.delivery_fee,
                platform_fee=data.platform_fee,
            )
            for s in data.sizes:
                key = inventory_key(product.id, s.size)
                if inventory_repo.get_entry(session, key) is None:
                    inventory_repo.create_entry(session, key, product.id, s.size, 0)
            session.flush()
            return product

        product = self._db.run_transaction(_create, name="catalog.create_product")
        logger.info("catalog.product.created", product_id=product.id, slug=slug, sizes=len(data.sizes))
        return self.get_product(product.id)

    def get_product(self, product_id: str) -> Product:
        with self._db.session() as session:
            product = product_repo.get_product(session, product_id)
            if product is None:
                raise ProductNotFound(product_id)
            return product

    def list_products(self, active_only: bool = False) -> list[Product]:
        with self._db.session() as session:
            return product_repo.list_products(session, active_only=active_only)
