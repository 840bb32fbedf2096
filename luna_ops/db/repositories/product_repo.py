"""Product catalogue repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from luna_ops.db.models import Product, ProductSize


def get_product(session: Session, product_id: str) -> Optional[Product]:
    q = select(Product).where(Product.id == product_id).options(selectinload(Product.sizes))
    return session.scalars(q).first()


def get_products(session: Session, product_ids: list[str]) -> dict[str, Product]:
    """Return {id: Product} for the ids that exist."""
    if not product_ids:
        return {}
    q = select(Product).where(Product.id.in_(product_ids)).options(selectinload(Product.sizes))
    return {p.id: p for p in session.scalars(q).all()}


def get_by_slug(session: Session, slug: str) -> Optional[Product]:
    return session.scalars(select(Product).where(Product.slug == slug)).first()


def list_products(session: Session, active_only: bool = False) -> list[Product]:
    q = select(Product).options(selectinload(Product.sizes)).order_by(Product.name)
    if active_only:
        q = q.where(Product.is_active.is_(True))
    return list(session.scalars(q).all())


def add_product(session: Session, sizes: list[dict], **fields) -> Product:
    product = Product(**fields, sizes=[ProductSize(**s) for s in sizes])
    session.add(product)
    session.flush()
    return product
