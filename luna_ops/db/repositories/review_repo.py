"""Product review repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import Review


def add_review(session: Session, **fields) -> Review:
    review = Review(**fields)
    session.add(review)
    session.flush()
    return review


def get_for_order(session: Session, order_id: str, product_id: str) -> Optional[Review]:
    q = select(Review).where(Review.order_id == order_id, Review.product_id == product_id)
    return session.scalars(q).first()


def list_for_product(session: Session, product_id: str, limit: int = 100) -> list[Review]:
    q = (
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.created_at.desc())
        .limit(limit)
    )
    return list(session.scalars(q).all())
