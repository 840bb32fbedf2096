"""Product reviews and the running product rating."""

from typing import Optional

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import Review
from luna_ops.db.repositories import order_repo, product_repo, review_repo
from luna_ops.exceptions import OrderNotFound, ProductNotFound, ValidationError
from luna_ops.models.orders import OrderStatus
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.reviews")


class ReviewService:
    def __init__(self, db: Database):
        self._db = db

    def add_review(
        self,
        product_id: str,
        user_id: str,
        user_name: str,
        rating: int,
        comment: str = "",
        order_id: Optional[str] = None,
    ) -> Review:
        """Store the review and fold it into the product's average in one transaction.

        With ``order_id`` the order must be delivered, must contain the product
        and may be reviewed once per product.
        """
        if not 1 <= rating <= 5:
            raise ValidationError(f"Rating must be between 1 and 5, got {rating}")

        def _add(session: Session) -> Review:
            product = product_repo.get_product(session, product_id)
            if product is None:
                raise ProductNotFound(product_id)
            if order_id is not None:
                order = order_repo.get_order(session, order_id)
                if order is None:
                    raise OrderNotFound(order_id)
                if order.status != OrderStatus.DELIVERED.value:
                    raise ValidationError("Only delivered orders can be reviewed")
                if not any(i.product_id == product_id for i in order.items):
                    raise ValidationError(f"Order does not contain product {product_id!r}")
                if review_repo.get_for_order(session, order_id, product_id) is not None:
                    raise ValidationError("This product was already reviewed for this order")

            count = product.review_count
            product.rating = (product.rating * count + rating) / (count + 1)
            product.review_count = count + 1
            return review_repo.add_review(
                session,
                product_id=product_id,
                order_id=order_id,
                user_id=user_id,
                user_name=user_name,
                rating=rating,
                comment=comment,
            )

        review = self._db.run_transaction(_add, name="reviews.add")
        logger.info("reviews.added", product_id=product_id, order_id=order_id, rating=rating)
        return review

    def add_order_review(self, order_id: str, product_id: str, rating: int, comment: str = "") -> Review:
        """Review from the delivered-order e-mail link, attributed to the order's customer."""
        with self._db.session() as session:
            order = order_repo.get_order(session, order_id)
            if order is None:
                raise OrderNotFound(order_id)
            user_id = order.user_id or order.customer_email
            user_name = order.customer_name
        return self.add_review(product_id, user_id, user_name, rating, comment, order_id=order_id)

    def list_reviews(self, product_id: str, limit: int = 100) -> list[Review]:
        """Newest first."""
        with self._db.session() as session:
            return review_repo.list_for_product(session, product_id, limit=limit)
