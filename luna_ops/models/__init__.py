"""Pydantic models for API input and output."""

from luna_ops.models.cart import CartItem, CustomerInfo, DeliveryMethod
from luna_ops.models.orders import OrderStatus

__all__ = ["CartItem", "CustomerInfo", "DeliveryMethod", "OrderStatus"]
