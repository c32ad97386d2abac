"""Cart line-item building."""

from tuitioncalc.cart.builder import CartBuilder, create_cart_item, is_duplicate_item

__all__ = [
    "CartBuilder",
    "create_cart_item",
    "is_duplicate_item",
]
