"""
Coupon evaluation: picks the strategy for a coupon type and runs it over a cart.
"""
from typing import Iterable, List, Optional

from exceptions import InvalidCouponType, UnknownCouponType
from logger import get_logger
from models import (
    ApplicableCoupon, ApplyCouponResponse, Cart, CouponRecord, CouponType,
    UpdatedCart,
)
from strategies import (
    BxGyStrategy, CartWiseStrategy, CouponStrategy, ProductWiseStrategy,
    cart_subtotal,
)

log = get_logger("engine")

# Strategies are stateless, one shared instance per coupon type.
STRATEGIES = {
    CouponType.CART_WISE: CartWiseStrategy(),
    CouponType.PRODUCT_WISE: ProductWiseStrategy(),
    CouponType.BXGY: BxGyStrategy(),
}


def normalize_coupon_type(coupon_type: Optional[str]) -> str:
    """Trim and lower-case a coupon type, rejecting anything off the allow-list."""
    if coupon_type is None or not coupon_type.strip():
        raise InvalidCouponType("Field 'type' is required.")
    normalized = coupon_type.strip().lower()
    try:
        return CouponType(normalized).value
    except ValueError:
        raise UnknownCouponType(coupon_type)


def get_strategy(coupon_type: Optional[str]) -> CouponStrategy:
    if not coupon_type:
        raise InvalidCouponType("Coupon type cannot be null or empty")
    try:
        return STRATEGIES[CouponType(coupon_type.lower())]
    except ValueError:
        raise UnknownCouponType(coupon_type)


def list_applicable(cart: Cart, coupons: Iterable[CouponRecord]) -> List[ApplicableCoupon]:
    """Every coupon that earns a positive discount on `cart`, in input order."""
    applicable = []
    for coupon in coupons:
        discount = get_strategy(coupon.type).calculate_discount(coupon, cart)
        log.debug("Coupon %s (%s) evaluated to %.2f", coupon.id, coupon.type, discount)
        if discount > 0:
            applicable.append(ApplicableCoupon(coupon_id=coupon.id, type=coupon.type, discount=discount))
    return applicable


def apply(coupon: CouponRecord, cart: Optional[Cart]) -> ApplyCouponResponse:
    """
    Apply a single coupon to a cart.

    Totals are computed from the cart as submitted; the returned items come
    from the strategy's apply step (free units added, per-line discounts set).
    A missing cart or item list gives an all-zero result.
    """
    if cart is None or cart.items is None:
        return ApplyCouponResponse(updated_cart=UpdatedCart(
            items=[], total_price=0.0, total_discount=0.0, final_price=0.0
        ))

    strategy = get_strategy(coupon.type)
    discount = strategy.calculate_discount(coupon, cart)
    total_price = cart_subtotal(cart.items)
    updated = strategy.apply_coupon(coupon, cart)

    log.info("Applied coupon %s (%s): total=%.2f discount=%.2f", coupon.id, coupon.type, total_price, discount)
    return ApplyCouponResponse(updated_cart=UpdatedCart(
        items=updated.items,
        total_price=total_price,
        total_discount=discount,
        final_price=total_price - discount,
    ))
