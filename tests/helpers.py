from models import (
    BxGyDetails, BxGyProduct, Cart, CartItem, CartWiseDetails, CouponRecord,
    ProductWiseDetails,
)


def make_cart(*items):
    """make_cart((product_id, quantity, price), ...)"""
    return Cart(items=[CartItem(product_id=p, quantity=q, price=pr) for p, q, pr in items])


def cart_wise(threshold, discount, coupon_id=1):
    return CouponRecord(id=coupon_id, type="cart-wise",
                        details=CartWiseDetails(threshold=threshold, discount=discount))


def product_wise(product_id, discount, coupon_id=2):
    return CouponRecord(id=coupon_id, type="product-wise",
                        details=ProductWiseDetails(product_id=product_id, discount=discount))


def bxgy(buy, get, repetition_limit, coupon_id=3):
    """buy / get are (product_id, quantity) tuples."""
    return CouponRecord(id=coupon_id, type="bxgy", details=BxGyDetails(
        buy_products=[BxGyProduct(product_id=buy[0], quantity=buy[1])],
        get_products=[BxGyProduct(product_id=get[0], quantity=get[1])],
        repetition_limit=repetition_limit,
    ))
