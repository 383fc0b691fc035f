"""Errors raised by the coupon engine and the coupon store."""


class CouponError(Exception):
    """Base class for every coupon related failure."""


class InvalidCouponType(CouponError, ValueError):
    def __init__(self, message: str = "Coupon type cannot be empty"):
        super().__init__(message)


class UnknownCouponType(CouponError, ValueError):
    def __init__(self, coupon_type: str):
        self.coupon_type = coupon_type
        super().__init__(
            f"Unknown coupon type: '{coupon_type}'. Allowed values: cart-wise, product-wise, bxgy."
        )


class MissingCouponDetails(CouponError, ValueError):
    def __init__(self, message: str = "Field 'details' is required and must be valid JSON."):
        super().__init__(message)


class CouponNotFound(CouponError, LookupError):
    def __init__(self, coupon_id: int):
        self.coupon_id = coupon_id
        super().__init__(f"Coupon not found with ID: {coupon_id}")
