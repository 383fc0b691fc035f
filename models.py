from enum import Enum
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from logger import get_logger

log = get_logger("models")


class CouponType(str, Enum):
    CART_WISE = "cart-wise"
    PRODUCT_WISE = "product-wise"
    BXGY = "bxgy"


# --- 1. Cart ---

class CartItem(BaseModel):
    product_id: int  # not unique within a cart
    quantity: int = Field(..., ge=0)
    price: float = Field(..., ge=0)
    total_discount: float = 0.0  # written only by a strategy's apply step


class Cart(BaseModel):
    """Shopping cart submitted for coupon evaluation."""
    items: Optional[List[CartItem]] = None


# --- 2. Rule definitions ---
# Every field is optional: a rule with missing parameters is still decoded and
# simply earns no discount.

class CartWiseDetails(BaseModel):
    """Percentage off the whole cart once its subtotal reaches `threshold`."""
    threshold: Optional[float] = None
    discount: Optional[float] = None  # percent


class ProductWiseDetails(BaseModel):
    """Percentage off every cart line of one product."""
    product_id: Optional[int] = None
    discount: Optional[float] = None  # percent


class BxGyProduct(BaseModel):
    product_id: Optional[int] = None
    quantity: Optional[int] = None


class BxGyDetails(BaseModel):
    """
    Buy `quantity` of a buy product, get `quantity` of a get product free.
    Only the first entry of each list takes part in the evaluation.
    """
    buy_products: List[BxGyProduct] = Field(default_factory=list)
    get_products: List[BxGyProduct] = Field(default_factory=list)
    repetition_limit: Optional[int] = None


RuleDetails = Union[CartWiseDetails, ProductWiseDetails, BxGyDetails]

DETAILS_MODELS = {
    CouponType.CART_WISE.value: CartWiseDetails,
    CouponType.PRODUCT_WISE.value: ProductWiseDetails,
    CouponType.BXGY.value: BxGyDetails,
}


def decode_details(coupon_type: Optional[str], raw: Optional[Dict[str, Any]]) -> Optional[RuleDetails]:
    """
    Turn a stored JSON rule payload into the rule model for `coupon_type`.
    Returns None when there is no payload, the type is unknown, or the payload
    does not fit the rule's shape.
    """
    model = DETAILS_MODELS.get((coupon_type or "").lower())
    if raw is None or model is None:
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        log.warning("Ignoring malformed '%s' rule payload: %s", coupon_type, e.errors())
        return None


# --- 3. Coupons ---

class CouponCreate(BaseModel):
    """Body of the create / update coupon calls."""
    type: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class Coupon(BaseModel):
    """Coupon as kept by the store, rule payload still raw JSON."""
    id: int
    type: str
    details: Dict[str, Any]


class CouponRecord(BaseModel):
    """Coupon handed to the engine, with its rule already decoded."""
    id: Optional[int] = None
    type: Optional[str] = None
    details: Optional[RuleDetails] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_raw_details(cls, data: Any) -> Any:
        # A raw JSON rule is decoded by the model its type names, never by shape.
        if isinstance(data, dict) and isinstance(data.get("details"), dict):
            data = {**data, "details": decode_details(data.get("type"), data["details"])}
        return data

    @classmethod
    def from_coupon(cls, coupon: Coupon) -> "CouponRecord":
        return cls.model_validate({"id": coupon.id, "type": coupon.type, "details": coupon.details})


# --- 4. Responses ---

class ApplicableCoupon(BaseModel):
    coupon_id: Optional[int]
    type: str
    discount: float


class ApplicableCouponsResponse(BaseModel):
    applicable_coupons: List[ApplicableCoupon]


class UpdatedCart(BaseModel):
    items: List[CartItem]
    total_price: float     # subtotal before discount
    total_discount: float
    final_price: float


class ApplyCouponResponse(BaseModel):
    updated_cart: UpdatedCart


class ErrorResponse(BaseModel):
    timestamp: datetime
    error: str
    message: str
    status: int
