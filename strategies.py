"""
Discount strategies, one per coupon type.

Each strategy offers two operations:

* ``calculate_discount(coupon, cart)`` - the discount amount the coupon earns
  on the cart. Pure: the cart is never modified.
* ``apply_coupon(coupon, cart)`` - a new cart whose items carry the per-line
  discount bookkeeping of the coupon. The input cart is left untouched.

Bad or missing rule parameters never raise; they earn a discount of 0.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from models import (
    BxGyDetails, BxGyProduct, Cart, CartItem, CartWiseDetails, CouponRecord,
    ProductWiseDetails,
)


def cart_subtotal(items: Optional[List[CartItem]]) -> float:
    return sum(item.price * item.quantity for item in items or [])


def _copy_items(cart: Cart) -> List[CartItem]:
    return [item.model_copy() for item in cart.items or []]


class CouponStrategy(ABC):
    details_model = None

    def details(self, coupon: CouponRecord):
        """The coupon's rule, or None if it is absent or of another type."""
        if isinstance(coupon.details, self.details_model):
            return coupon.details
        return None

    @abstractmethod
    def calculate_discount(self, coupon: CouponRecord, cart: Cart) -> float:
        ...

    @abstractmethod
    def apply_coupon(self, coupon: CouponRecord, cart: Cart) -> Cart:
        ...


class CartWiseStrategy(CouponStrategy):
    details_model = CartWiseDetails

    def calculate_discount(self, coupon: CouponRecord, cart: Cart) -> float:
        details = self.details(coupon)
        if details is None or not cart.items:
            return 0.0

        if details.threshold is None or details.threshold <= 0:
            return 0.0
        if details.discount is None or details.discount <= 0:
            return 0.0

        total = cart_subtotal(cart.items)
        if total < details.threshold:
            return 0.0

        return total * (details.discount / 100.0)

    def apply_coupon(self, coupon: CouponRecord, cart: Cart) -> Cart:
        # The cart-wide discount is reported on the cart, never on a line.
        items = _copy_items(cart)
        for item in items:
            item.total_discount = 0.0
        return cart.model_copy(update={"items": items})


class ProductWiseStrategy(CouponStrategy):
    details_model = ProductWiseDetails

    def _rule(self, coupon: CouponRecord) -> Optional[Tuple[int, float]]:
        details = self.details(coupon)
        if details is None or details.product_id is None or details.discount is None:
            return None
        return details.product_id, details.discount / 100.0

    def calculate_discount(self, coupon: CouponRecord, cart: Cart) -> float:
        rule = self._rule(coupon)
        if rule is None or not cart.items:
            return 0.0

        product_id, percent = rule
        return sum(
            item.price * item.quantity * percent
            for item in cart.items
            if item.product_id == product_id
        )

    def apply_coupon(self, coupon: CouponRecord, cart: Cart) -> Cart:
        rule = self._rule(coupon)
        items = _copy_items(cart)
        if rule is None or not items:
            return cart.model_copy(update={"items": items})

        product_id, percent = rule
        for item in items:
            # other lines keep whatever total_discount they already had
            if item.product_id == product_id:
                item.total_discount = item.price * item.quantity * percent

        return cart.model_copy(update={"items": items})


class BxGyStrategy(CouponStrategy):
    details_model = BxGyDetails

    def _rules(self, coupon: CouponRecord) -> Optional[Tuple[BxGyProduct, BxGyProduct, int]]:
        details = self.details(coupon)
        if details is None or not details.buy_products or not details.get_products:
            return None
        # Only the first buy rule and the first get rule are honoured.
        return details.buy_products[0], details.get_products[0], details.repetition_limit

    def _free_quantity(self, coupon: CouponRecord, items: List[CartItem]) -> Tuple[int, Optional[CartItem]]:
        """
        Number of free units earned and the cart line that receives them.
        Returns (0, None) whenever the offer does not apply.
        """
        rules = self._rules(coupon)
        if rules is None or not items:
            return 0, None

        buy, get, repetition_limit = rules
        if buy.quantity is None or buy.quantity <= 0:
            return 0, None
        if get.quantity is None or repetition_limit is None:
            return 0, None

        total_buy_qty = sum(i.quantity for i in items if i.product_id == buy.product_id)
        if total_buy_qty < buy.quantity:
            return 0, None

        repetitions = min(total_buy_qty // buy.quantity, repetition_limit)
        if repetitions <= 0:
            return 0, None

        free_qty = repetitions * get.quantity
        free_item = next((i for i in items if i.product_id == get.product_id), None)
        if free_item is None:
            # The free product has to be in the cart already.
            return 0, None

        return free_qty, free_item

    def calculate_discount(self, coupon: CouponRecord, cart: Cart) -> float:
        free_qty, free_item = self._free_quantity(coupon, cart.items or [])
        if free_item is None:
            return 0.0
        return float(free_qty * free_item.price)

    def apply_coupon(self, coupon: CouponRecord, cart: Cart) -> Cart:
        items = _copy_items(cart)
        for item in items:
            item.total_discount = 0.0

        free_qty, free_item = self._free_quantity(coupon, items)
        if free_item is not None and free_qty > 0:
            # Free units are merged into the existing line.
            free_item.quantity += free_qty
            free_item.total_discount = float(free_qty * free_item.price)

        return cart.model_copy(update={"items": items})
