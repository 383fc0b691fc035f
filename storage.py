"""In-memory coupon store used by the HTTP layer."""
import itertools
import threading
from typing import Any, Dict, List, Optional

from exceptions import CouponNotFound
from models import Coupon


class CouponRepository:
    """
    Coupons keyed by an auto-increment id. Iteration follows insertion order.
    """

    def __init__(self):
        self._coupons: Dict[int, Coupon] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, coupon_type: str, details: Dict[str, Any], coupon_id: Optional[int] = None) -> Coupon:
        with self._lock:
            if coupon_id is None:
                coupon_id = next(self._ids)
            coupon = Coupon(id=coupon_id, type=coupon_type, details=details)
            self._coupons[coupon_id] = coupon
            return coupon

    def find_all(self) -> List[Coupon]:
        with self._lock:
            return list(self._coupons.values())

    def find_by_id(self, coupon_id: int) -> Coupon:
        with self._lock:
            coupon = self._coupons.get(coupon_id)
        if coupon is None:
            raise CouponNotFound(coupon_id)
        return coupon

    def delete(self, coupon_id: int) -> None:
        with self._lock:
            if self._coupons.pop(coupon_id, None) is None:
                raise CouponNotFound(coupon_id)

    def clear(self) -> None:
        with self._lock:
            self._coupons.clear()
            self._ids = itertools.count(1)
