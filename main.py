from datetime import datetime
from typing import List, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import engine
from config import API_TITLE, API_VERSION, CORS_ORIGINS
from exceptions import CouponError, CouponNotFound, MissingCouponDetails
from logger import get_logger
from models import (
    ApplicableCouponsResponse, ApplyCouponResponse, Cart, Coupon, CouponCreate,
    CouponRecord, ErrorResponse,
)
from storage import CouponRepository

log = get_logger("api")

# Initialize App
app = FastAPI(
    title=API_TITLE,
    description="Cart-wise, product-wise and buy-x-get-y coupons for e-commerce carts.",
    version=API_VERSION
)

if CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

COUPON_DB = CouponRepository()


# --- 1. Error handlers ---

def _error(status: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(timestamp=datetime.now(), error=error, message=message, status=status)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


@app.exception_handler(CouponNotFound)
def handle_coupon_not_found(request: Request, exc: CouponNotFound):
    return _error(404, "Coupon Not Found", str(exc))


@app.exception_handler(CouponError)
def handle_coupon_error(request: Request, exc: CouponError):
    return _error(400, "Invalid Coupon", str(exc))


@app.exception_handler(RequestValidationError)
def handle_invalid_request(request: Request, exc: RequestValidationError):
    return _error(400, "Invalid JSON", "Malformed JSON request")


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal Server Error", str(exc))


# --- 2. Coupon CRUD ---

def _validated(body: CouponCreate):
    coupon_type = engine.normalize_coupon_type(body.type)
    if body.details is None:
        raise MissingCouponDetails()
    return coupon_type, body.details


@app.post("/coupons", response_model=Coupon, status_code=201)
def create_coupon(body: CouponCreate):
    coupon_type, details = _validated(body)
    coupon = COUPON_DB.save(coupon_type, details)
    log.info("Created %s coupon %s", coupon.type, coupon.id)
    return coupon


@app.get("/coupons", response_model=List[Coupon])
def list_coupons():
    return COUPON_DB.find_all()


@app.get("/coupons/{coupon_id}", response_model=Coupon)
def get_coupon(coupon_id: int):
    return COUPON_DB.find_by_id(coupon_id)


@app.put("/coupons/{coupon_id}", response_model=Coupon)
def update_coupon(coupon_id: int, body: CouponCreate):
    COUPON_DB.find_by_id(coupon_id)
    if body.type is None or body.details is None:
        raise MissingCouponDetails("Both 'type' and 'details' fields are required for updating a coupon.")
    coupon_type, details = _validated(body)
    coupon = COUPON_DB.save(coupon_type, details, coupon_id=coupon_id)
    log.info("Updated coupon %s", coupon_id)
    return coupon


@app.delete("/coupons/{coupon_id}")
def delete_coupon(coupon_id: int):
    COUPON_DB.delete(coupon_id)
    log.info("Deleted coupon %s", coupon_id)
    return {"message": "Coupon deleted successfully."}


# --- 3. Evaluation ---

@app.post("/applicable-coupons", response_model=ApplicableCouponsResponse)
def applicable_coupons(cart: Cart):
    """Every stored coupon that gives the cart a positive discount."""
    records = [CouponRecord.from_coupon(c) for c in COUPON_DB.find_all()]
    return ApplicableCouponsResponse(applicable_coupons=engine.list_applicable(cart, records))


@app.post("/apply-coupon/{coupon_id}", response_model=ApplyCouponResponse)
def apply_coupon(coupon_id: int, cart: Optional[Cart] = Body(None)):
    """Apply one coupon and return the updated cart with its totals."""
    record = CouponRecord.from_coupon(COUPON_DB.find_by_id(coupon_id))
    return engine.apply(record, cart)
