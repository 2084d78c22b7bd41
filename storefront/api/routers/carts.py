# storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_cart_service, get_coupon_service, raise_for_result
from storefront.domain.schemas import CartActionOut, CartSummary, CouponIn, CouponResult, ItemIn, QuantityIn
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import CouponRule, CouponService
from storefront.services.pricing import summarize_cart

router = APIRouter(prefix="/cart", tags=["cart"])


def _action(result, cart: CartService, coupons: CouponService) -> CartActionOut:
    raise_for_result(result)
    return CartActionOut(message=result.message, cart=summarize_cart(cart, coupons))


@router.get("", response_model=CartSummary)
def get_cart(
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
):
    return summarize_cart(cart, coupons)


@router.post("/items", response_model=CartActionOut)
def add_item(
    payload: ItemIn,
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
):
    result = cart.add_product(payload.product_id, payload.quantity)
    return _action(result, cart, coupons)


@router.patch("/items/{product_id}", response_model=CartActionOut)
def update_item(
    product_id: str,
    payload: QuantityIn,
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
):
    result = cart.update_quantity(product_id, payload.quantity)
    return _action(result, cart, coupons)


@router.delete("/items/{product_id}", response_model=CartActionOut)
def remove_item(
    product_id: str,
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
):
    result = cart.remove_from_cart(product_id)
    return _action(result, cart, coupons)


@router.delete("", response_model=CartActionOut)
def clear_cart(
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
):
    return _action(cart.clear_cart(), cart, coupons)


@router.get("/coupons", response_model=List[CouponRule])
def list_coupons(coupons: CouponService = Depends(get_coupon_service)):
    return coupons.list_coupons()


@router.post("/coupon", response_model=CouponResult)
def apply_coupon(payload: CouponIn, coupons: CouponService = Depends(get_coupon_service)):
    result = coupons.apply_coupon(payload.code)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result


@router.delete("/coupon", response_model=CouponResult)
def remove_coupon(coupons: CouponService = Depends(get_coupon_service)):
    return coupons.remove_coupon()
