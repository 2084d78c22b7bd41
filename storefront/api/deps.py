# storefront/api/deps.py
from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.repos.kv_store import PersistentStore, RedisStore, SqlStore
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutRegistry
from storefront.services.coupon_service import CouponService
from storefront.services.identity import StaticIdentity
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.payment_registry import PaymentMethodRegistry
from storefront.services.product_client import ProductCatalog, ProductClient
from storefront.utils.settings import STORE_BACKEND

#sesje checkoutu zyja w pamieci procesu
checkout_registry = CheckoutRegistry()

#kody bledow z OperationResult.error -> HTTP
_STATUS_BY_KIND = {
    "validation": 400,
    "stock": 400,
    "not_found": 404,
    "processing": 409,
}


def status_for_kind(kind: str | None) -> int:
    return _STATUS_BY_KIND.get(kind, 400)


def raise_for_result(result) -> None:
    if result.success:
        return
    status = status_for_kind(getattr(result, "error", None))
    raise HTTPException(status_code=status, detail=result.message)


def get_store(db: Session = Depends(get_db)) -> PersistentStore:
    if STORE_BACKEND == "redis":
        return RedisStore()
    return SqlStore(db)


def get_identity(user_id: str | None = Query(None)) -> StaticIdentity:
    return StaticIdentity(user_id)


def get_catalog() -> ProductCatalog:
    return ProductClient()


def get_notifier() -> NotificationService | None:
    return NotificationService()


def get_checkout_registry() -> CheckoutRegistry:
    return checkout_registry


def get_cart_service(
    store: PersistentStore = Depends(get_store),
    identity: StaticIdentity = Depends(get_identity),
    catalog: ProductCatalog = Depends(get_catalog),
) -> CartService:
    return CartService(store=store, identity=identity, catalog=catalog)


def get_coupon_service(
    store: PersistentStore = Depends(get_store),
    identity: StaticIdentity = Depends(get_identity),
    cart: CartService = Depends(get_cart_service),
) -> CouponService:
    return CouponService(store=store, identity=identity, cart_service=cart)


def get_payment_registry(store: PersistentStore = Depends(get_store)) -> PaymentMethodRegistry:
    return PaymentMethodRegistry(store)


def get_order_service(
    store: PersistentStore = Depends(get_store),
    cart: CartService = Depends(get_cart_service),
    coupons: CouponService = Depends(get_coupon_service),
    notifier: NotificationService | None = Depends(get_notifier),
) -> OrderService:
    return OrderService(store=store, cart_service=cart, coupon_service=coupons, notifier=notifier)
