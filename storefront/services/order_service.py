# storefront/services/order_service.py
import asyncio
import secrets
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from storefront.domain.errors import OrderInProgressError, StorefrontError, ValidationError
from storefront.domain.schemas import CartItem, Order, OrderItem, OrderResult
from storefront.repos.kv_store import PersistentStore, last_order_key, orders_key
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutSession
from storefront.services.coupon_service import CouponService
from storefront.services.notification_service import NotificationService
from storefront.services.pricing import PricingEngine
from storefront.utils.settings import ESTIMATED_DELIVERY_DAYS, ORDER_PLACEMENT_DELAY_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def generate_order_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def generate_order_number() -> str:
    # osobna przestrzen numerow, nie wynika z id
    return f"#{100000 + secrets.randbelow(900000)}"


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Jedyny, ktory zapisuje zamowienia; koszyk czysci dopiero po zapisie.
    """

    def __init__(
        self,
        store: PersistentStore,
        cart_service: CartService,
        coupon_service: CouponService,
        pricing: PricingEngine | None = None,
        notifier: NotificationService | None = None,
        on_order_placed: Callable[[str], None] | None = None,
        delay_seconds: float = ORDER_PLACEMENT_DELAY_SECONDS,
        estimated_delivery_days: int = ESTIMATED_DELIVERY_DAYS,
    ):
        self.store = store
        self.cart_service = cart_service
        self.coupon_service = coupon_service
        self.pricing = pricing or PricingEngine()
        self.notifier = notifier
        self.on_order_placed = on_order_placed
        self.delay_seconds = delay_seconds
        self.estimated_delivery_days = estimated_delivery_days

    @property
    def scope_key(self) -> str:
        return self.cart_service.scope_key

    #query
    def list_orders(self) -> List[Order]:
        return self.store.load_typed(orders_key(self.scope_key), List[Order]) or []

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.list_orders() if o.id == order_id), None)

    def get_last_order(self) -> Optional[Order]:
        return self.store.load_typed(last_order_key(self.scope_key), Order)

    #commands
    async def place_order(self, session: CheckoutSession) -> OrderResult:
        """
        Use Case: Zlozenie zamowienia z koszyka.

        1. Sprawdza czy checkout jest na kroku review i mozna przejsc dalej
        2. Zamraza pozycje i PriceBreakdown
        3. Dopisuje zamowienie do listy (append-only) i zapisuje "ostatnie"
        4. Zdejmuje zamowione pozycje z koszyka i czysci sesje checkoutu
        5. Wysyla powiadomienie (async)
        """
        if session.is_processing:
            logger.warning(f"Zamowienie dla {self.scope_key} jest juz w trakcie skladania")
            return self._failure(OrderInProgressError())

        session.is_processing = True
        try:
            return await self._place(session)
        finally:
            session.is_processing = False

    async def _place(self, session: CheckoutSession) -> OrderResult:
        items = self.cart_service.get_items()

        try:
            self._validate(session, items)
        except StorefrontError as e:
            return self._failure(e)

        rule = self.coupon_service.active_rule()
        breakdown = self.pricing.compute(items, rule)

        # wszystko co trafia do zamowienia zamrazamy przed opoznieniem
        data = session.data
        snapshot = tuple(self._snapshot(i) for i in items)
        shipping_address = data.shipping_address.as_shipping()
        billing_address = session.resolved_billing_address().model_copy()
        payment_type = data.payment_method.type
        notes = data.order_notes

        # symulacja opoznienia sieci/platnosci
        await asyncio.sleep(self.delay_seconds)

        created_at = datetime.now(timezone.utc)
        order = Order(
            id=generate_order_id(),
            order_number=generate_order_number(),
            scope_key=self.scope_key,
            items=snapshot,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method_type=payment_type,
            price_breakdown=breakdown,
            coupon_code=rule.code if rule else None,
            status="processing",
            notes=notes,
            created_at=created_at,
            estimated_delivery=created_at + timedelta(days=self.estimated_delivery_days),
        )

        self._persist(order)

        # pozycje dodane w trakcie opoznienia zostaja w koszyku
        self.cart_service.remove_ordered(snapshot)
        session.complete()

        logger.info(f"Order {order.order_number} ({order.id}) created for {self.scope_key}, total {breakdown.total}")

        if self.notifier is not None:
            self.notifier.send_order_notification(self.scope_key, order.id, order.order_number)
        if self.on_order_placed is not None:
            self.on_order_placed(order.id)

        return OrderResult(success=True, message="Order placed successfully", order_id=order.id)

    def _validate(self, session: CheckoutSession, items: List[CartItem]) -> None:
        data = session.data
        if (
            session.current_step != "review"
            or not session.can_proceed()
            or data.shipping_address is None
            or session.resolved_billing_address() is None
            or data.payment_method is None
        ):
            raise ValidationError("Please complete all required fields")

        if not items:
            raise ValidationError("Cart is empty")

    def _persist(self, order: Order) -> None:
        previous = self.store.load_typed(orders_key(self.scope_key), List[Order])
        orders = list(previous or [])
        orders.append(order)
        self.store.save(orders_key(self.scope_key), orders)

        try:
            self.store.save(last_order_key(self.scope_key), order)
        except Exception as e:
            logger.error(f"Blad zapisu ostatniego zamowienia {order.id}: {e}, cofam liste zamowien")
            if previous is None:
                self.store.remove(orders_key(self.scope_key))
            else:
                self.store.save(orders_key(self.scope_key), previous)
            raise

    @staticmethod
    def _snapshot(item: CartItem) -> OrderItem:
        return OrderItem(
            product_id=item.id,
            title=item.title,
            price=item.price,
            quantity=item.effective_quantity,
            image=item.image,
            vendor=item.vendor,
        )

    def _failure(self, exc: StorefrontError) -> OrderResult:
        logger.info(f"place_order odrzucone dla {self.scope_key}: {exc.message}")
        return OrderResult(success=False, message=exc.message, error=exc.kind)
