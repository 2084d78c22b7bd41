# storefront/services/pricing.py
"""Pricing for the cart.

Everything here is a pure function of the cart lines and the active coupon.
Nothing is cached: callers recompute the breakdown on every read so that it
can never go stale against the stored cart.
"""
from decimal import Decimal
from typing import Callable, Iterable, Optional

from storefront.domain.schemas import CartItem, CartSummary, PriceBreakdown, money
from storefront.services.coupon_service import CouponRule
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD, SHIPPING_COST, TAX_RATE

ZERO = Decimal("0.00")

ShippingPolicy = Callable[[Decimal], Decimal]
TaxPolicy = Callable[[Decimal], Decimal]


class FlatRateShipping:
    """Flat fee below the free-shipping threshold, free at or above it."""

    def __init__(self, fee: Decimal = SHIPPING_COST, free_threshold: Decimal | None = FREE_SHIPPING_THRESHOLD):
        self.fee = money(fee)
        self.free_threshold = free_threshold

    def __call__(self, subtotal: Decimal) -> Decimal:
        if self.free_threshold is not None and subtotal >= self.free_threshold:
            return ZERO
        return self.fee


class FixedRateTax:
    def __init__(self, rate: Decimal = TAX_RATE):
        self.rate = Decimal(str(rate))

    def __call__(self, taxable: Decimal) -> Decimal:
        return money(max(taxable, ZERO) * self.rate)


def subtotal_of(items: Iterable[CartItem]) -> Decimal:
    return money(sum((i.line_total for i in items), ZERO))


class PricingEngine:
    def __init__(
        self,
        shipping_policy: Optional[ShippingPolicy] = None,
        tax_policy: Optional[TaxPolicy] = None,
    ):
        self.shipping_policy = shipping_policy or FlatRateShipping()
        self.tax_policy = tax_policy or FixedRateTax()

    def compute(self, items: Iterable[CartItem], coupon: Optional[CouponRule] = None) -> PriceBreakdown:
        """
        Derive subtotal, shipping, tax, discount and total.

        Tax is charged on the discounted subtotal. Shipping is zero for an
        empty cart and when the coupon waives it.
        """
        items = list(items)
        subtotal = subtotal_of(items)

        discount = coupon.discount_for(subtotal) if coupon else ZERO

        if not items or (coupon is not None and coupon.waives_shipping):
            shipping = ZERO
        else:
            shipping = money(self.shipping_policy(subtotal))

        tax = money(self.tax_policy(subtotal - discount))
        total = max(ZERO, subtotal + shipping + tax - discount)

        return PriceBreakdown(
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            discount=discount,
            total=money(total),
        )


def summarize_cart(cart_service, coupon_service, engine: PricingEngine | None = None) -> CartSummary:
    """Cart lines plus a freshly computed breakdown, for API responses and badges."""
    engine = engine or PricingEngine()
    cart = cart_service.get_cart()
    rule = coupon_service.active_rule()
    breakdown = engine.compute(cart.items, rule)

    return CartSummary(
        scope_key=cart_service.scope_key,
        items=cart.items,
        item_count=sum(i.effective_quantity for i in cart.items),
        coupon_code=rule.code if rule else None,
        **breakdown.model_dump(),
    )
