# storefront/services/checkout_service.py
from typing import Optional

from storefront.domain.errors import OrderInProgressError
from storefront.domain.schemas import STEPS, Address, CheckoutData, CheckoutStep, PaymentMethodRef
from storefront.services.payment_registry import PaymentMethodRegistry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutSession:
    """
    Stan checkoutu: shipping -> billing -> payment -> review.

    next_step / prev_step przesuwaja o jeden krok i nic nie robia na brzegach.
    Maszyna NIE blokuje przejscia - can_proceed() to tylko predykat,
    warstwa wywolujaca (UI / router) decyduje czy przepuscic uzytkownika.

    Dane zyja tylko w pamieci, porzucony checkout po prostu znika.
    Podczas skladania zamowienia (is_processing) kazda zmiana rzuca
    OrderInProgressError, zamowienie widzi dane z chwili startu.
    """

    def __init__(self, scope_key: str):
        self.scope_key = scope_key
        self.data = CheckoutData()
        # tylko jedno skladanie zamowienia naraz
        self.is_processing = False

    @property
    def current_step(self) -> CheckoutStep:
        return self.data.current_step

    def set_current_step(self, step: CheckoutStep) -> None:
        self._ensure_editable()
        if step not in STEPS:
            raise ValueError(f"Unknown checkout step: {step}")
        self.data.current_step = step

    def next_step(self) -> CheckoutStep:
        self._ensure_editable()
        index = STEPS.index(self.data.current_step)
        if index < len(STEPS) - 1:
            self.data.current_step = STEPS[index + 1]
        return self.data.current_step

    def prev_step(self) -> CheckoutStep:
        self._ensure_editable()
        index = STEPS.index(self.data.current_step)
        if index > 0:
            self.data.current_step = STEPS[index - 1]
        return self.data.current_step

    #adresy
    def update_shipping_address(self, address: Address) -> None:
        self._ensure_editable()
        self.data.shipping_address = address.as_shipping()
        if self.data.same_as_shipping:
            self.data.billing_address = address.as_billing()

    def update_billing_address(self, address: Address) -> None:
        self._ensure_editable()
        self.data.billing_address = address.as_billing()

    def set_same_as_shipping(self, same: bool) -> None:
        self._ensure_editable()
        self.data.same_as_shipping = same
        # przy false zostaje ostatni jawny adres platnika
        if same and self.data.shipping_address is not None:
            self.data.billing_address = self.data.shipping_address.as_billing()

    def resolved_billing_address(self) -> Optional[Address]:
        if self.data.same_as_shipping:
            if self.data.shipping_address is None:
                return None
            return self.data.shipping_address.as_billing()
        return self.data.billing_address

    #platnosc i review
    def update_payment_method(self, method: Optional[PaymentMethodRef]) -> None:
        self._ensure_editable()
        self.data.payment_method = method

    def use_default_payment_method(self, registry: PaymentMethodRegistry) -> Optional[PaymentMethodRef]:
        self._ensure_editable()
        method = registry.get_default(self.scope_key)
        if method is None:
            logger.info(f"Brak domyslnej metody platnosci dla {self.scope_key}")
            return None
        self.data.payment_method = method
        return method

    def set_order_notes(self, notes: str) -> None:
        self._ensure_editable()
        self.data.order_notes = notes

    def set_accept_terms(self, accept: bool) -> None:
        self._ensure_editable()
        self.data.accept_terms = accept

    def set_subscribe_newsletter(self, subscribe: bool) -> None:
        self._ensure_editable()
        self.data.subscribe_newsletter = subscribe

    def can_proceed(self) -> bool:
        step = self.data.current_step
        if step == "shipping":
            return self.data.shipping_address is not None
        if step == "billing":
            return self.data.same_as_shipping or self.data.billing_address is not None
        if step == "payment":
            return self.data.payment_method is not None
        if step == "review":
            return self.data.accept_terms
        return False

    def reset(self) -> None:
        self._ensure_editable()
        self.data = CheckoutData()

    def complete(self) -> None:
        """Czyszczenie po zlozonym zamowieniu, wolane przez OrderService w trakcie is_processing."""
        self.data = CheckoutData()

    def _ensure_editable(self) -> None:
        if self.is_processing:
            raise OrderInProgressError()


class CheckoutRegistry:
    """Jedna sesja checkoutu na scope, w pamieci procesu."""

    def __init__(self):
        self._sessions: dict[str, CheckoutSession] = {}

    def get(self, scope_key: str) -> CheckoutSession:
        if scope_key not in self._sessions:
            self._sessions[scope_key] = CheckoutSession(scope_key)
        return self._sessions[scope_key]

    def discard(self, scope_key: str) -> None:
        self._sessions.pop(scope_key, None)
