# storefront/services/payment_registry.py
from typing import List, Optional

from storefront.domain.schemas import PaymentMethodRef
from storefront.repos.kv_store import PersistentStore, payment_methods_key
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentMethodRegistry:
    """
    Zapisane metody platnosci (karta, PayPal, crypto, przelew).
    Checkout widzi tylko referencje (id + typ), nigdy dane karty.
    """

    def __init__(self, store: PersistentStore):
        self.store = store

    def list_methods(self, scope_key: str) -> List[PaymentMethodRef]:
        return self.store.load_typed(payment_methods_key(scope_key), List[PaymentMethodRef]) or []

    def get_default(self, scope_key: str) -> Optional[PaymentMethodRef]:
        methods = self.list_methods(scope_key)
        if not methods:
            return None
        return next((m for m in methods if m.is_default), methods[0])

    def add_method(self, scope_key: str, method: PaymentMethodRef) -> PaymentMethodRef:
        methods = [m for m in self.list_methods(scope_key) if m.id != method.id]
        if method.is_default:
            methods = [m.model_copy(update={"is_default": False}) for m in methods]
        methods.append(method)

        self.store.save(payment_methods_key(scope_key), methods)
        logger.info(f"Zapisano metode platnosci {method.id} ({method.type}) dla {scope_key}")
        return method
