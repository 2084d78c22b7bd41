# storefront/services/coupon_service.py
from decimal import Decimal
from typing import Dict, List, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from storefront.domain.schemas import CouponResult, money
from storefront.repos.kv_store import PersistentStore, coupon_key
from storefront.services.cart_service import CartService
from storefront.services.identity import IdentityProvider
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CouponKind = Literal["percentage", "flat", "free_shipping"]


class CouponRule(BaseModel):
    code: str
    kind: CouponKind
    # percentage: ulamek (0.10 = 10%), flat: kwota
    value: Decimal = Decimal("0")
    description: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def waives_shipping(self) -> bool:
        return self.kind == "free_shipping"

    def discount_for(self, subtotal: Decimal) -> Decimal:
        if subtotal <= 0 or self.kind == "free_shipping":
            return Decimal("0.00")
        if self.kind == "percentage":
            amount = money(subtotal * self.value)
        else:
            amount = money(self.value)
        # rabat nigdy wiekszy niz subtotal
        return min(amount, money(subtotal))


class CouponResolver(Protocol):
    def resolve(self, code: str) -> Optional[CouponRule]: ...

    def list_rules(self) -> List[CouponRule]: ...


DEFAULT_COUPONS: Dict[str, CouponRule] = {
    rule.code: rule
    for rule in (
        CouponRule(code="SAVE10", kind="percentage", value=Decimal("0.10"), description="10% off your order"),
        CouponRule(code="SAVE20", kind="percentage", value=Decimal("0.20"), description="20% off your order"),
        CouponRule(code="WELCOME15", kind="percentage", value=Decimal("0.15"), description="15% off for new customers"),
        CouponRule(code="STUDENT25", kind="percentage", value=Decimal("0.25"), description="25% student discount"),
        CouponRule(code="BLACKFRIDAY30", kind="percentage", value=Decimal("0.30"), description="Black Friday 30% off"),
        CouponRule(code="FREESHIP", kind="free_shipping", description="Free shipping on your order"),
        CouponRule(code="TAKE5", kind="flat", value=Decimal("5.00"), description="$5 off your order"),
    )
}


class TableCouponResolver:
    def __init__(self, table: Dict[str, CouponRule] | None = None):
        self.table = dict(DEFAULT_COUPONS if table is None else table)

    def resolve(self, code: str) -> Optional[CouponRule]:
        return self.table.get(code)

    def list_rules(self) -> List[CouponRule]:
        return list(self.table.values())


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


class CouponService:
    """
    Aktywny kupon dla koszyka danego scope.
    Zly albo pusty kod nie jest bledem - czysci aktywny kupon (rabat = 0).
    """

    def __init__(
        self,
        store: PersistentStore,
        identity: IdentityProvider,
        cart_service: CartService,
        resolver: CouponResolver | None = None,
    ):
        self.store = store
        self.identity = identity
        self.cart_service = cart_service
        self.resolver = resolver or TableCouponResolver()

    @property
    def _key(self) -> str:
        return coupon_key(self.identity.current_scope_key())

    #query
    def active_code(self) -> Optional[str]:
        code = self.store.load(self._key)
        if code is None:
            return None
        if not isinstance(code, str):
            logger.warning(f"Kupon w {self._key} ma zly format, usuwam")
            self.store.remove(self._key)
            return None
        return code

    def active_rule(self) -> Optional[CouponRule]:
        code = self.active_code()
        if not code:
            return None
        # regula mogla zniknac z tabeli od czasu zapisu
        return self.resolver.resolve(code)

    def discount_for(self, subtotal: Decimal) -> Decimal:
        rule = self.active_rule()
        return rule.discount_for(subtotal) if rule else Decimal("0.00")

    def list_coupons(self) -> List[CouponRule]:
        return self.resolver.list_rules()

    #commands
    def apply_coupon(self, code: str) -> CouponResult:
        normalized = normalize_code(code)

        if not normalized:
            self.store.remove(self._key)
            logger.info(f"Kupon usuniety dla {self.identity.current_scope_key()}")
            return CouponResult(success=True, message="Coupon removed")

        rule = self.resolver.resolve(normalized)
        if rule is None:
            self.store.remove(self._key)
            logger.info(f"Nieznany kupon {normalized}, aktywny kupon wyczyszczony")
            return CouponResult(success=False, message="Invalid coupon code")

        self.store.save(self._key, rule.code)
        discount = rule.discount_for(self.cart_service.get_cart_total())

        logger.info(f"Kupon {rule.code} zastosowany, rabat {discount}")
        return CouponResult(
            success=True,
            discount_amount=discount,
            code=rule.code,
            message=rule.description or "Coupon applied",
        )

    def remove_coupon(self) -> CouponResult:
        return self.apply_coupon("")
