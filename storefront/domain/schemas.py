# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

CheckoutStep = Literal["shipping", "billing", "payment", "review"]
STEPS: Tuple[CheckoutStep, ...] = ("shipping", "billing", "payment", "review")

PaymentType = Literal["card", "paypal", "crypto", "bank"]

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Zaokraglenie kwoty do groszy."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


# =====================================================
# KATALOG / KOSZYK
# =====================================================
class Product(BaseModel):
    """Widok produktu z katalogu (cena, stan magazynu, pola do wyswietlenia)."""

    id: str
    title: str
    price: Decimal
    stock: int = Field(..., ge=0)
    image: Optional[str] = None
    vendor: Optional[str] = None
    condition: Optional[str] = None
    rarity: Optional[str] = None


class CartItem(BaseModel):
    """Pozycja koszyka. Cena to snapshot z chwili dodania."""

    id: str
    title: str = ""
    price: Decimal
    # starsze wpisy moga nie miec quantity, wtedy liczymy jako 1
    quantity: Optional[int] = Field(None, ge=1)
    stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None
    vendor: Optional[str] = None
    condition: Optional[str] = None
    rarity: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("quantity", mode="before")
    @classmethod
    def _legacy_quantity(cls, v):
        # stary wpis z quantity <= 0 traktujemy jak brak quantity, nie jak uszkodzony koszyk
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v <= 0:
            return None
        return v

    @property
    def effective_quantity(self) -> int:
        return self.quantity or 1

    @property
    def line_total(self) -> Decimal:
        return self.price * self.effective_quantity


class Cart(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    coupon_code: Optional[str] = None


class PriceBreakdown(BaseModel):
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

    model_config = ConfigDict(frozen=True)


class CartSummary(BaseModel):
    """Schema dla koszyka (response)."""

    scope_key: str
    items: List[CartItem]
    item_count: int
    coupon_code: Optional[str] = None
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


class CartChanged(BaseModel):
    """Powiadomienie dla licznikow w UI (badge koszyka)."""

    scope_key: str
    item_count: int
    total: Decimal


# =====================================================
# WYNIKI OPERACJI
# =====================================================
class OperationResult(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, exc) -> "OperationResult":
        return cls(success=False, message=exc.message, error=exc.kind)


class CouponResult(BaseModel):
    success: bool
    discount_amount: Decimal = Decimal("0.00")
    code: Optional[str] = None
    message: str


class OrderResult(BaseModel):
    success: bool
    message: str
    order_id: Optional[str] = None
    error: Optional[str] = None


# =====================================================
# CHECKOUT
# =====================================================
class Address(BaseModel):
    """Adres dostawy lub platnika; obie role maja te same pola."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    phone: str
    address: str = Field(..., min_length=1)
    address2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    instructions: Optional[str] = None
    company: Optional[str] = None
    vat_number: Optional[str] = None
    address_type: Literal["shipping", "billing"] = "shipping"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def as_billing(self) -> "Address":
        return self.model_copy(update={"address_type": "billing"})

    def as_shipping(self) -> "Address":
        return self.model_copy(update={"address_type": "shipping"})


class PaymentMethodRef(BaseModel):
    id: str
    type: PaymentType = "card"
    label: str = ""
    is_default: bool = False


class CheckoutData(BaseModel):
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    same_as_shipping: bool = True
    payment_method: Optional[PaymentMethodRef] = None
    order_notes: str = ""
    accept_terms: bool = False
    subscribe_newsletter: bool = False
    current_step: CheckoutStep = "shipping"


# =====================================================
# ZAMOWIENIA
# =====================================================
class OrderItem(BaseModel):
    product_id: str
    title: str
    price: Decimal
    quantity: int
    image: Optional[str] = None
    vendor: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Order(BaseModel):
    """Niezmienny snapshot zlozonego zamowienia."""

    id: str
    order_number: str
    scope_key: str
    items: Tuple[OrderItem, ...]
    shipping_address: Address
    billing_address: Address
    payment_method_type: PaymentType
    price_breakdown: PriceBreakdown
    coupon_code: Optional[str] = None
    status: Literal["pending", "processing", "completed", "cancelled"] = "processing"
    notes: str = ""
    created_at: datetime
    estimated_delivery: datetime

    model_config = ConfigDict(frozen=True)


# =====================================================
# API IN
# =====================================================
class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, description="Ilosc produktu")


class QuantityIn(BaseModel):
    quantity: int


class CouponIn(BaseModel):
    code: str = ""


class SameAsShippingIn(BaseModel):
    same: bool


class PaymentIn(BaseModel):
    """Wybor metody platnosci; bez id bierzemy domyslna z rejestru."""

    id: Optional[str] = None
    type: PaymentType = "card"
    label: str = ""


class ReviewIn(BaseModel):
    accept_terms: bool = False
    subscribe_newsletter: bool = False
    order_notes: str = ""


# =====================================================
# API OUT
# =====================================================
class CartActionOut(BaseModel):
    message: str
    cart: CartSummary


class CheckoutOut(BaseModel):
    scope_key: str
    data: CheckoutData
    can_proceed: bool
    is_processing: bool = False
