# storefront/services/cart_service.py
from decimal import Decimal
from typing import Callable, Iterable, List

from storefront.domain.errors import NotFoundError, StockError, StorefrontError, ValidationError
from storefront.domain.schemas import Cart, CartChanged, CartItem, OperationResult, OrderItem, Product, money
from storefront.repos.kv_store import PersistentStore, cart_key, coupon_key
from storefront.services.identity import IdentityProvider
from storefront.services.product_client import ProductCatalog
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CartListener = Callable[[CartChanged], None]


class CartService:
    """
    Prosta implementacja cqrs dla domeny cart
    commands (add, update, remove, clear) modyfikuja stan i zapisuja koszyk
    query (get, total, count) tylko odczyt

    Kazda komenda zwraca OperationResult zamiast rzucac wyjatek.
    """

    def __init__(
        self,
        store: PersistentStore,
        identity: IdentityProvider,
        catalog: ProductCatalog | None = None,
    ):
        self.store = store
        self.identity = identity
        self.catalog = catalog
        self._listeners: List[CartListener] = []

    @property
    def scope_key(self) -> str:
        return self.identity.current_scope_key()

    #listeners - liczniki w UI
    def subscribe(self, listener: CartListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        event = CartChanged(
            scope_key=self.scope_key,
            item_count=self.get_cart_item_count(),
            total=self.get_cart_total(),
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"Listener koszyka rzucil wyjatek: {e}")

    #query - odczyt
    def get_items(self) -> List[CartItem]:
        return self.store.load_typed(cart_key(self.scope_key), List[CartItem]) or []

    def get_cart(self) -> Cart:
        code = self.store.load(coupon_key(self.scope_key))
        return Cart(
            items=self.get_items(),
            coupon_code=code if isinstance(code, str) else None,
        )

    def get_cart_total(self) -> Decimal:
        return money(sum((i.line_total for i in self.get_items()), Decimal("0.00")))

    def get_cart_item_count(self) -> int:
        # brak quantity w starym wpisie liczy sie jako 1
        return sum(i.effective_quantity for i in self.get_items())

    def is_in_cart(self, product_id: str) -> bool:
        return any(i.id == product_id for i in self.get_items())

    def get_item_quantity(self, product_id: str) -> int:
        for item in self.get_items():
            if item.id == product_id:
                return item.effective_quantity
        return 0

    #commands
    def add_to_cart(self, product: Product, quantity: int = 1) -> OperationResult:
        try:
            if quantity <= 0:
                raise ValidationError("Invalid quantity")

            items = self.get_items()
            existing = next((i for i in items if i.id == product.id), None)
            proposed = existing.effective_quantity + quantity if existing else quantity

            if proposed > product.stock:
                raise StockError(product.id, proposed, product.stock)

            if existing:
                logger.info(
                    f"Produkt {product.id} juz jest w koszyku {self.scope_key}, zwiekszam ilosc "
                    f"z {existing.effective_quantity} do {proposed}"
                )
                existing.quantity = proposed
                existing.stock = product.stock
                item, message = existing, "Quantity updated"
            else:
                logger.info(f"Dodaje nowy produkt {product.id} do koszyka {self.scope_key}")
                item = CartItem(
                    id=product.id,
                    title=product.title,
                    price=money(product.price),
                    quantity=quantity,
                    stock=product.stock,
                    image=product.image,
                    vendor=product.vendor,
                    condition=product.condition,
                    rarity=product.rarity,
                )
                items.append(item)
                message = "Added to cart"

        except StorefrontError as e:
            logger.info(f"add_to_cart({product.id}, {quantity}) odrzucone: {e.message}")
            return OperationResult.fail(e)

        self._save(items)
        return OperationResult.ok(message, data=item)

    def add_product(self, product_id: str, quantity: int = 1) -> OperationResult:
        """Add by id, looking the product up in the catalog first."""
        product = self.catalog.get_by_id(product_id) if self.catalog else None
        if product is None:
            return OperationResult.fail(NotFoundError("Product not found"))
        return self.add_to_cart(product, quantity)

    def remove_from_cart(self, product_id: str) -> OperationResult:
        items = self.get_items()

        try:
            if not items:
                raise NotFoundError("Cart is empty")

            remaining = [i for i in items if i.id != product_id]
            if len(remaining) == len(items):
                raise NotFoundError("Product not in cart")

        except StorefrontError as e:
            return OperationResult.fail(e)

        logger.info(f"Usuwanie produktu {product_id} z koszyka {self.scope_key}")
        self._save(remaining)
        return OperationResult.ok("Removed from cart")

    def update_quantity(self, product_id: str, quantity: int) -> OperationResult:
        if quantity < 0:
            return OperationResult.fail(ValidationError("Invalid quantity"))

        if quantity == 0:
            return self.remove_from_cart(product_id)

        items = self.get_items()
        item = next((i for i in items if i.id == product_id), None)

        try:
            if item is None:
                raise NotFoundError("Product not in cart")

            stock = self._current_stock(item)
            if stock is not None and quantity > stock:
                raise StockError(product_id, quantity, stock)

        except StorefrontError as e:
            return OperationResult.fail(e)

        item.quantity = quantity
        if stock is not None:
            item.stock = stock
        self._save(items)

        logger.info(f"Ilosc produktu {product_id} w koszyku {self.scope_key} ustawiona na {quantity}")
        return OperationResult.ok("Quantity updated", data=item)

    def clear_cart(self) -> OperationResult:
        # idempotentne, pusty koszyk tez daje sukces
        self.store.remove(cart_key(self.scope_key))
        self.store.remove(coupon_key(self.scope_key))

        logger.info(f"Koszyk {self.scope_key} wyczyszczony")
        self._notify()
        return OperationResult.ok("Cart cleared")

    def remove_ordered(self, ordered: Iterable[OrderItem]) -> OperationResult:
        """
        Zdejmuje z koszyka ilosci, ktore weszly do zamowienia.
        Pozycje dodane lub zwiekszone po snapshocie zostaja z reszta ilosci.
        Kupon zostal zuzyty przez zamowienie, wiec znika zawsze.
        """
        ordered_qty = {o.product_id: o.quantity for o in ordered}

        remaining = []
        for item in self.get_items():
            left = item.effective_quantity - ordered_qty.get(item.id, 0)
            if left <= 0:
                continue
            if item.id in ordered_qty:
                item.quantity = left
            remaining.append(item)

        if not remaining:
            return self.clear_cart()

        self.store.remove(coupon_key(self.scope_key))
        logger.info(f"Koszyk {self.scope_key}: zamowione pozycje zdjete, zostalo {len(remaining)}")
        self._save(remaining)
        return OperationResult.ok("Cart updated")

    def _current_stock(self, item: CartItem) -> int | None:
        """Stock z katalogu jesli jest, inaczej ostatni znany stock z pozycji."""
        if self.catalog is not None:
            product = self.catalog.get_by_id(item.id)
            if product is not None:
                return product.stock
        return item.stock

    def _save(self, items: List[CartItem]) -> None:
        self.store.save(cart_key(self.scope_key), items)
        self._notify()
