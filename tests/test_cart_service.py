"""Tests for CartService."""

from decimal import Decimal

from storefront.data.models import KVEntryModel
from storefront.domain.schemas import OrderItem
from storefront.repos.kv_store import cart_key, coupon_key
from storefront.services.cart_service import CartService
from storefront.services.identity import StaticIdentity


class TestAddToCart:
    def test_add_to_empty_cart(self, cart_service, charizard):
        result = cart_service.add_to_cart(charizard, 1)

        assert result.success is True
        assert result.message == "Added to cart"
        assert cart_service.get_item_quantity(charizard.id) == 1

    def test_add_existing_updates_quantity_in_place(self, cart_service, charizard, pikachu):
        cart_service.add_to_cart(charizard)
        cart_service.add_to_cart(pikachu)
        result = cart_service.add_to_cart(charizard, 2)

        assert result.success is True
        assert result.message == "Quantity updated"
        items = cart_service.get_items()
        assert [i.id for i in items] == ["1", "2"]
        assert items[0].quantity == 3

    def test_add_beyond_stock_fails(self, cart_service, charizard):
        cart_service.add_to_cart(charizard, 5)

        result = cart_service.add_to_cart(charizard, 1)

        assert result.success is False
        assert result.message == "Not enough stock"
        assert result.error == "stock"
        assert cart_service.get_item_quantity(charizard.id) == 5

    def test_add_more_than_stock_to_empty_cart_fails(self, cart_service, charizard):
        result = cart_service.add_to_cart(charizard, 10)

        assert result.success is False
        assert result.message == "Not enough stock"
        assert cart_service.get_items() == []

    def test_add_non_positive_quantity_fails(self, cart_service, charizard):
        result = cart_service.add_to_cart(charizard, 0)

        assert result.success is False
        assert result.message == "Invalid quantity"

    def test_never_stores_more_than_stock(self, cart_service, charizard):
        for _ in range(10):
            cart_service.add_to_cart(charizard, 2)

        assert cart_service.get_item_quantity(charizard.id) <= charizard.stock

    def test_price_is_snapshot_at_add_time(self, cart_service, charizard):
        cart_service.add_to_cart(charizard)
        cheaper = charizard.model_copy(update={"price": Decimal("1.00")})

        cart_service.add_to_cart(cheaper)

        assert cart_service.get_items()[0].price == Decimal("5999.99")

    def test_add_product_by_id(self, cart_service):
        result = cart_service.add_product("2", 3)

        assert result.success is True
        assert cart_service.get_item_quantity("2") == 3

    def test_add_unknown_product(self, cart_service):
        result = cart_service.add_product("missing")

        assert result.success is False
        assert result.message == "Product not found"
        assert result.error == "not_found"


class TestRemoveFromCart:
    def test_remove_product(self, cart_service, charizard, pikachu):
        cart_service.add_to_cart(charizard)
        cart_service.add_to_cart(pikachu)

        result = cart_service.remove_from_cart(charizard.id)

        assert result.success is True
        assert result.message == "Removed from cart"
        assert [i.id for i in cart_service.get_items()] == [pikachu.id]

    def test_remove_non_existent(self, cart_service, charizard, pikachu):
        cart_service.add_to_cart(charizard)
        cart_service.add_to_cart(pikachu)

        result = cart_service.remove_from_cart("non-existent")

        assert result.success is False
        assert result.message == "Product not in cart"

    def test_remove_from_empty_cart(self, cart_service):
        result = cart_service.remove_from_cart("1")

        assert result.success is False
        assert result.message == "Cart is empty"


class TestUpdateQuantity:
    def test_update_quantity(self, cart_service, charizard):
        cart_service.add_to_cart(charizard, 2)

        result = cart_service.update_quantity(charizard.id, 4)

        assert result.success is True
        assert result.message == "Quantity updated"
        assert cart_service.get_item_quantity(charizard.id) == 4

    def test_negative_quantity(self, cart_service, charizard):
        cart_service.add_to_cart(charizard, 2)

        result = cart_service.update_quantity(charizard.id, -1)

        assert result.success is False
        assert result.message == "Invalid quantity"
        assert cart_service.get_item_quantity(charizard.id) == 2

    def test_zero_removes_item(self, cart_service, charizard):
        cart_service.add_to_cart(charizard, 2)

        result = cart_service.update_quantity(charizard.id, 0)

        assert result.success is True
        assert result.message == "Removed from cart"
        assert cart_service.is_in_cart(charizard.id) is False

    def test_exceeding_stock(self, cart_service, charizard):
        cart_service.add_to_cart(charizard, 2)

        result = cart_service.update_quantity(charizard.id, 6)

        assert result.success is False
        assert result.message == "Not enough stock"
        assert cart_service.get_item_quantity(charizard.id) == 2

    def test_uses_current_catalog_stock(self, cart_service, catalog, charizard):
        cart_service.add_to_cart(charizard, 2)
        catalog.set_stock(charizard.id, 3)

        assert cart_service.update_quantity(charizard.id, 4).message == "Not enough stock"
        assert cart_service.update_quantity(charizard.id, 3).success is True

    def test_falls_back_to_item_stock_without_catalog(self, store, charizard):
        service = CartService(store=store, identity=StaticIdentity())
        service.add_to_cart(charizard, 1)

        assert service.update_quantity(charizard.id, 6).message == "Not enough stock"
        assert service.update_quantity(charizard.id, 5).success is True

    def test_product_not_in_cart(self, cart_service, charizard):
        cart_service.add_to_cart(charizard)

        result = cart_service.update_quantity("2", 1)

        assert result.success is False
        assert result.message == "Product not in cart"


class TestClearCart:
    def test_clear_populated_cart(self, cart_service, charizard, store):
        cart_service.add_to_cart(charizard)

        result = cart_service.clear_cart()

        assert result.success is True
        assert result.message == "Cart cleared"
        assert store.load(cart_key("guest")) is None

    def test_clear_is_idempotent(self, cart_service):
        first = cart_service.clear_cart()
        second = cart_service.clear_cart()

        assert first.success is second.success is True
        assert first.message == second.message == "Cart cleared"



class TestRemoveOrdered:
    def test_removes_everything_that_was_ordered(self, cart_service, store, charizard):
        cart_service.add_to_cart(charizard, 2)
        store.save(coupon_key("guest"), "SAVE10")

        result = cart_service.remove_ordered([OrderItem(product_id="1", title="Charizard", price=Decimal("5999.99"), quantity=2)])

        assert result.message == "Cart cleared"
        assert cart_service.get_items() == []
        assert store.load(coupon_key("guest")) is None

    def test_keeps_lines_added_after_snapshot(self, cart_service, store, charizard, pikachu):
        cart_service.add_to_cart(charizard, 3)
        cart_service.add_to_cart(pikachu)
        store.save(coupon_key("guest"), "SAVE10")

        result = cart_service.remove_ordered([OrderItem(product_id="1", title="Charizard", price=Decimal("5999.99"), quantity=2)])

        assert result.success is True
        assert [(i.id, i.quantity) for i in cart_service.get_items()] == [("1", 1), ("2", 1)]
        assert store.load(coupon_key("guest")) is None

class TestQueries:
    def test_cart_total(self, cart_service, store):
        store.save(cart_key("guest"), [
            {"id": "1", "price": "100", "quantity": 2},
            {"id": "2", "price": "50", "quantity": 1},
        ])

        assert cart_service.get_cart_total() == Decimal("250")

    def test_empty_cart_total_is_zero(self, cart_service):
        assert cart_service.get_cart_total() == 0
        assert cart_service.get_cart_item_count() == 0

    def test_legacy_items_without_quantity_count_as_one(self, cart_service, store):
        store.save(cart_key("guest"), [
            {"id": "1", "price": "10"},
            {"id": "2", "price": "5", "quantity": 3},
        ])

        assert cart_service.get_cart_item_count() == 4
        assert cart_service.get_cart_total() == Decimal("25")

    def test_legacy_zero_quantity_does_not_drop_cart(self, cart_service, store):
        store.save(cart_key("guest"), [
            {"id": "1", "price": "10", "quantity": 0},
            {"id": "2", "price": "5", "quantity": 2},
        ])

        items = cart_service.get_items()

        assert [i.id for i in items] == ["1", "2"]
        assert items[0].quantity is None
        assert cart_service.get_cart_item_count() == 3

    def test_is_in_cart(self, cart_service, charizard):
        cart_service.add_to_cart(charizard)

        assert cart_service.is_in_cart(charizard.id) is True
        assert cart_service.is_in_cart("2") is False

    def test_corrupted_cart_reads_as_empty(self, cart_service, db_session):
        db_session.add(KVEntryModel(key="cart:guest", value="[[[["))
        db_session.commit()

        assert cart_service.get_items() == []
        assert cart_service.add_to_cart(cart_service.catalog.get_by_id("1")).success is True

    def test_roundtrip_through_storage(self, store, catalog, charizard, pikachu, cart_service, coupon_service):
        cart_service.add_to_cart(charizard, 2)
        cart_service.add_to_cart(pikachu, 1)
        coupon_service.apply_coupon("SAVE10")

        reloaded = CartService(store=store, identity=StaticIdentity(), catalog=catalog).get_cart()

        assert reloaded == cart_service.get_cart()
        assert [(i.id, i.quantity) for i in reloaded.items] == [("1", 2), ("2", 1)]
        assert reloaded.coupon_code == "SAVE10"

    def test_carts_are_scoped(self, store, catalog, charizard):
        guest = CartService(store=store, identity=StaticIdentity(), catalog=catalog)
        user = CartService(store=store, identity=StaticIdentity(42), catalog=catalog)

        user.add_to_cart(charizard)

        assert user.is_in_cart(charizard.id) is True
        assert guest.get_items() == []


class TestListeners:
    def test_listener_receives_counts(self, cart_service, charizard):
        events = []
        cart_service.subscribe(events.append)

        cart_service.add_to_cart(charizard, 2)
        cart_service.clear_cart()

        assert [(e.item_count, e.total) for e in events] == [
            (2, Decimal("11999.98")),
            (0, Decimal("0.00")),
        ]

    def test_failed_mutation_does_not_notify(self, cart_service):
        events = []
        cart_service.subscribe(events.append)

        cart_service.remove_from_cart("1")

        assert events == []

    def test_unsubscribe(self, cart_service, charizard):
        events = []
        cart_service.subscribe(events.append)
        cart_service.unsubscribe(events.append)

        cart_service.add_to_cart(charizard)

        assert events == []

    def test_broken_listener_does_not_break_mutation(self, cart_service, charizard):
        def broken(event):
            raise RuntimeError("boom")

        cart_service.subscribe(broken)

        assert cart_service.add_to_cart(charizard).success is True
        assert cart_service.is_in_cart(charizard.id)
