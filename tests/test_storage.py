"""
Tests for cart persistence (save / load / rehydration)
"""

import json
import pytest
from decimal import Decimal

from storefront.cart import CartItem, CartPersistence, CartState
from storefront.cart.storage import decode, encode
from storefront.db import MemoryStore, StorageKeys


class TestDecode:
    """Tests for schema-checked deserialization."""

    def test_valid_record(self):
        """Test decoding a well-formed record."""
        raw = json.dumps({
            "items": [{"id": "A", "name": "Mug", "price": 10, "quantity": 2, "image": "mug.png"}],
            "totalItems": 2,
            "totalPrice": 20,
        })

        result = decode(raw)

        assert result.ok
        assert result.error is None
        assert result.state.total_items == 2
        assert result.state.items[0].extra == {"image": "mug.png"}

    @pytest.mark.parametrize("raw", [
        "not json at all",
        "{",
        "",
        "null",
        "[]",
        "42",
        json.dumps({"totalItems": 1}),
        json.dumps({"items": "A"}),
        json.dumps({"items": None}),
        json.dumps({"items": ["A"]}),
        json.dumps({"items": [{"name": "no id", "price": 1, "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": "abc", "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": -1, "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": 1, "quantity": 0}]}),
        json.dumps({"items": [{"id": "A", "price": 1, "quantity": "2"}]}),
        json.dumps({"items": [{"id": "A", "price": 1}]}),
        json.dumps({"items": [{"id": "A", "name": 5, "price": 1, "quantity": 1}]}),
        json.dumps({"items": [
            {"id": "A", "price": 1, "quantity": 1},
            {"id": "A", "price": 1, "quantity": 2},
        ]}),
        json.dumps({"items": [{"id": "A", "price": 1e30, "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": "1e999999999", "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": "1.00", "quantity": 10**27}]}),
    ])
    def test_invalid_records(self, raw):
        """Malformed records decode to a failure, never an exception."""
        result = decode(raw)

        assert not result.ok
        assert result.state is None
        assert result.error

    def test_stored_totals_are_ignored(self):
        """Aggregates are recomputed from items."""
        raw = json.dumps({
            "items": [{"id": "A", "name": "Mug", "price": "10.00", "quantity": 2}],
            "totalItems": 999,
            "totalPrice": "0.01",
        })

        state = decode(raw).state

        assert state.total_items == 2
        assert state.total_price == Decimal("20.00")

    def test_bytes_accepted(self):
        """Backends may return bytes."""
        raw = json.dumps({"items": []}).encode()
        assert decode(raw).state == CartState.empty()

    @pytest.mark.parametrize("depth", [1000, 200000])
    def test_deeply_nested_record(self, depth):
        """Pathologically nested JSON is a decode failure, not a crash."""
        for raw in ("[" * depth, '{"items": ' + "[" * depth + "]" * depth + "}"):
            result = decode(raw)

            assert not result.ok
            assert result.error

    def test_out_of_range_amounts(self):
        """Records whose amounts exceed the item bounds are rejected."""
        raw = json.dumps({"items": [{"id": "A", "name": "Mug", "price": 1e30, "quantity": 1}]})

        result = decode(raw)

        assert not result.ok
        assert "item 0" in result.error


class TestCartPersistence:
    """Tests for CartPersistence."""

    def test_load_absent_returns_empty(self, persistence):
        """No record yields the empty cart."""
        assert persistence.load() == CartState.empty()

    def test_round_trip(self, persistence, mug, poster, sticker):
        """load(save(state)) reproduces items and totals."""
        state = CartState.from_items([mug.with_quantity(2), poster, sticker.with_quantity(3)])

        assert persistence.save(state) is True
        loaded = persistence.load()

        assert loaded == state
        assert loaded.items[2].extra == {"variant": "glossy"}
        assert loaded.total_price == Decimal("40.05")

    def test_round_trip_integer_ids(self, persistence):
        """Integer ids survive JSON."""
        state = CartState.from_items([CartItem(id=7, name="x", price="1.50", quantity=2)])
        persistence.save(state)

        assert persistence.load().items[0].id == 7

    def test_uses_fixed_key(self, memory_store, mug):
        """The record lives under the default key."""
        CartPersistence(memory_store).save(CartState.from_items([mug]))

        assert list(memory_store.data) == [StorageKeys.CART]
        assert json.loads(memory_store.data["shoppingCart"])["totalPrice"] == "10.00"

    def test_custom_key(self, memory_store, mug):
        """Keys can be namespaced."""
        key = StorageKeys.cart_key("guest")
        CartPersistence(memory_store, key=key).save(CartState.from_items([mug]))

        assert key == "shoppingCart:guest"
        assert key in memory_store.data

    @pytest.mark.parametrize("raw", ["%%%garbage", json.dumps({"cart": []})])
    def test_corrupted_record_is_discarded(self, raw):
        """Corruption degrades to the empty cart and removes the record."""
        store = MemoryStore({"shoppingCart": raw})

        state = CartPersistence(store).load()

        assert state == CartState.empty()
        assert "shoppingCart" not in store.data

    @pytest.mark.parametrize("raw", [
        "[" * 200000,
        json.dumps({"items": [{"id": "A", "price": 1e30, "quantity": 1}]}),
        json.dumps({"items": [{"id": "A", "price": "1.00", "quantity": 10**27}]}),
    ], ids=["deep-nesting", "huge-price", "huge-quantity"])
    def test_hostile_record_is_discarded(self, raw):
        """Records that would overflow the decoder or the totals are discarded."""
        store = MemoryStore({"shoppingCart": raw})

        state = CartPersistence(store).load()

        assert state == CartState.empty()
        assert "shoppingCart" not in store.data

    def test_save_failure_is_swallowed(self, failing_store, mug):
        """Write failures are logged and reported, never raised."""
        persistence = CartPersistence(failing_store)

        assert persistence.save(CartState.from_items([mug])) is False
        failing_store.set.assert_called_once()

    def test_load_failure_returns_empty(self, failing_store):
        """Read failures degrade to the empty cart."""
        assert CartPersistence(failing_store).load() == CartState.empty()

    def test_discard_failure_is_swallowed(self, failing_store):
        """A failing delete during discard does not raise."""
        failing_store.get.side_effect = None
        failing_store.get.return_value = "garbage"

        assert CartPersistence(failing_store).load() == CartState.empty()
        failing_store.delete.assert_called_once_with("shoppingCart")

    def test_encode_is_json(self, mug):
        """The stored record is JSON text."""
        data = json.loads(encode(CartState.from_items([mug])))

        assert data["items"][0]["price"] == "10.00"
        assert data["totalItems"] == 1
