"""Tests for the session cart engine."""

from decimal import Decimal

import pytest

from tastydash.errors import CartFull
from tastydash.models.cart import Cart, CartLine, MemoryCartStore


@pytest.fixture
def store():
    return MemoryCartStore()


@pytest.fixture
def cart(store):
    return Cart(store)


class TestAddItem:

    def test_distinct_items_each_add_one_line(self, cart):
        for i in range(5):
            cart.add_item(f'item-{i}', f'Dish {i}', '10')

        assert len(cart) == 5
        assert cart.total_item_count() == 5
        assert [line.item_id for line in cart] == [f'item-{i}' for i in range(5)]

    def test_repeated_item_bumps_quantity(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.add_item('b', 'Naan', '45')
        cart.add_item('a', 'Paneer Tikka', '100')

        assert len(cart) == 2
        assert cart.get('a').quantity == 2
        assert cart.get('b').quantity == 1
        assert cart.total_item_count() == 3

    def test_repeat_keeps_first_seen_name_and_price(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100', 'old.jpg')
        cart.add_item('a', 'Paneer Tikka Special', '150', 'new.jpg')

        line = cart.get('a')
        assert line.name == 'Paneer Tikka'
        assert line.unit_price == Decimal('100')
        assert line.image_ref == 'old.jpg'
        assert line.quantity == 2

    def test_numeric_item_ids_are_normalised_to_strings(self, cart):
        cart.add_item(7, 'Kulfi', 80)
        cart.add_item('7', 'Kulfi', 80)

        assert len(cart) == 1
        assert cart.get(7).quantity == 2

    def test_negative_price_rejected(self, cart):
        with pytest.raises(ValueError):
            cart.add_item('a', 'Broken', '-1')

    def test_line_cap(self, store):
        cart = Cart(store, max_lines=2)
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.add_item('b', 'Naan', '45')

        with pytest.raises(CartFull):
            cart.add_item('c', 'Kulfi', '80')

        cart.add_item('a', 'Paneer Tikka', '100')
        assert [line.item_id for line in cart] == ['a', 'b']
        assert cart.get('a').quantity == 2
        assert len(store.records) == 2


class TestQuantityAndRemoval:

    def test_set_quantity(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        for q in (1, 3, 12):
            cart.set_quantity('a', q)
            assert cart.get('a').quantity == q

    @pytest.mark.parametrize('quantity', [0, -1, -20])
    def test_non_positive_quantity_removes_line(self, cart, quantity):
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.add_item('b', 'Naan', '45')

        cart.set_quantity('a', quantity)

        assert cart.get('a') is None
        assert [line.item_id for line in cart] == ['b']

    def test_set_quantity_for_absent_item_is_noop(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.set_quantity('zzz', 4)

        assert cart.to_records() == [CartLine('a', 'Paneer Tikka', Decimal('100')).to_record()]

    def test_remove_absent_item_twice_is_noop(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        before = cart.to_records()

        cart.remove_item('missing')
        cart.remove_item('missing')

        assert cart.to_records() == before

    def test_remove_item(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.add_item('b', 'Naan', '45')
        cart.remove_item('a')

        assert [line.item_id for line in cart] == ['b']

    def test_clear(self, cart, store):
        cart.add_item('a', 'Paneer Tikka', '100')
        cart.clear()

        assert cart.is_empty
        assert cart.total_item_count() == 0
        assert store.records == []


class TestTotals:

    def test_empty_cart(self, cart):
        assert cart.subtotal() == 0
        assert cart.total_item_count() == 0
        assert cart.to_dict()['totals'] is None

    def test_subtotal_tracks_every_mutation(self, cart):
        cart.add_item('a', 'Paneer Tikka', '100')
        assert cart.subtotal() == Decimal('100')

        cart.add_item('b', 'Naan', '45.50')
        assert cart.subtotal() == Decimal('145.50')

        cart.set_quantity('b', 3)
        assert cart.subtotal() == Decimal('236.50')

        cart.remove_item('a')
        assert cart.subtotal() == Decimal('136.50')

    def test_total_formula(self, cart):
        cart.add_item('a', 'Thali', '250')
        cart.set_quantity('a', 2)

        totals = cart.totals()
        assert totals.subtotal == Decimal('500')
        assert totals.delivery_fee == Decimal('40')
        assert totals.tax == Decimal('25')
        assert totals.total == Decimal('565')

    def test_fractional_tax_is_kept(self, cart):
        cart.add_item('a', 'Brownie', '119.50')

        totals = cart.totals()
        assert totals.tax == Decimal('5.975')
        assert totals.total == Decimal('165.475')


class TestPersistence:

    def test_every_mutation_is_saved(self, cart, store):
        cart.add_item('a', 'Paneer Tikka', '100', 'p.jpg')
        assert store.records == [{
            'item_id': 'a',
            'name': 'Paneer Tikka',
            'unit_price': '100',
            'image_ref': 'p.jpg',
            'quantity': 1,
        }]

        cart.set_quantity('a', 4)
        assert store.records[0]['quantity'] == 4

        cart.remove_item('a')
        assert store.records == []

    def test_restore_keeps_insertion_order(self, store):
        original = Cart(store)
        original.add_item('b', 'Naan', '45')
        original.add_item('a', 'Paneer Tikka', '100')
        original.set_quantity('b', 2)

        restored = Cart.load(store)

        assert [line.item_id for line in restored] == ['b', 'a']
        assert restored.get('b').quantity == 2
        assert restored.subtotal() == Decimal('190')

    def test_nothing_saved_gives_empty_cart(self):
        assert Cart.load(MemoryCartStore()).is_empty

    @pytest.mark.parametrize('records', [
        'not a list',
        {'item_id': 'a'},
        [{'item_id': 'a', 'name': 'x'}],
        [{'item_id': 'a', 'name': 'x', 'unit_price': 'abc', 'image_ref': '', 'quantity': 1}],
        [{'item_id': 'a', 'name': 'x', 'unit_price': '10', 'image_ref': '', 'quantity': 0}],
        [{'item_id': 'a', 'name': 'x', 'unit_price': '-5', 'image_ref': '', 'quantity': 1}],
        [{'item_id': '', 'name': 'x', 'unit_price': '10', 'image_ref': '', 'quantity': 1}],
        [
            {'item_id': 'a', 'name': 'x', 'unit_price': '10', 'image_ref': '', 'quantity': 1},
            {'item_id': 'a', 'name': 'x', 'unit_price': '10', 'image_ref': '', 'quantity': 2},
        ],
    ])
    def test_malformed_saved_cart_falls_back_to_empty(self, records, caplog):
        store = MemoryCartStore(records)

        cart = Cart.load(store)

        assert cart.is_empty
        assert store.records == []
        assert 'Discarding unreadable saved cart' in caplog.text
