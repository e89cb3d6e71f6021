"""Shopping cart held in the shopper's session.

The cart isn't a database table: it lives in the browser session under a
fixed key and is rewritten after every change. ``Cart`` does the arithmetic;
a ``CartStore`` decides where the serialized lines go.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from flask import current_app, session
from tastydash.errors import CartFull, RecordDecodeError
from tastydash.utils.pricing import compute_totals, to_decimal

logger = logging.getLogger(__name__)

RECORD_KEYS = ('item_id', 'name', 'unit_price', 'image_ref', 'quantity')


@dataclass
class CartLine:
    """One distinct item in the cart."""
    item_id: str
    name: str
    unit_price: Decimal
    image_ref: str = ''
    quantity: int = 1

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)
        if self.unit_price < 0:
            raise ValueError(f'Negative price for {self.item_id}: {self.unit_price}')

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def to_record(self):
        return {
            'item_id': self.item_id,
            'name': self.name,
            'unit_price': str(self.unit_price),
            'image_ref': self.image_ref,
            'quantity': self.quantity,
        }

    @classmethod
    def from_record(cls, record):
        """Decode a persisted line; raises RecordDecodeError if it's malformed."""
        if not isinstance(record, dict):
            raise RecordDecodeError(f'Cart line is not a mapping: {record!r}')
        missing = [key for key in RECORD_KEYS if key not in record]
        if missing:
            raise RecordDecodeError(f'Cart line missing {", ".join(missing)}')

        item_id = record['item_id']
        quantity = record['quantity']
        if not isinstance(item_id, str) or not item_id:
            raise RecordDecodeError(f'Bad cart item id: {item_id!r}')
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise RecordDecodeError(f'Bad quantity for {item_id}: {quantity!r}')
        try:
            return cls(
                item_id=item_id,
                name=str(record['name']),
                unit_price=record['unit_price'],
                image_ref=str(record['image_ref'] or ''),
                quantity=quantity,
            )
        except ValueError as e:
            raise RecordDecodeError(str(e))


class CartStore:
    """Where a cart's serialized lines are kept between requests."""

    def load(self):
        """Return the saved list of line records, or None if nothing is saved."""
        raise NotImplementedError

    def save(self, records):
        raise NotImplementedError


class MemoryCartStore(CartStore):
    """In-process store, for scripts and tests."""

    def __init__(self, records=None):
        self.records = records

    def load(self):
        return self.records

    def save(self, records):
        self.records = [dict(r) for r in records]


class SessionCartStore(CartStore):
    """Keeps the cart in the Flask session under a fixed key."""

    def __init__(self, key=None):
        self.key = key or current_app.config.get('CART_SESSION_KEY', 'cart')

    def load(self):
        return session.get(self.key)

    def save(self, records):
        session[self.key] = records
        session.modified = True


class Cart:
    """Ordered collection of cart lines, in order of first addition."""

    def __init__(self, store=None, lines=None, max_lines=None):
        self._store = store if store is not None else MemoryCartStore()
        self._lines = list(lines or [])
        self.max_lines = max_lines

    @classmethod
    def load(cls, store, max_lines=None):
        """Restore a cart from ``store``, falling back to an empty cart."""
        records = store.load()
        if records is None:
            return cls(store, max_lines=max_lines)

        try:
            if not isinstance(records, list):
                raise RecordDecodeError(f'Saved cart is not a list: {type(records).__name__}')
            lines = [CartLine.from_record(record) for record in records]
            ids = [line.item_id for line in lines]
            if len(ids) != len(set(ids)):
                raise RecordDecodeError('Saved cart has duplicate item ids')
        except RecordDecodeError as e:
            logger.warning('Discarding unreadable saved cart: %s', e)
            cart = cls(store, max_lines=max_lines)
            cart._save()
            return cart

        return cls(store, lines, max_lines=max_lines)

    @property
    def lines(self):
        return tuple(self._lines)

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)

    @property
    def is_empty(self):
        return not self._lines

    def get(self, item_id):
        item_id = str(item_id)
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None

    def add_item(self, item_id, name, unit_price, image_ref=''):
        """Add one unit of an item.

        An item already in the cart only has its quantity bumped; the name,
        price and image recorded when it was first added are kept. Raises
        CartFull when a new item would go past ``max_lines``.
        """
        line = self.get(item_id)
        if line is not None:
            line.quantity += 1
        elif self.max_lines is not None and len(self._lines) >= self.max_lines:
            raise CartFull(self.max_lines)
        else:
            line = CartLine(
                item_id=str(item_id),
                name=name,
                unit_price=unit_price,
                image_ref=image_ref or '',
            )
            self._lines.append(line)
        self._save()
        return line

    def remove_item(self, item_id):
        """Remove an item; removing an absent item is a no-op."""
        item_id = str(item_id)
        self._lines = [line for line in self._lines if line.item_id != item_id]
        self._save()

    def set_quantity(self, item_id, quantity):
        """Set an item's quantity; anything below 1 removes the line."""
        quantity = int(quantity)
        if quantity < 1:
            self.remove_item(item_id)
            return
        line = self.get(item_id)
        if line is not None:
            line.quantity = quantity
        self._save()

    def clear(self):
        self._lines = []
        self._save()

    def total_item_count(self):
        return sum(line.quantity for line in self._lines)

    def subtotal(self):
        return sum((line.line_total for line in self._lines), Decimal('0'))

    def totals(self):
        """Subtotal, delivery fee, tax and total for the current lines."""
        return compute_totals(self.subtotal())

    def to_records(self):
        return [line.to_record() for line in self._lines]

    def to_dict(self):
        return {
            'lines': [
                dict(line.to_record(), line_total=str(line.line_total))
                for line in self._lines
            ],
            'total_item_count': self.total_item_count(),
            'totals': None if self.is_empty else self.totals().to_dict(),
        }

    def _save(self):
        self._store.save(self.to_records())


def get_cart():
    """The current session's cart, restored from the session cookie."""
    return Cart.load(SessionCartStore(), max_lines=current_app.config.get('CART_MAX_LINES'))
