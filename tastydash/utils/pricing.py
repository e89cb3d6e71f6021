"""Order total arithmetic shared by the cart preview and checkout."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from flask import current_app, has_app_context

DEFAULT_DELIVERY_FEE = Decimal('40')
DEFAULT_TAX_RATE = Decimal('0.05')


def to_decimal(value):
    """Convert a price-like value to Decimal.

    Floats go through ``str`` so 99.9 stays 99.9 and not its binary expansion.
    Raises ValueError for anything that isn't a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f'Not a price: {value!r}')
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError):
            raise ValueError(f'Not a price: {value!r}')
    if not result.is_finite():
        raise ValueError(f'Not a price: {value!r}')
    return result


def _setting(key, default):
    if has_app_context():
        return to_decimal(current_app.config.get(key, default))
    return default


def delivery_fee():
    """Flat delivery fee in whole rupees."""
    return _setting('DELIVERY_FEE', DEFAULT_DELIVERY_FEE)


def tax_rate():
    """Tax rate applied to the subtotal."""
    return _setting('TAX_RATE', DEFAULT_TAX_RATE)


@dataclass(frozen=True)
class OrderTotals:
    """Money figures for a cart or an order."""
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self):
        return {
            'subtotal': str(self.subtotal),
            'delivery_fee': str(self.delivery_fee),
            'tax': str(self.tax),
            'total': str(self.total),
        }


def compute_totals(subtotal, fee=None, rate=None):
    """Compute ``subtotal + delivery fee + tax``.

    Tax is charged on the subtotal only, never on the delivery fee. No
    rounding happens here; display code rounds.
    """
    subtotal = to_decimal(subtotal)
    fee = delivery_fee() if fee is None else to_decimal(fee)
    rate = tax_rate() if rate is None else to_decimal(rate)
    tax = subtotal * rate
    return OrderTotals(
        subtotal=subtotal,
        delivery_fee=fee,
        tax=tax,
        total=subtotal + fee + tax,
    )
