"""Display helpers: currency, dates, order identifiers."""

import random
import time
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from flask import current_app, has_app_context

CURRENCY_SYMBOL = '₹'


def _group_indian(digits):
    """Group digits the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


def format_currency(amount):
    """Format an amount as whole rupees, e.g. ``₹1,23,456``."""
    if amount is None:
        amount = 0
    value = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f'{sign}{CURRENCY_SYMBOL}{_group_indian(str(abs(value)))}'


def format_date(value, format='%d %b %Y, %I:%M %p'):
    """Format date string or datetime object."""
    if not value:
        return 'N/A'
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime(format)


def generate_order_id(prefix=None, now_ms=None):
    """Generate an order id: prefix + last 6 digits of the ms clock + 4 random digits.

    Uniqueness is advisory only; two orders in the same millisecond can collide.
    """
    if prefix is None:
        prefix = current_app.config.get('ORDER_ID_PREFIX', 'OD') if has_app_context() else 'OD'
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    timestamp = str(now_ms)[-6:]
    suffix = f'{random.randrange(10000):04d}'
    return f'{prefix}{timestamp}{suffix}'
