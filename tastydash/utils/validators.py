"""Checkout input validation."""

import re
from datetime import date

from tastydash.models.order import PAYMENT_CARD, PAYMENT_METHODS

CARD_NUMBER_RE = re.compile(r'\d{16}', re.ASCII)
EXPIRY_RE = re.compile(r'(\d{2})/(\d{2})', re.ASCII)
CVV_RE = re.compile(r'\d{3}', re.ASCII)


def clean_card_number(card_number):
    """Strip the spaces the checkout form inserts every 4 digits."""
    return re.sub(r'\s+', '', card_number or '')


def validate_card_number(card_number):
    return CARD_NUMBER_RE.fullmatch(clean_card_number(card_number)) is not None


def validate_expiry_date(expiry_date, today=None):
    """Check an ``MM/YY`` expiry date.

    A card expiring in the current month is still valid.
    """
    match = EXPIRY_RE.fullmatch(expiry_date or '')
    if not match:
        return False

    month = int(match.group(1))
    year = 2000 + int(match.group(2))
    if month < 1 or month > 12:
        return False

    today = today or date.today()
    return (year, month) >= (today.year, today.month)


def validate_cvv(cvv):
    return CVV_RE.fullmatch(cvv or '') is not None


def validate_checkout(address, payment_method, payment_details=None, today=None):
    """Validate checkout input.

    Returns a dict of field name -> message; empty when everything is valid.
    """
    errors = {}
    payment_details = {
        key: '' if value is None else str(value)
        for key, value in (payment_details or {}).items()
    }

    if not str(address or '').strip():
        errors['address'] = 'Delivery address is required'

    if payment_method not in PAYMENT_METHODS:
        errors['payment_method'] = 'Please choose card or cash on delivery'
        return errors

    if payment_method == PAYMENT_CARD:
        if not (payment_details.get('cardholder_name') or '').strip():
            errors['cardholder_name'] = 'Cardholder name is required'
        if not validate_card_number(payment_details.get('card_number')):
            errors['card_number'] = 'Please enter a valid 16-digit card number'
        if not validate_expiry_date(payment_details.get('expiry_date'), today=today):
            errors['expiry_date'] = 'Please enter a valid expiry date (MM/YY)'
        if not validate_cvv(payment_details.get('cvv')):
            errors['cvv'] = 'Please enter a valid 3-digit CVV'

    return errors
