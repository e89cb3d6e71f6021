"""Tests for checkout input validation."""

from datetime import date

import pytest

from tastydash.utils.validators import (validate_card_number, validate_checkout,
                                        validate_cvv, validate_expiry_date)

TODAY = date(2026, 10, 18)

CARD = {
    'cardholder_name': 'Asha Rao',
    'card_number': '4111 1111 1111 1234',
    'expiry_date': '12/30',
    'cvv': '987',
}


class TestCardFields:

    @pytest.mark.parametrize('number, valid', [
        ('4111111111111234', True),
        ('4111 1111 1111 1234', True),
        ('4111-1111-1111-1234', False),
        ('411111111111123', False),
        ('41111111111112345', False),
        ('٤١١١١١١١١١١١١٢٣٤', False),
        ('４１１１１１１１１１１１１２３４', False),
        ('', False),
        (None, False),
    ])
    def test_card_number(self, number, valid):
        assert validate_card_number(number) is valid

    @pytest.mark.parametrize('expiry, valid', [
        ('12/99', True),
        ('10/26', True),
        ('09/26', False),
        ('01/20', False),
        ('13/25', False),
        ('00/30', False),
        ('1/30', False),
        ('12-30', False),
        ('١٢/٣٠', False),
        ('１２/３０', False),
        ('', False),
    ])
    def test_expiry_date(self, expiry, valid):
        assert validate_expiry_date(expiry, today=TODAY) is valid

    @pytest.mark.parametrize('cvv, valid', [
        ('123', True),
        ('12', False),
        ('1234', False),
        ('abc', False),
        ('٩٨٧', False),
        (None, False),
    ])
    def test_cvv(self, cvv, valid):
        assert validate_cvv(cvv) is valid


class TestValidateCheckout:

    def test_cash_on_delivery_needs_only_address(self):
        assert validate_checkout('12 MG Road, Pune', 'cod') == {}

    def test_valid_card(self):
        assert validate_checkout('12 MG Road', 'card', CARD, today=TODAY) == {}

    def test_blank_address(self):
        errors = validate_checkout('   ', 'cod')
        assert list(errors) == ['address']

    def test_unknown_payment_method(self):
        errors = validate_checkout('12 MG Road', 'upi')
        assert list(errors) == ['payment_method']

    def test_every_bad_card_field_is_reported(self):
        details = {
            'cardholder_name': ' ',
            'card_number': '1234',
            'expiry_date': '01/20',
            'cvv': '1',
        }
        errors = validate_checkout('12 MG Road', 'card', details, today=TODAY)

        assert set(errors) == {'cardholder_name', 'card_number', 'expiry_date', 'cvv'}

    def test_card_without_details(self):
        errors = validate_checkout('12 MG Road', 'card', None, today=TODAY)
        assert set(errors) == {'cardholder_name', 'card_number', 'expiry_date', 'cvv'}

    def test_numeric_json_values_are_accepted(self):
        details = dict(CARD, card_number=4111111111111234, cvv=987)
        assert validate_checkout('12 MG Road', 'card', details, today=TODAY) == {}
