"""Tests for order arithmetic and display helpers."""

import re
from datetime import datetime
from decimal import Decimal

import pytest

from tastydash.utils.formatting import format_currency, format_date, generate_order_id
from tastydash.utils.pricing import compute_totals, to_decimal


class TestComputeTotals:

    def test_known_subtotal(self):
        totals = compute_totals(500)

        assert totals.subtotal == Decimal('500')
        assert totals.delivery_fee == Decimal('40')
        assert totals.tax == Decimal('25')
        assert totals.total == Decimal('565')

    def test_tax_is_not_charged_on_delivery(self):
        totals = compute_totals('0')
        assert totals.total == Decimal('40')
        assert totals.tax == 0

    def test_fee_and_rate_come_from_config(self, ctx):
        ctx.config['DELIVERY_FEE'] = 60
        ctx.config['TAX_RATE'] = '0.10'

        totals = compute_totals(200)

        assert totals.delivery_fee == Decimal('60')
        assert totals.total == Decimal('280')

    def test_to_dict_uses_strings(self):
        assert compute_totals('119.50').to_dict() == {
            'subtotal': '119.50',
            'delivery_fee': '40',
            'tax': '5.9750',
            'total': '165.4750',
        }


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(99.9) == Decimal('99.9')

    @pytest.mark.parametrize('value', ['abc', None, True, 'NaN', float('inf')])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)


class TestFormatCurrency:

    @pytest.mark.parametrize('amount, expected', [
        (0, '₹0'),
        (565, '₹565'),
        (1000, '₹1,000'),
        (123456, '₹1,23,456'),
        (12345678, '₹1,23,45,678'),
        (Decimal('165.475'), '₹165'),
        (Decimal('99.5'), '₹100'),
        (None, '₹0'),
    ])
    def test_amounts(self, amount, expected):
        assert format_currency(amount) == expected


class TestFormatDate:

    def test_datetime(self):
        assert format_date(datetime(2024, 3, 5, 14, 30)) == '05 Mar 2024, 02:30 PM'

    def test_iso_string(self):
        assert format_date('2024-03-05T09:00:00', '%Y/%m/%d') == '2024/03/05'

    def test_missing(self):
        assert format_date(None) == 'N/A'


class TestGenerateOrderId:

    def test_shape(self):
        assert re.fullmatch(r'OD\d{10}', generate_order_id())

    def test_uses_last_six_clock_digits(self):
        order_id = generate_order_id(now_ms=1712345678901)
        assert order_id.startswith('OD678901')
        assert len(order_id) == 12

    def test_prefix_from_config(self, ctx):
        ctx.config['ORDER_ID_PREFIX'] = 'TD'
        assert generate_order_id().startswith('TD')
