"""Checkout and customer order routes."""

import logging
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from tastydash.models.cart import get_cart
from tastydash.services.orders import OrderManager

logger = logging.getLogger(__name__)

orders_bp = Blueprint('orders', __name__)

CARD_FIELDS = ('card_number', 'cardholder_name', 'expiry_date', 'cvv')


@orders_bp.route('/checkout', methods=['POST'])
@login_required
def checkout():
    """Place an order for everything in the cart."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        payment_details = data.get('payment_details')
        if not isinstance(payment_details, dict):
            payment_details = {}
    else:
        data = request.form
        payment_details = {field: data.get(field) for field in CARD_FIELDS}

    cart = get_cart()
    order = OrderManager().place_order(
        cart,
        customer_id=current_user.id,
        customer_name=current_user.display_name,
        delivery_address=data.get('address'),
        payment_method=data.get('payment_method'),
        payment_details=payment_details,
    )

    # Not atomic with the order write.
    cart.clear()
    logger.debug('Cart cleared after order %s', order.order_number)

    return jsonify({
        'success': True,
        'message': 'Order placed successfully!',
        'order': order.to_dict()
    }), 201


@orders_bp.route('/')
@login_required
def order_history():
    """The current customer's orders, newest first."""
    orders = OrderManager().list_orders(
        customer_id=current_user.id,
        status=request.args.get('status'),
        search=request.args.get('q'),
    )
    return jsonify({
        'orders': [order.to_dict(include_lines=False) for order in orders],
        'count': len(orders)
    })


@orders_bp.route('/<order_number>')
@login_required
def order_detail(order_number):
    """One of the current customer's orders."""
    order = OrderManager().get_order(order_number, customer_id=current_user.id)
    return jsonify(order.to_dict())
