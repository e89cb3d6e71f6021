"""Cart routes."""

from flask import Blueprint, jsonify, request, abort
from tastydash.extensions import db
from tastydash.errors import ValidationError
from tastydash.models import FoodItem
from tastydash.models.cart import get_cart

cart_bp = Blueprint('cart', __name__)


def _payload():
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def _item_id(data):
    item_id = str(data.get('item_id') or '').strip()
    if not item_id:
        raise ValidationError({'item_id': 'Item is required'})
    return item_id


def _cart_response(message=None):
    data = get_cart().to_dict()
    data['success'] = True
    if message:
        data['message'] = message
    return jsonify(data)


@cart_bp.route('/')
def view_cart():
    """View shopping cart."""
    return _cart_response()


@cart_bp.route('/add', methods=['POST'])
def add_to_cart():
    """Add one unit of a menu item to the cart."""
    item_id = _item_id(_payload())
    if not item_id.isdigit():
        abort(404, description='Food item not found')

    food = db.session.get(FoodItem, int(item_id))
    if food is None:
        abort(404, description='Food item not found')

    cart = get_cart()
    already_in_cart = cart.get(food.id) is not None
    cart.add_item(food.id, food.name, food.price, food.image)

    if already_in_cart:
        return _cart_response(f'{food.name} quantity increased.')
    return _cart_response(f'{food.name} has been added to your cart.')


@cart_bp.route('/update', methods=['POST'])
def update_cart():
    """Update cart item quantity."""
    data = _payload()
    item_id = _item_id(data)
    try:
        quantity = int(data.get('quantity'))
    except (TypeError, ValueError):
        raise ValidationError({'quantity': 'Quantity must be a whole number'})

    get_cart().set_quantity(item_id, quantity)

    message = 'Item removed from cart.' if quantity < 1 else 'Cart updated.'
    return _cart_response(message)


@cart_bp.route('/remove', methods=['POST'])
def remove_from_cart():
    """Remove item from cart."""
    item_id = _item_id(_payload())
    cart = get_cart()
    line = cart.get(item_id)
    cart.remove_item(item_id)

    if line is None:
        return _cart_response()
    return _cart_response(f'{line.name} has been removed from your cart.')


@cart_bp.route('/clear', methods=['POST'])
def clear_cart():
    """Clear all items from cart."""
    get_cart().clear()
    return _cart_response('All items have been removed from your cart.')
