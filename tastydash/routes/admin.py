"""Admin back-office routes."""

import logging
from flask import Blueprint, jsonify, request, abort, current_app
from flask_login import login_required, current_user
from sqlalchemy import or_
from tastydash.extensions import db
from tastydash.errors import ValidationError
from tastydash.forms import form_errors
from tastydash.forms.admin import FoodItemForm, CategoryForm
from tastydash.models import User, Category, FoodItem, Order
from tastydash.models.user import ROLE_ADMIN, ROLE_CUSTOMER
from tastydash.services.orders import OrderManager
from tastydash.utils.decorators import admin_required
from tastydash.utils.formatting import format_currency

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


def _get_or_404(model, object_id, description):
    obj = db.session.get(model, object_id)
    if obj is None:
        abort(404, description=description)
    return obj


@admin_bp.route('/dashboard')
@login_required
@admin_required
def dashboard():
    """Admin dashboard with store overview."""
    manager = OrderManager()

    total_orders = Order.query.count()
    total_customers = User.query.filter_by(role=ROLE_CUSTOMER).count()
    revenue = manager.revenue()

    recent_orders = Order.query.order_by(
        Order.created_at.desc(), Order.id.desc()
    ).limit(current_app.config.get('RECENT_ORDERS_LIMIT', 10)).all()

    return jsonify({
        'total_orders': total_orders,
        'total_customers': total_customers,
        'total_revenue': str(revenue),
        'total_revenue_display': format_currency(revenue),
        'status_counts': manager.order_counts_by_status(),
        'recent_orders': [o.to_dict(include_lines=False) for o in recent_orders]
    })


# --- Product Management ---
@admin_bp.route('/products')
@login_required
@admin_required
def products():
    """All food items, optionally searched."""
    search = request.args.get('q', '').strip()

    query = FoodItem.query.outerjoin(Category)
    if search:
        query = query.filter(
            or_(
                FoodItem.name.icontains(search, autoescape=True),
                FoodItem.description.icontains(search, autoescape=True),
                Category.name.icontains(search, autoescape=True)
            )
        )

    items = query.order_by(FoodItem.name).all()
    return jsonify({'items': [item.to_dict() for item in items], 'search': search})


@admin_bp.route('/products', methods=['POST'])
@login_required
@admin_required
def add_product():
    """Add a food item."""
    form = FoodItemForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    item = FoodItem(
        name=form.name.data.strip(),
        description=form.description.data or '',
        price=form.price.data,
        category_id=form.category_id.data,
        image=form.image.data or '',
        featured=form.featured.data
    )
    db.session.add(item)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'{item.name} has been added to the menu.',
        'item': item.to_dict()
    }), 201


@admin_bp.route('/products/<int:item_id>')
@login_required
@admin_required
def product_detail(item_id):
    item = _get_or_404(FoodItem, item_id, 'Food item not found')
    return jsonify(item.to_dict())


@admin_bp.route('/products/<int:item_id>', methods=['POST'])
@login_required
@admin_required
def edit_product(item_id):
    """Edit a food item. Carts and placed orders keep their old snapshot."""
    item = _get_or_404(FoodItem, item_id, 'Food item not found')

    form = FoodItemForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    item.name = form.name.data.strip()
    item.description = form.description.data or ''
    item.price = form.price.data
    item.category_id = form.category_id.data
    item.image = form.image.data or ''
    item.featured = form.featured.data
    db.session.commit()

    return jsonify({'success': True, 'message': 'Product updated!', 'item': item.to_dict()})


@admin_bp.route('/products/<int:item_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_product(item_id):
    item = _get_or_404(FoodItem, item_id, 'Food item not found')
    db.session.delete(item)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Product deleted successfully.'})


@admin_bp.route('/products/<int:item_id>/toggle-featured', methods=['POST'])
@login_required
@admin_required
def toggle_featured(item_id):
    """Toggle food item featured status."""
    item = _get_or_404(FoodItem, item_id, 'Food item not found')
    item.featured = not item.featured
    db.session.commit()

    status = 'featured' if item.featured else 'unfeatured'
    return jsonify({'success': True, 'message': f'{item.name} is now {status}.', 'item': item.to_dict()})


# --- Category Management ---
@admin_bp.route('/categories')
@login_required
@admin_required
def categories():
    categories = Category.query.order_by(Category.name).all()
    return jsonify({'categories': [c.to_dict() for c in categories]})


@admin_bp.route('/categories', methods=['POST'])
@login_required
@admin_required
def add_category():
    form = CategoryForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    category = Category(name=form.name.data.strip(), image=form.image.data or '')
    category.generate_slug()
    db.session.add(category)
    db.session.commit()

    return jsonify({'success': True, 'message': 'Category created!', 'category': category.to_dict()}), 201


@admin_bp.route('/categories/<int:category_id>', methods=['POST'])
@login_required
@admin_required
def edit_category(category_id):
    category = _get_or_404(Category, category_id, 'Category not found')

    form = CategoryForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    category.name = form.name.data.strip()
    category.image = form.image.data or ''
    category.generate_slug()
    db.session.commit()

    return jsonify({'success': True, 'message': 'Category updated!', 'category': category.to_dict()})


# --- User Management ---
@admin_bp.route('/users')
@login_required
@admin_required
def users():
    """User management."""
    role = request.args.get('role', '')
    search = request.args.get('q', '').strip()

    query = User.query

    if role:
        query = query.filter_by(role=role)

    if search:
        query = query.filter(
            (User.display_name.icontains(search, autoescape=True)) |
            (User.email.icontains(search, autoescape=True))
        )

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify({'users': [u.to_dict() for u in users], 'role': role, 'search': search})


@admin_bp.route('/users/<int:user_id>/toggle-role', methods=['POST'])
@login_required
@admin_required
def toggle_user_role(user_id):
    """Switch a user between admin and customer."""
    user = _get_or_404(User, user_id, 'User not found')

    if user.id == current_user.id:
        return jsonify({'success': False, 'message': 'You cannot change your own role.'}), 400

    user.role = ROLE_CUSTOMER if user.is_admin() else ROLE_ADMIN
    db.session.commit()
    logger.info('User %s role changed to %s by %s', user.id, user.role, current_user.id)

    return jsonify({
        'success': True,
        'message': f'{user.display_name} is now {"an admin" if user.is_admin() else "a customer"}.',
        'user': user.to_dict()
    })


# --- Order Management ---
@admin_bp.route('/orders')
@login_required
@admin_required
def orders():
    """All orders, filtered by status and searched by order number or customer."""
    status = request.args.get('status', '')
    search = request.args.get('q', '')

    orders = OrderManager().list_orders(status=status, search=search)

    return jsonify({
        'orders': [order.to_dict(include_lines=False) for order in orders],
        'count': len(orders),
        'current_status': status,
        'search': search
    })


@admin_bp.route('/orders/<order_number>')
@login_required
@admin_required
def order_detail(order_number):
    order = OrderManager().get_order(order_number)
    return jsonify(order.to_dict())


@admin_bp.route('/orders/<order_number>/status', methods=['POST'])
@login_required
@admin_required
def update_order_status(order_number):
    """Move an order to its next status."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    new_status = str(data.get('status') or '').strip()
    if not new_status:
        raise ValidationError({'status': 'Status is required'})

    status = OrderManager().transition_status(order_number, new_status)

    return jsonify({
        'success': True,
        'message': f'Order status changed to {status}',
        'order_number': order_number,
        'status': status
    })
