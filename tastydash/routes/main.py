"""Main public routes: home page and menu."""

from flask import Blueprint, jsonify, request, abort, current_app
from sqlalchemy import or_
from tastydash.extensions import db
from tastydash.models import Category, FoodItem

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Homepage with featured dishes and categories."""
    featured = FoodItem.query.filter_by(featured=True).order_by(
        FoodItem.created_at.desc()
    ).limit(8).all()

    categories = Category.query.order_by(Category.name).all()

    return jsonify({
        'featured': [f.to_dict() for f in featured],
        'categories': [c.to_dict() for c in categories]
    })


@main_bp.route('/categories')
def categories():
    """All categories."""
    categories = Category.query.order_by(Category.name).all()
    return jsonify({'categories': [c.to_dict() for c in categories]})


@main_bp.route('/menu')
def menu():
    """Menu with category filter and search."""
    category = request.args.get('category', '').strip()
    search = request.args.get('q', '').strip()
    page = request.args.get('page', 1, type=int)

    query = FoodItem.query

    # Filter by category id or slug
    if category:
        if category.isdigit():
            query = query.filter(FoodItem.category_id == int(category))
        else:
            query = query.join(Category).filter(Category.slug == category)

    # Search
    if search:
        query = query.filter(
            or_(
                FoodItem.name.icontains(search, autoescape=True),
                FoodItem.description.icontains(search, autoescape=True)
            )
        )

    # Pagination
    pagination = query.order_by(FoodItem.name).paginate(
        page=page,
        per_page=current_app.config.get('ITEMS_PER_PAGE', 12),
        error_out=False
    )

    return jsonify({
        'items': [item.to_dict() for item in pagination.items],
        'count': pagination.total,
        'page': pagination.page,
        'pages': pagination.pages,
        'category': category,
        'search': search
    })


@main_bp.route('/menu/<int:item_id>')
def food_detail(item_id):
    """Single menu item."""
    item = db.session.get(FoodItem, item_id)
    if item is None:
        abort(404, description='Food item not found')
    return jsonify(item.to_dict())
