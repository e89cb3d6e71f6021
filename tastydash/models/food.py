"""Menu models: food items and categories."""

from datetime import datetime
from slugify import slugify
from tastydash.extensions import db


class Category(db.Model):
    """Menu category."""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, index=True)
    image = db.Column(db.String(500), default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    food_items = db.relationship('FoodItem', backref='category', lazy='dynamic')

    def generate_slug(self):
        """Generate a unique slug for the category."""
        base_slug = slugify(self.name) if self.name else 'category'
        slug = base_slug
        counter = 1
        while Category.query.filter(Category.slug == slug, Category.id != self.id).first() is not None:
            slug = f"{base_slug}-{counter}"
            counter += 1
        self.slug = slug

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'image': self.image or '',
        }

    def __repr__(self):
        return f'<Category {self.name}>'


class FoodItem(db.Model):
    """Catalog entry a customer can add to the cart."""
    __tablename__ = 'food_items'

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'))
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, default='')
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image = db.Column(db.String(500), default='')
    featured = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'price': str(self.price),
            'image': self.image or '',
            'category_id': self.category_id,
            'category': self.category.name if self.category else None,
            'featured': bool(self.featured),
        }

    def __repr__(self):
        return f'<FoodItem {self.name}>'
