"""Seed script to populate database with sample data."""

from decimal import Decimal

from tastydash import create_app
from tastydash.extensions import db
from tastydash.models import User, Category, FoodItem
from tastydash.models.user import ROLE_ADMIN, ROLE_CUSTOMER

MENU = {
    'Pizza': {
        'image': 'https://images.unsplash.com/photo-1513104890138-7c749659a591',
        'items': [
            {'name': 'Margherita Pizza', 'description': 'Tomato, mozzarella and fresh basil on a thin crust.',
             'price': '249', 'featured': True},
            {'name': 'Farmhouse Pizza', 'description': 'Capsicum, onion, mushroom and sweet corn.',
             'price': '329'},
        ],
    },
    'Burgers': {
        'image': 'https://images.unsplash.com/photo-1568901346375-23c9450c58cd',
        'items': [
            {'name': 'Classic Veg Burger', 'description': 'Crispy veg patty, lettuce and house sauce.',
             'price': '129', 'featured': True},
            {'name': 'Chicken Zinger', 'description': 'Spicy fried chicken fillet with mayo.',
             'price': '179'},
        ],
    },
    'Biryani': {
        'image': 'https://images.unsplash.com/photo-1563379091339-03b21ab4a4f8',
        'items': [
            {'name': 'Hyderabadi Chicken Biryani', 'description': 'Dum-cooked basmati rice with marinated chicken.',
             'price': '299', 'featured': True},
            {'name': 'Veg Dum Biryani', 'description': 'Seasonal vegetables layered with saffron rice.',
             'price': '229'},
        ],
    },
    'Desserts': {
        'image': 'https://images.unsplash.com/photo-1551024601-bec78aea704b',
        'items': [
            {'name': 'Gulab Jamun (2 pcs)', 'description': 'Warm milk dumplings in cardamom syrup.',
             'price': '79'},
            {'name': 'Chocolate Brownie', 'description': 'Fudgy brownie with walnuts.',
             'price': '119.50'},
        ],
    },
}


def seed_database():
    """Seed the database with sample data."""
    app = create_app()

    with app.app_context():
        # Create tables
        db.create_all()

        # Check if already seeded
        if User.query.filter_by(email='admin@tastydash.com').first():
            print('Database already seeded!')
            return

        print('Seeding database...')

        # Create Admin
        admin = User(
            email='admin@tastydash.com',
            display_name='Admin User',
            role=ROLE_ADMIN
        )
        admin.set_password('admin123')
        db.session.add(admin)

        # Create categories and menu items
        for category_name, data in MENU.items():
            category = Category(name=category_name, image=data['image'])
            category.generate_slug()
            db.session.add(category)
            db.session.flush()

            for item in data['items']:
                db.session.add(FoodItem(
                    category_id=category.id,
                    name=item['name'],
                    description=item['description'],
                    price=Decimal(item['price']),
                    featured=item.get('featured', False),
                    image=data['image']
                ))

        # Create sample customers
        customers = [
            {'email': 'john@example.com', 'display_name': 'John Doe', 'password': 'user123'},
            {'email': 'jane@example.com', 'display_name': 'Jane Smith', 'password': 'user123'},
        ]

        for cust in customers:
            customer = User(
                email=cust['email'],
                display_name=cust['display_name'],
                role=ROLE_CUSTOMER
            )
            customer.set_password(cust['password'])
            db.session.add(customer)

        db.session.commit()
        print('Database seeded successfully!')
        print('\nTest Accounts:')
        print('  Admin: admin@tastydash.com / admin123')
        print('  Customer: john@example.com / user123')


if __name__ == '__main__':
    seed_database()
