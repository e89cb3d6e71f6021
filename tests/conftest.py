"""Shared fixtures for TastyDash tests.

The app fixture does not keep an application context pushed: Flask reuses an
active context for test requests, which would leak ``g`` (and the logged-in
user) from one request to the next. Tests that talk to the models directly
ask for ``ctx`` instead.
"""

from decimal import Decimal

import pytest

from tastydash import create_app
from tastydash.extensions import db as _db
from tastydash.models import User, Category, FoodItem
from tastydash.models.user import ROLE_ADMIN, ROLE_CUSTOMER

PASSWORD = 'secret123'
CUSTOMER_EMAIL = 'asha@example.com'
ADMIN_EMAIL = 'admin@example.com'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def ctx(app):
    """An application context for tests that use the models directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def create_user(app, email, display_name, role=ROLE_CUSTOMER, password=PASSWORD):
    with app.app_context():
        user = User(email=email, display_name=display_name, role=role)
        user.set_password(password)
        _db.session.add(user)
        _db.session.commit()
        return user.id


def login(client, email, password=PASSWORD):
    return client.post('/auth/login', json={'email': email, 'password': password})


@pytest.fixture
def customer_id(app):
    return create_user(app, CUSTOMER_EMAIL, 'Asha Rao')


@pytest.fixture
def admin_id(app):
    return create_user(app, ADMIN_EMAIL, 'Store Admin', role=ROLE_ADMIN)


@pytest.fixture
def customer_client(app, customer_id):
    client = app.test_client()
    login(client, CUSTOMER_EMAIL)
    return client


@pytest.fixture
def admin_client(app, admin_id):
    client = app.test_client()
    login(client, ADMIN_EMAIL)
    return client


@pytest.fixture
def menu(app):
    """Two categories and three dishes; returns their ids by short name."""
    with app.app_context():
        mains = Category(name='Main Course')
        mains.generate_slug()
        desserts = Category(name='Desserts')
        desserts.generate_slug()
        _db.session.add_all([mains, desserts])
        _db.session.flush()

        paneer = FoodItem(name='Paneer Tikka', description='Smoky grilled cottage cheese',
                          price=Decimal('100'), category_id=mains.id, featured=True,
                          image='https://img.example.com/paneer.jpg')
        naan = FoodItem(name='Butter Naan', description='Tandoor flatbread',
                        price=Decimal('45.50'), category_id=mains.id)
        kulfi = FoodItem(name='Kulfi', description='Frozen milk dessert with pistachio',
                         price=Decimal('80'), category_id=desserts.id)
        _db.session.add_all([paneer, naan, kulfi])
        _db.session.commit()

        return {
            'mains': mains.id,
            'desserts': desserts.id,
            'paneer': paneer.id,
            'naan': naan.id,
            'kulfi': kulfi.id,
        }
