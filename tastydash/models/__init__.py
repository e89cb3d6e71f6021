"""Database models package."""

from .user import User
from .food import Category, FoodItem
from .order import Order, OrderLine
from .cart import Cart, CartLine

__all__ = [
    'User',
    'Category',
    'FoodItem',
    'Order',
    'OrderLine',
    'Cart',
    'CartLine',
]
