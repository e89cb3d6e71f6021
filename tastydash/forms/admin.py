"""Back-office forms for the menu."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, DecimalField, BooleanField, IntegerField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, URL, ValidationError
from tastydash.extensions import db
from tastydash.models import Category


class FoodItemForm(FlaskForm):
    """Add/edit food item form."""
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(min=2, max=150)
    ])
    description = TextAreaField('Description', validators=[
        Optional(),
        Length(max=2000)
    ])
    price = DecimalField('Price', places=2, validators=[
        InputRequired(message='Price is required'),
        NumberRange(min=0, message='Price cannot be negative')
    ])
    category_id = IntegerField('Category', validators=[
        DataRequired(message='Category is required')
    ])
    image = StringField('Image URL', validators=[
        Optional(),
        URL(message='Please enter a valid image URL'),
        Length(max=500)
    ])
    featured = BooleanField('Featured')

    def validate_category_id(self, field):
        if db.session.get(Category, field.data) is None:
            raise ValidationError('Unknown category.')


class CategoryForm(FlaskForm):
    """Add/edit category form."""
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(min=2, max=100)
    ])
    image = StringField('Image URL', validators=[
        Optional(),
        URL(message='Please enter a valid image URL'),
        Length(max=500)
    ])
