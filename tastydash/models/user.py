"""User model."""

from datetime import datetime
from flask import current_app
from flask_login import UserMixin
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from tastydash.extensions import db, bcrypt

ROLE_ADMIN = 'admin'
ROLE_CUSTOMER = 'customer'
ROLES = (ROLE_ADMIN, ROLE_CUSTOMER)

RESET_TOKEN_SALT = 'tastydash-password-reset'


class User(UserMixin, db.Model):
    """User model for customers and admins."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_CUSTOMER)  # customer, admin
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    orders = db.relationship('Order', backref='customer', lazy='dynamic', foreign_keys='Order.customer_id')

    def set_password(self, password):
        """Hash and set the password."""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if password matches."""
        return bcrypt.check_password_hash(self.password_hash, password)

    def is_admin(self):
        """Check if user is admin."""
        return self.role == ROLE_ADMIN

    def is_customer(self):
        """Check if user is a customer."""
        return self.role == ROLE_CUSTOMER

    def get_reset_token(self):
        """Signed, time-limited password reset token."""
        serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=RESET_TOKEN_SALT)
        # The hash fragment invalidates the token once the password changes.
        return serializer.dumps({'uid': self.id, 'ph': self.password_hash[-10:]})

    @staticmethod
    def verify_reset_token(token):
        """Return the user for a valid reset token, otherwise None."""
        serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=RESET_TOKEN_SALT)
        try:
            data = serializer.loads(token, max_age=current_app.config['PASSWORD_RESET_MAX_AGE'])
        except (SignatureExpired, BadSignature):
            return None
        user = db.session.get(User, data.get('uid'))
        if user is None or user.password_hash[-10:] != data.get('ph'):
            return None
        return user

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'role': self.role,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'
