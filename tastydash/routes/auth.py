"""Authentication routes."""

import logging
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from tastydash.extensions import db
from tastydash.errors import ValidationError
from tastydash.forms import form_errors
from tastydash.forms.auth import (LoginForm, RegistrationForm, ForgotPasswordForm,
                                  ResetPasswordForm, ProfileForm)
from tastydash.models import User
from tastydash.models.cart import get_cart
from tastydash.models.user import ROLE_CUSTOMER
from tastydash.utils.email import send_password_reset_email

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/csrf-token')
def csrf_token():
    """CSRF token for JSON clients (send back as X-CSRFToken)."""
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route('/me')
def me():
    """Current session."""
    if not current_user.is_authenticated:
        return jsonify({'user': None, 'is_admin': False})
    return jsonify({'user': current_user.to_dict(), 'is_admin': current_user.is_admin()})


@auth_bp.route('/register', methods=['POST'])
def register():
    """Customer registration."""
    form = RegistrationForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    user = User(
        email=form.email.data.lower(),
        display_name=form.display_name.data.strip(),
        role=ROLE_CUSTOMER
    )
    user.set_password(form.password.data)

    db.session.add(user)
    db.session.commit()

    login_user(user)
    return jsonify({
        'success': True,
        'message': 'Account created successfully! Welcome to TastyDash.',
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login."""
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    user = User.query.filter_by(email=form.email.data.lower()).first()
    if not user or not user.check_password(form.password.data):
        return jsonify({'success': False, 'message': 'Invalid email or password.'}), 401

    if not user.is_active:
        return jsonify({
            'success': False,
            'message': 'Your account has been deactivated. Please contact support.'
        }), 403

    login_user(user, remember=form.remember.data)
    return jsonify({
        'success': True,
        'message': f'Welcome back, {user.display_name}!',
        'user': user.to_dict(),
        'is_admin': user.is_admin()
    })


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """User logout; the session's cart goes with it."""
    get_cart().clear()
    logout_user()
    return jsonify({'success': True, 'message': 'You have been logged out.'})


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """Forgot password - request reset."""
    form = ForgotPasswordForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    user = User.query.filter_by(email=form.email.data.lower()).first()
    if user and user.is_active:
        send_password_reset_email(user)
    else:
        logger.info('Password reset requested for unknown or inactive account')

    # Same answer either way
    return jsonify({
        'success': True,
        'message': 'If an account exists with that email, you will receive a password reset link.'
    })


@auth_bp.route('/reset-password/<token>', methods=['POST'])
def reset_password(token):
    """Reset password with token."""
    user = User.verify_reset_token(token)
    if user is None:
        return jsonify({'success': False, 'message': 'This reset link is invalid or has expired.'}), 400

    form = ResetPasswordForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    user.set_password(form.password.data)
    db.session.commit()
    logger.info('Password reset completed for user %s', user.id)

    return jsonify({'success': True, 'message': 'Your password has been reset. Please log in.'})


@auth_bp.route('/profile', methods=['POST'])
@login_required
def profile():
    """Update the display name."""
    form = ProfileForm()
    if not form.validate_on_submit():
        raise ValidationError(form_errors(form))

    current_user.display_name = form.display_name.data.strip()
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Profile updated successfully!',
        'user': current_user.to_dict()
    })
