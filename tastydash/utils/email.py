"""Outgoing e-mail."""

import logging
from datetime import datetime, timedelta
from flask import current_app, render_template_string, url_for
from flask_mail import Message
from tastydash.extensions import mail

logger = logging.getLogger(__name__)

RESET_BODY = """Hi {{ user.display_name }},

Someone asked to reset the password for your TastyDash account.
Use the link below to choose a new password:

{{ reset_url }}

The link works until {{ expires_at|format_date }} (UTC). If you didn't ask
for a reset, you can ignore this e-mail.
"""


def send_password_reset_email(user):
    """E-mail a password reset link to ``user``."""
    token = user.get_reset_token()
    reset_url = url_for('auth.reset_password', token=token, _external=True)
    expires_at = datetime.utcnow() + timedelta(seconds=current_app.config['PASSWORD_RESET_MAX_AGE'])

    msg = Message(
        subject='Reset your TastyDash password',
        recipients=[user.email],
        body=render_template_string(RESET_BODY, user=user, reset_url=reset_url, expires_at=expires_at),
    )
    mail.send(msg)
    logger.info('Password reset e-mail sent to user %s', user.id)
    return token
