#!/usr/bin/env python3
"""
Script to create (or promote) an admin user for TastyDash.
Run this script with the same FLASK_CONFIG / DATABASE_URL as the app.
"""

from tastydash import create_app
from tastydash.extensions import db
from tastydash.models import User
from tastydash.models.user import ROLE_ADMIN


def create_admin_user(email, password, display_name):
    """
    Create an admin user, or promote an existing account to admin.

    Args:
        email: Admin email address
        password: Admin password (will be hashed)
        display_name: Admin full name
    Returns:
        The admin User.
    """
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user is not None:
        print(f"User with email {email} already exists (role: {user.role}).")
        if user.role != ROLE_ADMIN:
            user.role = ROLE_ADMIN
            db.session.commit()
            print(f"✅ User {email} updated to admin role!")
        return user

    user = User(email=email, display_name=display_name, role=ROLE_ADMIN)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    print("✅ Admin user created successfully!")
    print(f"   Email: {email}")
    print(f"   Name: {display_name}")
    print("   Role: admin")
    return user


def main():
    print("=" * 60)
    print("TastyDash - Admin User Creation")
    print("=" * 60)
    print()

    print("Enter admin user details:")
    email = input("Email: ").strip().lower()
    password = input("Password: ").strip()
    display_name = input("Full Name: ").strip()

    print()
    print("Creating admin user with:")
    print(f"  Email: {email}")
    print(f"  Name: {display_name}")
    print()

    confirm = input("Proceed? (yes/no): ").lower()
    if confirm != 'yes':
        print("❌ Admin creation cancelled.")
        return

    app = create_app()
    with app.app_context():
        db.create_all()
        create_admin_user(email, password, display_name)


if __name__ == '__main__':
    main()
