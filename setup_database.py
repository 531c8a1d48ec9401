#!/usr/bin/env python
"""
Database setup script for the Resource Sharing marketplace.
Run this to apply migrations and seed the database manually if needed.
"""
import os
import django
from django.core.management import execute_from_command_line

if __name__ == '__main__':
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')
    django.setup()

    print("Setting up database...")

    # Apply migrations
    print("Applying migrations...")
    execute_from_command_line(['manage.py', 'migrate'])

    # Seed database
    print("Seeding database...")
    try:
        execute_from_command_line(['manage.py', 'seed_data'])
    except Exception as e:
        print(f"Warning: Could not seed database: {e}")

    print("Database setup complete!")
