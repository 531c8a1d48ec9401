import os
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction
from django.conf import settings
from rest_framework.authtoken.models import Token
from apps.items.models import Item

User = get_user_model()

SAMPLE_ITEMS = [
    {
        'title': 'Cordless Drill',
        'description': '18V drill with two batteries and a bit set',
        'category': 'Tools',
        'location': 'Downtown',
        'duration': 5,
    },
    {
        'title': 'Four-Person Tent',
        'description': 'Waterproof dome tent, easy to pitch',
        'category': 'Outdoor',
        'location': 'Westside',
        'duration': 10,
    },
    {
        'title': 'Stand Mixer',
        'description': 'Comes with dough hook and whisk',
        'category': 'Kitchen',
        'location': 'Eastside',
        'duration': 7,
    },
    {
        'title': 'Road Bike',
        'description': 'Medium frame, recently serviced',
        'category': 'Sports',
        'location': 'Northside',
        'duration': 3,
    },
]


class Command(BaseCommand):
    help = 'Seed database with test data for the resource sharing marketplace'

    def add_arguments(self, parser):
        parser.add_argument(
            '--without-items',
            action='store_true',
            help='Create the accounts only, without sample listings',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Force seeding even if not in development mode',
        )

    def handle(self, *args, **options):
        # Safety check: prevent accidental production seeding
        environment = os.environ.get('DJANGO_ENVIRONMENT', 'development')
        if environment == 'production' and not options['force']:
            self.stdout.write(self.style.ERROR('Cannot seed production database without --force flag'))
            return

        if settings.DEBUG is False and not options['force']:
            self.stdout.write(self.style.ERROR('Cannot seed when DEBUG=False without --force flag'))
            return

        self.stdout.write(self.style.SUCCESS('Starting database seeding...'))
        self.stdout.write(f'Environment: {environment}')

        with transaction.atomic():
            self.create_admin()
            seller = self.create_account('sarah.seller@example.com', 'Sarah Seller', User.SELLER)
            self.create_account('ben.buyer@example.com', 'Ben Buyer', User.BUYER)

            if not options['without_items']:
                self.create_items(seller)

        self.stdout.write(self.style.SUCCESS('Database seeding completed successfully!'))
        self.stdout.write(self.style.WARNING('\nTest Login Credentials:'))
        self.stdout.write('Admin  - admin@example.com / admin123')
        self.stdout.write('Seller - sarah.seller@example.com / testpass123')
        self.stdout.write('Buyer  - ben.buyer@example.com / testpass123')

    def create_admin(self):
        """Create an admin superuser for the Django admin"""
        admin, created = User.objects.get_or_create(
            username='admin@example.com',
            defaults={
                'email': 'admin@example.com',
                'name': 'Admin',
                'role': User.SELLER,
                'is_staff': True,
                'is_superuser': True,
            }
        )

        if created:
            admin.set_password('admin123')
            admin.save()
            self.stdout.write(f'Created admin superuser: {admin.email}')
        elif not admin.is_superuser or not admin.is_staff:
            admin.is_superuser = True
            admin.is_staff = True
            admin.save()
            self.stdout.write(f'Updated admin permissions: {admin.email}')
        else:
            self.stdout.write(f'Admin superuser already exists: {admin.email}')

        return admin

    def create_account(self, email, name, role):
        user, created = User.objects.get_or_create(
            username=email,
            defaults={'email': email, 'name': name, 'role': role}
        )

        if created:
            user.set_password('testpass123')
            user.save()
            self.stdout.write(f'Created {role}: {user.email}')
        else:
            self.stdout.write(f'{role.capitalize()} already exists: {user.email}')

        Token.objects.get_or_create(user=user)
        return user

    def create_items(self, seller):
        for data in SAMPLE_ITEMS:
            item, created = Item.objects.get_or_create(
                seller=seller,
                title=data['title'],
                defaults=data
            )
            if created:
                self.stdout.write(f'  -> Listed {item.title} ({item.category}, {item.location})')
            else:
                self.stdout.write(f'  -> {item.title} already listed')
