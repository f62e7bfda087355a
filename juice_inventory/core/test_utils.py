"""
Test utilities and factories for creating test data
"""
from datetime import timedelta
from decimal import Decimal
import random
import string
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from juice_inventory.core.models import Profile, Notification
from juice_inventory.locations.models import Location
from juice_inventory.catalog.models import Product
from juice_inventory.inventory.models import InventoryRecord
from juice_inventory.restock.models import RestockRequest
from juice_inventory.sales.models import Sale

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role=Profile.ROLE_EMPLOYEE,
                    with_profile=True, first_name='Test', last_name='User', is_superuser=False):
        """Create a test user, with a dashboard profile unless with_profile is False"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6).lower()}@test.com'
        if not email:
            email = username if '@' in username else f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            is_superuser=is_superuser,
            is_staff=is_superuser,
        )
        if with_profile:
            Profile.objects.create(user=user, first_name=first_name, last_name=last_name, role=role)
        return user

    @staticmethod
    def create_admin(**kwargs):
        """Create a test user with the admin role"""
        kwargs.setdefault('first_name', 'Admin')
        return TestDataFactory.create_user(role=Profile.ROLE_ADMIN, **kwargs)

    @staticmethod
    def create_location(name=None, type=Location.TYPE_WAREHOUSE, address=None):
        """Create a test location"""
        if not name:
            name = f'Location_{TestDataFactory.random_string(6)}'
        return Location.objects.create(name=name, type=type, address=address or f'Test Address {name}')

    @staticmethod
    def create_product(name=None, category='Orange Juice', sku=None, unit_price=Decimal('2.50')):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(name=name, category=category, sku=sku, unit_price=unit_price)

    @staticmethod
    def create_inventory_record(product=None, location=None, quantity=50, days_to_expire=60, batch_number=None):
        """Create a test inventory record expiring ``days_to_expire`` days from today"""
        return InventoryRecord.objects.create(
            product=product or TestDataFactory.create_product(),
            location=location or TestDataFactory.create_location(),
            quantity=quantity,
            expiration_date=timezone.localdate() + timedelta(days=days_to_expire),
            batch_number=batch_number,
        )

    @staticmethod
    def create_restock_request(employee=None, product=None, location=None, requested_quantity=20,
                               status=RestockRequest.STATUS_PENDING, notes=None):
        """Create a test restock request"""
        return RestockRequest.objects.create(
            employee=employee or TestDataFactory.create_user(),
            product=product or TestDataFactory.create_product(),
            location=location or TestDataFactory.create_location(),
            requested_quantity=requested_quantity,
            status=status,
            notes=notes,
        )

    @staticmethod
    def create_sale(product=None, location=None, quantity=3, unit_price=Decimal('4.00'),
                    sale_type=Sale.SALE_TYPE_RETAIL, created_by=None, created_at=None):
        """Create a test sale; created_at backdates it"""
        sale = Sale.objects.create(
            product=product or TestDataFactory.create_product(),
            location=location or TestDataFactory.create_location(type=Location.TYPE_CENTRAL_STORE),
            quantity=quantity,
            unit_price=unit_price,
            sale_type=sale_type,
            created_by=created_by,
        )
        if created_at is not None:
            # auto_now_add ignores values passed to create()
            Sale.objects.filter(pk=sale.pk).update(created_at=created_at)
            sale.refresh_from_db()
        return sale

    @staticmethod
    def create_notification(user, title='Info', message='Hello', type='info', read=False):
        """Create a test notification"""
        return Notification.objects.create(user=user, title=title, message=message, type=type, read=read)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
