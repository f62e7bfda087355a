"""
Test suite for catalog: product listing, filters, validation and admin-only writes
"""
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from juice_inventory.catalog.models import Product
from juice_inventory.core.models import AuditLog
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ProductAPITests(TestCase):
    """Test Product API endpoints"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_search_matches_every_word(self):
        TestDataFactory.create_product(name='Fresh Orange Juice 1L', category='Orange Juice', sku='OJ-1L')
        TestDataFactory.create_product(name='Orange Mango Smoothie', category='Smoothies', sku='SM-OM')
        TestDataFactory.create_product(name='Apple Juice', category='Apple Juice', sku='AJ-1L')

        response = self.client.get('/api/v1/products/', {'search': 'orange juice'})
        self.assertEqual([p['name'] for p in response.data], ['Fresh Orange Juice 1L'])

        response = self.client.get('/api/v1/products/', {'search': 'sm-om'})
        self.assertEqual([p['name'] for p in response.data], ['Orange Mango Smoothie'])

    def test_filter_by_category(self):
        TestDataFactory.create_product(name='Green Boost', category='Smoothies')
        TestDataFactory.create_product(name='Valencia', category='Orange Juice')
        response = self.client.get('/api/v1/products/', {'category': 'smoothies'})
        self.assertEqual([p['name'] for p in response.data], ['Green Boost'])

    def test_categories(self):
        TestDataFactory.create_product(category='Smoothies')
        TestDataFactory.create_product(category='Orange Juice')
        TestDataFactory.create_product(category='Smoothies')
        response = self.client.get('/api/v1/products/categories/')
        self.assertEqual(response.data, ['Orange Juice', 'Smoothies'])

    def test_employee_cannot_create(self):
        response = self.client.post('/api/v1/products/', {'name': 'X', 'category': 'Y'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_create_with_blank_sku(self):
        self.client.authenticate_user(self.admin)
        for name in ('Carrot Ginger', 'Beet Root'):
            response = self.client.post('/api/v1/products/', {
                'name': name,
                'category': 'Vegetable Juice',
                'sku': '',
                'unit_price': '3.75',
            }, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Product.objects.filter(sku__isnull=True).count(), 2)
        self.assertEqual(Product.objects.get(name='Beet Root').unit_price, Decimal('3.75'))

    def test_negative_price_rejected(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/products/', {
            'name': 'Bad', 'category': 'Y', 'unit_price': '-1.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_is_visible_on_next_list(self):
        product = TestDataFactory.create_product(name='Old Label')
        self.client.authenticate_user(self.admin)
        self.client.get('/api/v1/products/')
        self.client.patch(f'/api/v1/products/{product.id}/', {'name': 'New Label'}, format='json')
        response = self.client.get('/api/v1/products/')
        self.assertEqual([p['name'] for p in response.data], ['New Label'])

    def test_form_update_audit_log_stores_strings(self):
        product = TestDataFactory.create_product(name='Valencia OJ')
        self.client.authenticate_user(self.admin)
        response = self.client.patch(
            f'/api/v1/products/{product.id}/', {'unit_price': '4.10', 'category': 'Citrus'}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(action='update', model_name='Product')
        self.assertEqual(log.changes, {'unit_price': '4.10', 'category': 'Citrus'})

    def test_delete_product_with_restock_request_is_refused(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_restock_request(product=product)
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())

    def test_delete_product(self):
        product = TestDataFactory.create_product()
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())
