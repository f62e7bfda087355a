"""
Test suite for sales: recording, filtering and the sales summary
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status
from juice_inventory.core.models import AuditLog
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from juice_inventory.locations.models import Location
from juice_inventory.sales.models import Sale, compute_total_amount


class SaleTotalTests(SimpleTestCase):
    """Test the total amount calculation"""

    def test_total_is_quantity_times_unit_price(self):
        self.assertEqual(compute_total_amount(3, Decimal('4.25')), Decimal('12.75'))
        self.assertEqual(compute_total_amount(7, Decimal('1.99')), Decimal('13.93'))
        self.assertEqual(compute_total_amount(1, Decimal('0')), Decimal('0.00'))


class SaleAPITests(TestCase):
    """Test Sale API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Valencia OJ', category='Orange Juice')
        self.store = TestDataFactory.create_location(name='Central Depot', type=Location.TYPE_CENTRAL_STORE)

    def test_record_sale_computes_total(self):
        response = self.client.post('/api/v1/sales/', {
            'product': self.product.id,
            'location': self.store.id,
            'quantity': 3,
            'unit_price': '4.25',
            'total_amount': '999.00',
            'sale_type': 'wholesale',
            'customer_info': {'name': 'Corner Cafe'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '12.75')

        sale = Sale.objects.get()
        self.assertEqual(sale.total_amount, Decimal('12.75'))
        self.assertEqual(sale.sale_type, Sale.SALE_TYPE_WHOLESALE)
        self.assertEqual(sale.created_by, self.user)
        self.assertEqual(sale.customer_info, {'name': 'Corner Cafe'})
        self.assertTrue(AuditLog.objects.filter(action='sale_record', object_id=str(sale.id)).exists())

    def test_default_sale_type_is_retail(self):
        response = self.client.post('/api/v1/sales/', {
            'product': self.product.id,
            'location': self.store.id,
            'quantity': 1,
            'unit_price': '2.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sale_type'], 'retail')

    def test_invalid_sales_rejected(self):
        base = {'product': self.product.id, 'location': self.store.id, 'quantity': 1, 'unit_price': '2.00'}
        for override in ({'quantity': 0}, {'unit_price': '-1.00'}, {'sale_type': 'barter'},
                         {'customer_info': ['not', 'an', 'object']}):
            with self.subTest(override=override):
                response = self.client.post('/api/v1/sales/', {**base, **override}, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Sale.objects.exists())

    def test_list_newest_first_with_filters(self):
        outlet = TestDataFactory.create_location(name='Westside Outlet', type=Location.TYPE_RETAIL_OUTLET)
        old = TestDataFactory.create_sale(
            product=self.product, location=self.store, created_at=timezone.now() - timedelta(days=10)
        )
        wholesale = TestDataFactory.create_sale(
            product=self.product, location=self.store, sale_type=Sale.SALE_TYPE_WHOLESALE
        )
        retail = TestDataFactory.create_sale(product=self.product, location=outlet)

        response = self.client.get('/api/v1/sales/')
        self.assertEqual([s['id'] for s in response.data], [retail.id, wholesale.id, old.id])

        response = self.client.get('/api/v1/sales/', {'sale_type': 'wholesale'})
        self.assertEqual([s['id'] for s in response.data], [wholesale.id])

        response = self.client.get('/api/v1/sales/', {'location': outlet.id})
        self.assertEqual([s['id'] for s in response.data], [retail.id])

        since = (timezone.localdate() - timedelta(days=1)).isoformat()
        response = self.client.get('/api/v1/sales/', {'date_from': since})
        self.assertEqual({s['id'] for s in response.data}, {retail.id, wholesale.id})

        until = (timezone.localdate() - timedelta(days=5)).isoformat()
        response = self.client.get('/api/v1/sales/', {'date_to': until})
        self.assertEqual([s['id'] for s in response.data], [old.id])

    def test_invalid_date_filter(self):
        response = self.client.get('/api/v1/sales/', {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class SalesSummaryTests(TestCase):
    """Test the sales summary totals and chart data"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.orange = TestDataFactory.create_product(name='Valencia OJ', category='Orange Juice')
        self.smoothie = TestDataFactory.create_product(name='Berry Blast', category='Smoothies')
        self.store = TestDataFactory.create_location(type=Location.TYPE_CENTRAL_STORE)

    def test_empty_summary(self):
        data = self.client.get('/api/v1/sales/summary/').data
        self.assertEqual(data['total_revenue'], '0.00')
        self.assertEqual(data['total_quantity'], 0)
        self.assertEqual(data['sales_count'], 0)
        self.assertEqual(len(data['daily']), 7)
        self.assertTrue(all(day['revenue'] == '0.00' and day['quantity'] == 0 for day in data['daily']))
        self.assertEqual(data['by_category'], [])

    def test_summary(self):
        now = timezone.now()
        TestDataFactory.create_sale(product=self.orange, location=self.store, quantity=2, unit_price=Decimal('3.00'))
        TestDataFactory.create_sale(product=self.smoothie, location=self.store, quantity=1, unit_price=Decimal('5.50'))
        TestDataFactory.create_sale(product=self.orange, location=self.store, quantity=4, unit_price=Decimal('2.50'),
                                    created_at=now - timedelta(days=1))
        TestDataFactory.create_sale(product=self.orange, location=self.store, quantity=10, unit_price=Decimal('1.00'),
                                    created_at=now - timedelta(days=20))

        data = self.client.get('/api/v1/sales/summary/').data
        self.assertEqual(data['total_revenue'], '31.50')
        self.assertEqual(data['total_quantity'], 17)
        self.assertEqual(data['sales_count'], 4)

        today = timezone.localdate()
        daily = data['daily']
        self.assertEqual([day['date'] for day in daily],
                         [(today - timedelta(days=offset)).isoformat() for offset in range(6, -1, -1)])
        self.assertEqual(daily[-1], {'date': today.isoformat(), 'revenue': '11.50', 'quantity': 3})
        self.assertEqual(daily[-2], {'date': (today - timedelta(days=1)).isoformat(), 'revenue': '10.00', 'quantity': 4})
        self.assertEqual(sum(day['quantity'] for day in daily[:-2]), 0)

        self.assertEqual(data['by_category'], [
            {'category': 'Orange Juice', 'revenue': '26.00', 'quantity': 16},
            {'category': 'Smoothies', 'revenue': '5.50', 'quantity': 1},
        ])

    def test_summary_respects_filters(self):
        TestDataFactory.create_sale(product=self.orange, location=self.store, quantity=2, unit_price=Decimal('3.00'),
                                    sale_type=Sale.SALE_TYPE_WHOLESALE)
        TestDataFactory.create_sale(product=self.orange, location=self.store, quantity=1, unit_price=Decimal('3.00'))
        data = self.client.get('/api/v1/sales/summary/', {'sale_type': 'wholesale'}).data
        self.assertEqual(data['sales_count'], 1)
        self.assertEqual(data['total_revenue'], '6.00')
