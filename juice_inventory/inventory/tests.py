"""
Test suite for inventory: record CRUD, overview aggregates and expiration alerts
"""
from datetime import date, timedelta
from io import StringIO
from types import SimpleNamespace
from django.core.management import call_command
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status
from juice_inventory.core.models import Notification, AuditLog
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from juice_inventory.inventory.models import InventoryRecord
from juice_inventory.inventory.utils import (
    days_until_expiration, expiration_urgency, bucket_expiring_records, build_expiration_message,
    EXPIRED, CRITICAL, WARNING, ATTENTION,
)


class ExpirationHelperTests(SimpleTestCase):
    """Test day difference and urgency bucketing"""

    today = date(2024, 3, 10)

    def _record(self, pk, days):
        return SimpleNamespace(pk=pk, expiration_date=self.today + timedelta(days=days))

    def test_days_until_expiration(self):
        self.assertEqual(days_until_expiration(date(2024, 3, 15), today=self.today), 5)
        self.assertEqual(days_until_expiration(date(2024, 3, 10), today=self.today), 0)
        self.assertEqual(days_until_expiration(date(2024, 3, 8), today=self.today), -2)
        self.assertEqual(days_until_expiration(date(2024, 4, 1), today=self.today), 22)

    def test_urgency_thresholds(self):
        expected = {
            -30: EXPIRED, -1: EXPIRED,
            0: CRITICAL, 7: CRITICAL,
            8: WARNING, 14: WARNING,
            15: ATTENTION, 30: ATTENTION,
        }
        for days, urgency in expected.items():
            with self.subTest(days=days):
                self.assertEqual(expiration_urgency(days), urgency)

    def test_bucketing_partitions_and_sorts(self):
        records = [self._record(pk, days) for pk, days in enumerate([20, -3, 31, 7, 0, 9, 45, 14], start=1)]
        items, counts = bucket_expiring_records(records, today=self.today, window_days=30)

        self.assertEqual([days for _, days, _ in items], [-3, 0, 7, 9, 14, 20])
        self.assertEqual(counts, {EXPIRED: 1, CRITICAL: 2, WARNING: 2, ATTENTION: 1})
        self.assertEqual(sum(counts.values()), len(items))

    def test_narrower_window(self):
        records = [self._record(pk, days) for pk, days in enumerate([-1, 3, 10, 25], start=1)]
        items, counts = bucket_expiring_records(records, today=self.today, window_days=7)
        self.assertEqual([days for _, days, _ in items], [-1, 3])
        self.assertEqual(counts[WARNING], 0)
        self.assertEqual(counts[ATTENTION], 0)

    def test_message(self):
        record = SimpleNamespace(
            product=SimpleNamespace(name='Valencia OJ'),
            location=SimpleNamespace(name='Central Depot'),
            quantity=12,
        )
        self.assertEqual(
            build_expiration_message(record, 5),
            'Valencia OJ at Central Depot expires in 5 days (12 units)'
        )


class InventoryRecordAPITests(TestCase):
    """Test InventoryRecord API endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.employee = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.employee)
        self.location = TestDataFactory.create_location(name='Central Depot')
        self.product = TestDataFactory.create_product(name='Valencia OJ', category='Orange Juice')

    def test_list_ordered_by_quantity(self):
        TestDataFactory.create_inventory_record(product=self.product, location=self.location, quantity=40)
        TestDataFactory.create_inventory_record(product=self.product, location=self.location, quantity=3)
        TestDataFactory.create_inventory_record(product=self.product, location=self.location, quantity=15)
        response = self.client.get('/api/v1/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['quantity'] for r in response.data], [3, 15, 40])
        self.assertEqual(response.data[0]['product']['name'], 'Valencia OJ')
        self.assertEqual(response.data[0]['location']['name'], 'Central Depot')

    def test_filters(self):
        smoothie = TestDataFactory.create_product(name='Berry Blast', category='Smoothies')
        other_location = TestDataFactory.create_location(name='Westside Outlet')
        TestDataFactory.create_inventory_record(product=self.product, location=self.location)
        TestDataFactory.create_inventory_record(product=smoothie, location=other_location)

        response = self.client.get('/api/v1/inventory/', {'category': 'smoothies'})
        self.assertEqual([r['product']['name'] for r in response.data], ['Berry Blast'])

        response = self.client.get('/api/v1/inventory/', {'location': self.location.id})
        self.assertEqual([r['product']['name'] for r in response.data], ['Valencia OJ'])

        response = self.client.get('/api/v1/inventory/', {'product': smoothie.id})
        self.assertEqual(len(response.data), 1)

    def test_employee_cannot_create(self):
        response = self.client.post('/api/v1/inventory/', {
            'product_id': self.product.id,
            'location_id': self.location.id,
            'quantity': 10,
            'expiration_date': '2030-01-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_crud(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/inventory/', {
            'product_id': self.product.id,
            'location_id': self.location.id,
            'quantity': 10,
            'expiration_date': '2030-01-01',
            'batch_number': 'B-001',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record_id = response.data['id']

        response = self.client.patch(f'/api/v1/inventory/{record_id}/', {'quantity': 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(InventoryRecord.objects.get(pk=record_id).quantity, 25)

        response = self.client.delete(f'/api/v1/inventory/{record_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryRecord.objects.filter(pk=record_id).exists())
        self.assertEqual(AuditLog.objects.filter(model_name='InventoryRecord').count(), 3)

    def test_negative_quantity_rejected(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/inventory/', {
            'product_id': self.product.id,
            'location_id': self.location.id,
            'quantity': -1,
            'expiration_date': '2030-01-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class InventoryOverviewTests(TestCase):
    """Test the overview stats and chart data"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_empty_overview(self):
        response = self.client.get('/api/v1/inventory/overview/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_products'], 0)
        self.assertEqual(response.data['total_value'], '0.00')
        self.assertEqual(response.data['by_location'], [])
        self.assertEqual(response.data['low_stock'], [])

    def test_overview_aggregates(self):
        alpha = TestDataFactory.create_location(name='Alpha')
        beta = TestDataFactory.create_location(name='Beta')
        orange = TestDataFactory.create_product(name='Valencia OJ', category='Orange Juice', unit_price='2.50')
        smoothie = TestDataFactory.create_product(name='Berry Blast', category='Smoothies', unit_price=None)

        TestDataFactory.create_inventory_record(product=orange, location=alpha, quantity=5, days_to_expire=10)
        TestDataFactory.create_inventory_record(product=smoothie, location=alpha, quantity=20, days_to_expire=60)
        TestDataFactory.create_inventory_record(product=orange, location=beta, quantity=8, days_to_expire=-2)

        data = self.client.get('/api/v1/inventory/overview/').data
        self.assertEqual(data['total_products'], 3)
        self.assertEqual(data['low_stock_items'], 2)
        self.assertEqual(data['expiring_soon'], 2)
        self.assertEqual(data['total_value'], '32.50')
        self.assertEqual(data['active_locations'], 2)
        self.assertEqual(data['by_location'], [
            {'location': 'Alpha', 'quantity': 25},
            {'location': 'Beta', 'quantity': 8},
        ])
        self.assertEqual(data['by_category'], [
            {'category': 'Orange Juice', 'value': 13},
            {'category': 'Smoothies', 'value': 20},
        ])
        self.assertEqual([r['quantity'] for r in data['low_stock']], [5, 8])

    def test_low_stock_preview_is_limited(self):
        for quantity in range(7):
            TestDataFactory.create_inventory_record(quantity=quantity)
        data = self.client.get('/api/v1/inventory/overview/').data
        self.assertEqual(data['low_stock_items'], 7)
        self.assertEqual([r['quantity'] for r in data['low_stock']], [0, 1, 2, 3, 4])


class ExpiringItemsTests(TestCase):
    """Test the expiration alert endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.location = TestDataFactory.create_location(name='Central Depot')
        self.product = TestDataFactory.create_product(name='Valencia OJ')
        for days in (-2, 0, 7, 10, 20, 45):
            TestDataFactory.create_inventory_record(
                product=self.product, location=self.location, quantity=12, days_to_expire=days
            )

    def test_expiring_items(self):
        response = self.client.get('/api/v1/inventory/expiring/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 5)
        self.assertEqual(
            [item['days_until_expiration'] for item in response.data['items']],
            [-2, 0, 7, 10, 20]
        )
        self.assertEqual(
            [item['urgency'] for item in response.data['items']],
            ['expired', 'critical', 'critical', 'warning', 'attention']
        )
        self.assertEqual(response.data['counts'], {'expired': 1, 'critical': 2, 'warning': 1, 'attention': 1})
        self.assertEqual(response.data['items'][0]['product_name'], 'Valencia OJ')

    def test_days_window(self):
        response = self.client.get('/api/v1/inventory/expiring/', {'days': 7})
        self.assertEqual(response.data['total'], 3)

    def test_invalid_days(self):
        response = self.client.get('/api/v1/inventory/expiring/', {'days': 'soon'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_notify_creates_notification_for_current_user(self):
        record = InventoryRecord.objects.get(
            expiration_date=timezone.localdate() + timedelta(days=7)
        )
        response = self.client.post(f'/api/v1/inventory/{record.id}/notify/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        notification = Notification.objects.get(user=self.user)
        self.assertEqual(notification.title, 'Expiration Alert')
        self.assertEqual(notification.type, 'expiration_warning')
        self.assertEqual(notification.message, 'Valencia OJ at Central Depot expires in 7 days (12 units)')
        self.assertFalse(notification.read)
        self.assertTrue(AuditLog.objects.filter(action='expiration_notify', object_id=str(record.id)).exists())

    def test_notify_unknown_record(self):
        response = self.client.post('/api/v1/inventory/999999/notify/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class CheckExpirationsCommandTests(TestCase):
    """Test the check_expirations management command"""

    def setUp(self):
        self.admins = [TestDataFactory.create_admin(), TestDataFactory.create_admin()]
        self.employee = TestDataFactory.create_user()
        TestDataFactory.create_inventory_record(days_to_expire=3)
        TestDataFactory.create_inventory_record(days_to_expire=-1)
        TestDataFactory.create_inventory_record(days_to_expire=90)

    def test_notifies_every_admin_once(self):
        call_command('check_expirations', stdout=StringIO())
        for admin in self.admins:
            self.assertEqual(Notification.objects.filter(user=admin, type='expiration_warning').count(), 2)
        self.assertFalse(Notification.objects.filter(user=self.employee).exists())

        # Pending alerts are not duplicated
        call_command('check_expirations', stdout=StringIO())
        self.assertEqual(Notification.objects.count(), 4)

    def test_days_option(self):
        call_command('check_expirations', days=0, stdout=StringIO())
        self.assertEqual(Notification.objects.count(), 2)
        call_command('check_expirations', days=120, stdout=StringIO())
        self.assertEqual(Notification.objects.count(), 6)

    def test_dry_run(self):
        out = StringIO()
        call_command('check_expirations', dry_run=True, stdout=out)
        self.assertFalse(Notification.objects.exists())
        self.assertIn('Would create 4 notifications', out.getvalue())
