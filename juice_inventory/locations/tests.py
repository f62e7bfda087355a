"""
Test suite for locations: listing, type filter, admin-only writes and cache freshness
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from juice_inventory.core.models import AuditLog
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from juice_inventory.inventory.models import InventoryRecord
from juice_inventory.locations.models import Location


class LocationAPITests(TestCase):
    """Test Location API endpoints"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.employee = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.employee)

    def test_list_locations_sorted_by_name(self):
        TestDataFactory.create_location(name='Westside Outlet', type=Location.TYPE_RETAIL_OUTLET)
        TestDataFactory.create_location(name='Central Depot', type=Location.TYPE_CENTRAL_STORE)
        response = self.client.get('/api/v1/locations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([loc['name'] for loc in response.data], ['Central Depot', 'Westside Outlet'])

    def test_filter_by_type(self):
        TestDataFactory.create_location(name='Westside Outlet', type=Location.TYPE_RETAIL_OUTLET)
        central = TestDataFactory.create_location(name='Central Depot', type=Location.TYPE_CENTRAL_STORE)
        response = self.client.get('/api/v1/locations/', {'type': 'central_store'})
        self.assertEqual([loc['id'] for loc in response.data], [central.id])

    def test_employee_cannot_create(self):
        response = self.client.post('/api/v1/locations/', {'name': 'North Hub'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Location.objects.filter(name='North Hub').exists())

    def test_admin_create_is_visible_on_next_list(self):
        self.client.authenticate_user(self.admin)
        self.assertEqual(self.client.get('/api/v1/locations/').data, [])

        response = self.client.post('/api/v1/locations/', {
            'name': 'North Hub',
            'type': 'distribution_center',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Location').exists())

        response = self.client.get('/api/v1/locations/')
        self.assertEqual([loc['name'] for loc in response.data], ['North Hub'])

    def test_duplicate_name_rejected(self):
        TestDataFactory.create_location(name='North Hub')
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/locations/', {'name': 'North Hub'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_type_rejected(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/locations/', {'name': 'Moon Base', 'type': 'moon'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_location(self):
        location = TestDataFactory.create_location(name='Old Name')
        self.client.authenticate_user(self.admin)
        response = self.client.patch(f'/api/v1/locations/{location.id}/', {'name': 'New Name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        location.refresh_from_db()
        self.assertEqual(location.name, 'New Name')

    def test_form_update_audit_log_stores_strings(self):
        location = TestDataFactory.create_location(name='Old Name')
        self.client.authenticate_user(self.admin)
        response = self.client.patch(
            f'/api/v1/locations/{location.id}/', {'name': 'New Name', 'type': 'retail_outlet'}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(action='update', model_name='Location')
        self.assertEqual(log.changes, {'name': 'New Name', 'type': 'retail_outlet'})

    def test_delete_location_cascades_inventory(self):
        location = TestDataFactory.create_location()
        TestDataFactory.create_inventory_record(location=location)
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/locations/{location.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryRecord.objects.exists())

    def test_delete_location_with_sales_is_refused(self):
        location = TestDataFactory.create_location()
        TestDataFactory.create_sale(location=location)
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/locations/{location.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Location.objects.filter(pk=location.pk).exists())
