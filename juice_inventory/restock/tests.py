"""
Test suite for restock requests: submission, visibility and the approval workflow
"""
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from juice_inventory.core.models import Notification, AuditLog
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from juice_inventory.restock.models import RestockRequest
from juice_inventory.restock.serializers import resolve_confirmed_quantity


class ConfirmedQuantityTests(SimpleTestCase):
    """Test the confirmed quantity fallback"""

    def test_fallbacks(self):
        cases = [
            (None, 20),
            ('', 20),
            (0, 20),
            ('0', 20),
            (-5, 20),
            ('abc', 20),
            ('12.5', 12),
            (12.5, 12),
            ('0.5', 20),
            ('NaN', 20),
            ('Infinity', 20),
            (True, 20),
            (15, 15),
            ('15', 15),
            (' 30 ', 30),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(resolve_confirmed_quantity(value, 20), expected)


class RestockRequestSubmitTests(TestCase):
    """Test creating and listing restock requests"""

    def setUp(self):
        self.employee = TestDataFactory.create_user(first_name='Sam', last_name='Reed')
        self.admin = TestDataFactory.create_admin()
        self.product = TestDataFactory.create_product(name='Valencia OJ')
        self.location = TestDataFactory.create_location(name='Central Depot')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.employee)

    def test_submit_request(self):
        response = self.client.post('/api/v1/restock-requests/', {
            'product': self.product.id,
            'location': self.location.id,
            'requested_quantity': 40,
            'notes': 'Weekend promo',
            'status': 'approved',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        restock_request = RestockRequest.objects.get()
        self.assertEqual(restock_request.status, RestockRequest.STATUS_PENDING)
        self.assertEqual(restock_request.employee, self.employee)
        self.assertIsNone(restock_request.confirmed_quantity)
        self.assertEqual(response.data['employee_first_name'], 'Sam')
        self.assertTrue(AuditLog.objects.filter(action='restock_request').exists())

    def test_requested_quantity_must_be_positive(self):
        response = self.client.post('/api/v1/restock-requests/', {
            'product': self.product.id,
            'location': self.location.id,
            'requested_quantity': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_product_rejected(self):
        response = self.client.post('/api/v1/restock-requests/', {
            'product': 999999,
            'location': self.location.id,
            'requested_quantity': 5,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_sees_only_own_requests(self):
        own = TestDataFactory.create_restock_request(employee=self.employee)
        TestDataFactory.create_restock_request()

        response = self.client.get('/api/v1/restock-requests/')
        self.assertEqual([r['id'] for r in response.data], [own.id])

        response = self.client.get(f'/api/v1/restock-requests/{own.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_employee_cannot_read_others_request(self):
        other = TestDataFactory.create_restock_request()
        response = self.client.get(f'/api/v1/restock-requests/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_all_newest_first_with_status_filter(self):
        first = TestDataFactory.create_restock_request(employee=self.employee)
        second = TestDataFactory.create_restock_request(status=RestockRequest.STATUS_REJECTED)
        self.client.authenticate_user(self.admin)

        response = self.client.get('/api/v1/restock-requests/')
        self.assertEqual([r['id'] for r in response.data], [second.id, first.id])

        response = self.client.get('/api/v1/restock-requests/', {'status': 'pending'})
        self.assertEqual([r['id'] for r in response.data], [first.id])


class RestockReviewTests(TestCase):
    """Test approving and rejecting restock requests"""

    def setUp(self):
        self.employee = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_admin()
        self.restock_request = TestDataFactory.create_restock_request(employee=self.employee, requested_quantity=20)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def _approve(self, data=None):
        return self.client.post(
            f'/api/v1/restock-requests/{self.restock_request.id}/approve/', data or {}, format='json'
        )

    def test_approve_with_confirmed_quantity(self):
        response = self._approve({'confirmed_quantity': 15})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.restock_request.refresh_from_db()
        self.assertEqual(self.restock_request.status, RestockRequest.STATUS_APPROVED)
        self.assertEqual(self.restock_request.confirmed_quantity, 15)
        self.assertEqual(self.restock_request.reviewed_by, self.admin)
        self.assertIsNotNone(self.restock_request.reviewed_at)
        self.assertTrue(Notification.objects.filter(user=self.employee, type='restock_update').exists())
        self.assertTrue(AuditLog.objects.filter(action='restock_approve').exists())

    def test_approve_defaults_to_requested_quantity(self):
        response = self._approve()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confirmed_quantity'], 20)

    def test_approve_zero_defaults_to_requested_quantity(self):
        response = self._approve({'confirmed_quantity': 0})
        self.assertEqual(response.data['confirmed_quantity'], 20)

    def test_approve_truncates_fractional_quantity(self):
        response = self._approve({'confirmed_quantity': '12.5'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confirmed_quantity'], 12)

    def test_reject(self):
        response = self.client.post(f'/api/v1/restock-requests/{self.restock_request.id}/reject/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.restock_request.refresh_from_db()
        self.assertEqual(self.restock_request.status, RestockRequest.STATUS_REJECTED)
        self.assertIsNone(self.restock_request.confirmed_quantity)
        self.assertTrue(AuditLog.objects.filter(action='restock_reject').exists())

    def test_only_pending_can_be_reviewed(self):
        self._approve()
        response = self._approve()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(f'/api/v1/restock-requests/{self.restock_request.id}/reject/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_cannot_review(self):
        self.client.authenticate_user(self.employee)
        response = self._approve()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(f'/api/v1/restock-requests/{self.restock_request.id}/reject/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.restock_request.refresh_from_db()
        self.assertEqual(self.restock_request.status, RestockRequest.STATUS_PENDING)

    def test_unknown_request(self):
        response = self.client.post('/api/v1/restock-requests/999999/approve/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
