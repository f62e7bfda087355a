"""
Test suite for core: sign-up/sign-in, dashboard header, notifications and audit logs
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from juice_inventory.core.models import User, Profile, Notification, AuditLog
from juice_inventory.core.permissions import is_admin_user
from juice_inventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class RegistrationTests(TestCase):
    """Test the sign-up endpoint"""

    def setUp(self):
        self.client = APIClient()
        self.payload = {
            'email': 'Maria.Lopez@Example.com',
            'password': 'Tangerine-Press-42',
            'password_confirm': 'Tangerine-Press-42',
            'first_name': 'Maria',
            'last_name': 'Lopez',
        }

    def test_register_creates_user_and_employee_profile(self):
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        user = User.objects.get(email='maria.lopez@example.com')
        self.assertEqual(user.username, 'maria.lopez@example.com')
        self.assertEqual(user.profile.role, Profile.ROLE_EMPLOYEE)
        self.assertEqual(user.profile.full_name, 'Maria Lopez')
        self.assertTrue(AuditLog.objects.filter(action='register', object_id=str(user.id)).exists())

    def test_register_admin_role(self):
        self.payload['role'] = 'admin'
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['profile']['role'], 'admin')

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(username='maria.lopez@example.com')
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_register_password_mismatch(self):
        self.payload['password_confirm'] = 'Something-Else-99'
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(email='maria.lopez@example.com').exists())


class LoginLogoutTests(TestCase):
    """Test sign-in, current user and sign-out"""

    def setUp(self):
        self.user = TestDataFactory.create_admin(username='boss@juice.test', password='Citrus-Grove-77')
        self.client = APIClient()

    def test_login_returns_tokens_and_role(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'boss@juice.test',
            'password': 'Citrus-Grove-77',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertTrue(response.data['is_admin'])
        self.assertEqual(response.data['user']['profile']['role'], 'admin')

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'boss@juice.test',
            'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_with_registered_mixed_case_email(self):
        response = self.client.post('/api/v1/auth/register/', {
            'email': 'Alice@Juice.test',
            'password': 'Mango-Lassi-314',
            'password_confirm': 'Mango-Lassi-314',
            'first_name': 'Alice',
            'last_name': 'Moss',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post('/api/v1/auth/login/', {
            'username': 'Alice@Juice.test',
            'password': 'Mango-Lassi-314',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'alice@juice.test')

    def test_login_with_email_when_username_differs(self):
        TestDataFactory.create_admin(username='owner', email='owner@juice.test', password='Lime-Squeeze-88')
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'Owner@Juice.test',
            'password': 'Lime-Squeeze-88',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'owner')

        response = self.client.post('/api/v1/auth/login/', {
            'username': 'owner',
            'password': 'Lime-Squeeze-88',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_inactive_user_rejected(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'boss@juice.test',
            'password': 'Citrus-Grove-77',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'boss@juice.test')
        self.assertTrue(response.data['is_admin'])

    def test_logout_blacklists_refresh_token(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        refresh = str(RefreshToken.for_user(self.user))

        response = client.post('/api/v1/auth/logout/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)

        response = self.client.post('/api/v1/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_without_token(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.post('/api/v1/auth/logout/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AdminRoleTests(TestCase):
    """Test how the admin role is resolved"""

    def test_profile_role_decides(self):
        self.assertTrue(is_admin_user(TestDataFactory.create_admin()))
        self.assertFalse(is_admin_user(TestDataFactory.create_user()))

    def test_superuser_without_profile_is_admin(self):
        user = TestDataFactory.create_user(with_profile=False, is_superuser=True)
        self.assertTrue(is_admin_user(user))

    def test_user_without_profile_is_not_admin(self):
        user = TestDataFactory.create_user(with_profile=False)
        self.assertFalse(is_admin_user(user))


class DashboardTests(TestCase):
    """Test the dashboard header payload"""

    def setUp(self):
        self.user = TestDataFactory.create_user(first_name='Sam', last_name='Reed')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard_lists_only_own_unread_notifications(self):
        first = TestDataFactory.create_notification(self.user, message='first')
        second = TestDataFactory.create_notification(self.user, message='second')
        TestDataFactory.create_notification(self.user, message='seen', read=True)
        TestDataFactory.create_notification(TestDataFactory.create_user(), message='not mine')

        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unread_count'], 2)
        self.assertEqual([n['id'] for n in response.data['notifications']], [second.id, first.id])
        self.assertEqual(response.data['profile']['first_name'], 'Sam')
        self.assertFalse(response.data['is_admin'])

    def test_dashboard_without_profile(self):
        user = TestDataFactory.create_user(with_profile=False)
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['profile'])
        self.assertFalse(response.data['is_admin'])


class NotificationTests(TestCase):
    """Test notification listing and read flags"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_unread_filter(self):
        TestDataFactory.create_notification(self.user, read=True)
        unread = TestDataFactory.create_notification(self.user)

        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/notifications/', {'unread': 'true'})
        self.assertEqual([n['id'] for n in response.data], [unread.id])

    def test_mark_read(self):
        notification = TestDataFactory.create_notification(self.user)
        response = self.client.post(f'/api/v1/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        notification.refresh_from_db()
        self.assertTrue(notification.read)

    def test_cannot_mark_other_users_notification(self):
        other = TestDataFactory.create_notification(TestDataFactory.create_user())
        response = self.client.post(f'/api/v1/notifications/{other.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        other.refresh_from_db()
        self.assertFalse(other.read)

    def test_mark_all_read(self):
        TestDataFactory.create_notification(self.user)
        TestDataFactory.create_notification(self.user)
        other = TestDataFactory.create_notification(TestDataFactory.create_user())

        response = self.client.post('/api/v1/notifications/read-all/')
        self.assertEqual(response.data['updated'], 2)
        self.assertFalse(Notification.objects.filter(user=self.user, read=False).exists())
        other.refresh_from_db()
        self.assertFalse(other.read)


class AuditLogTests(TestCase):
    """Test audit log access"""

    def test_audit_logs_admin_only(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        client.authenticate_user(TestDataFactory.create_admin())
        response = client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_filter_by_action(self):
        admin = TestDataFactory.create_admin()
        AuditLog.objects.create(user=admin, action='create', model_name='Product', object_id='1')
        AuditLog.objects.create(user=admin, action='delete', model_name='Product', object_id='1')

        client = AuthenticatedAPIClient()
        client.authenticate_user(admin)
        response = client.get('/api/v1/audit-logs/', {'action': 'delete'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['username'], admin.username)
