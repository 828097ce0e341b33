from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient
from unittest.mock import patch

from accounts.models import University, User
from accounts.services import (
    AccountNotApprovedError,
    InvalidStatusTransition,
    change_account_status,
    ensure_can_login,
)
from drivers.models import DriverProfile
from passengers.models import PassengerProfile


class RegistrationAndLoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.aub = University.objects.create(
            name='American University of Beirut', city='Beirut',
            latitude='33.893800', longitude='35.501800',
        )

    def _passenger_payload(self, **overrides):
        payload = {
            'username': 'rana',
            'email': 'rana@aub.edu.lb',
            'password': 'password123',
            'role': 'passenger',
            'gender': 'female',
            'university': self.aub.id,
            'whatsapp': '+96170000000',
        }
        payload.update(overrides)
        return payload

    def test_universities_are_public(self):
        response = self.client.get('/api/auth/universities/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]['name'], 'American University of Beirut')

    def test_passenger_registration_is_pending_with_profile(self):
        response = self.client.post('/api/auth/register/', self._passenger_payload(), format='json')

        self.assertEqual(response.status_code, 201)
        self.assertNotIn('tokens', response.data)
        user = User.objects.get(username='rana')
        self.assertEqual(user.status, 'pending')
        self.assertEqual(PassengerProfile.objects.get(user=user).gender_preference, 'same')

    def test_driver_registration_requires_vehicle(self):
        response = self.client.post(
            '/api/auth/register/', self._passenger_payload(role='driver'), format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('plate_number', response.data)

    def test_driver_registration_creates_driver_profile(self):
        payload = self._passenger_payload(
            username='karim', email='karim@aub.edu.lb', role='driver', gender='male',
            car_brand='Toyota', car_model='Corolla', car_year=2015, car_color='white',
            plate_number='B 123456', cylinders=6,
        )

        response = self.client.post('/api/auth/register/', payload, format='json')

        self.assertEqual(response.status_code, 201)
        profile = DriverProfile.objects.get(user__username='karim')
        self.assertEqual(profile.cylinders, 6)
        self.assertFalse(profile.is_live)

    def test_pending_account_cannot_login(self):
        self.client.post('/api/auth/register/', self._passenger_payload(), format='json')

        response = self.client.post(
            '/api/auth/login/', {'username': 'rana', 'password': 'password123'}, format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('pending approval', str(response.data))

    def test_approved_account_gets_tokens(self):
        self.client.post('/api/auth/register/', self._passenger_payload(), format='json')
        change_account_status(User.objects.get(username='rana'), 'approved')

        response = self.client.post(
            '/api/auth/login/', {'username': 'rana', 'password': 'password123'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data['tokens'])
        self.assertEqual(response.data['user']['university_name'], 'American University of Beirut')


class ApprovalWorkflowTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username='admin', password='admin1234', is_staff=True, role='passenger', gender='male'
        )
        self.student = User.objects.create_user(
            username='lea', password='lea12345', role='passenger', gender='female'
        )

    def test_admin_lists_and_approves_pending_users(self):
        self.client.force_authenticate(user=self.admin)

        pending = self.client.get('/api/auth/admin/pending/')
        self.assertEqual(pending.data['count'], 1)

        response = self.client.post(
            f'/api/auth/admin/users/{self.student.id}/status/', {'status': 'approved'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.student.refresh_from_db()
        self.assertEqual(self.student.status, 'approved')
        self.assertIsNotNone(self.student.status_changed_at)

    def test_banned_is_terminal(self):
        self.client.force_authenticate(user=self.admin)
        change_account_status(self.student, 'banned')

        response = self.client.post(
            f'/api/auth/admin/users/{self.student.id}/status/', {'status': 'approved'}, format='json'
        )

        self.assertEqual(response.status_code, 409)

    def test_unknown_user_returns_404(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/auth/admin/users/9999/status/', {'status': 'approved'}, format='json')

        self.assertEqual(response.status_code, 404)

    def test_students_cannot_approve(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.post(
            f'/api/auth/admin/users/{self.student.id}/status/', {'status': 'approved'}, format='json'
        )

        self.assertEqual(response.status_code, 403)

    def test_transition_rules(self):
        with self.assertRaises(InvalidStatusTransition):
            change_account_status(self.student, 'pending')

        change_account_status(self.student, 'rejected')
        with self.assertRaises(AccountNotApprovedError) as ctx:
            ensure_can_login(self.student)
        self.assertEqual(str(ctx.exception), 'Your registration was rejected')

        change_account_status(self.student, 'approved')
        ensure_can_login(self.student)

    @patch('drivers.services.broadcast_driver_update')
    def test_banning_a_live_driver_takes_them_offline(self, mock_broadcast):
        driver = User.objects.create_user(
            username='omar', password='omar1234', role='driver', gender='male', status='approved'
        )
        profile = DriverProfile.objects.create(
            user=driver, car_brand='Kia', car_model='Rio', car_year=2018, car_color='red',
            plate_number='M 5555', is_live=True,
            current_latitude='33.900000', current_longitude='35.480000',
        )

        change_account_status(driver, 'banned')

        profile.refresh_from_db()
        self.assertFalse(profile.is_live)
        mock_broadcast.assert_called_once()


class PopulateUniversitiesCommandTests(TestCase):
    def test_seeds_once_and_is_idempotent(self):
        call_command('populate_universities', stdout=StringIO())
        seeded = University.objects.count()

        call_command('populate_universities', stdout=StringIO())

        self.assertEqual(seeded, 8)
        self.assertEqual(University.objects.count(), 8)

    def test_dry_run_writes_nothing(self):
        call_command('populate_universities', dry_run=True, stdout=StringIO())

        self.assertFalse(University.objects.exists())
