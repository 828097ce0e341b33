from datetime import timedelta
from decimal import Decimal

from django.core.management import call_command
from django.db import transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIRequestFactory, force_authenticate
from unittest.mock import patch

from accounts.models import University, User
from drivers.models import DriverProfile
from fares.models import FuelPrice
from passengers.models import PassengerProfile
from services import ride_management
from .models import RideRequest
from .views import (
	accept_ride,
	cancel_ride,
	complete_ride,
	create_ride_request,
	decline_ride,
	driver_current_rides,
	get_current_ride,
	mark_ride_paid,
)


@patch('services.ride_management.ride_lifecycle.notify_user_event')
class RideRequestFlowTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.aub = University.objects.create(
			name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800'
		)
		self.passenger = User.objects.create_user(
			username='passenger',
			password='pass1234',
			role='passenger',
			gender='female',
			university=self.aub,
			status='approved'
		)
		PassengerProfile.objects.create(user=self.passenger, gender_preference='same')

		self.driver = User.objects.create_user(
			username='driver_one',
			password='driver1234',
			role='driver',
			gender='female',
			university=self.aub,
			status='approved'
		)
		self.profile = DriverProfile.objects.create(
			user=self.driver,
			car_brand='Nissan',
			car_model='Sunny',
			car_year=2012,
			car_color='silver',
			plate_number='B-1001',
			is_live=True,
			current_latitude='33.900000',
			current_longitude='35.480000'
		)
		self.other_driver = User.objects.create_user(
			username='driver_two',
			password='driver1234',
			role='driver',
			gender='female',
			university=self.aub,
			status='approved'
		)
		FuelPrice.objects.create(price_per_liter=Decimal('1.500'))

	def _post(self, view, user, data=None, **kwargs):
		request = self.factory.post('/api/rides/', data or {}, format='json')
		force_authenticate(request, user=user)
		with self.captureOnCommitCallbacks(execute=True):
			return view(request, **kwargs)

	def _create_ride(self):
		response = self._post(create_ride_request, self.passenger, {
			'driver_id': self.profile.id,
			'pickup_latitude': '33.895000',
			'pickup_longitude': '35.490000',
			'payment_method': 'wish',
		})
		self.assertEqual(response.status_code, 201)
		return RideRequest.objects.get(id=response.data['ride']['id'])

	def test_request_snapshots_estimate_and_notifies_driver(self, mock_notify):
		ride = self._create_ride()

		self.assertEqual(ride.status, 'requested')
		self.assertEqual(ride.driver, self.driver)
		self.assertEqual(ride.university, self.aub)
		self.assertEqual(ride.estimated_cost, Decimal('0.30'))
		self.assertEqual(ride.passenger_share, Decimal('0.30'))
		self.assertEqual(ride.driver_share, Decimal('0.00'))
		self.assertEqual(ride.fuel_price, Decimal('1.500'))
		self.assertEqual(ride.payment_method, 'wish')
		mock_notify.assert_called_once()
		self.assertEqual(mock_notify.call_args[0][:2], (self.driver.id, 'ride_requested'))

	def test_only_one_active_request_per_passenger(self, mock_notify):
		self._create_ride()

		response = self._post(create_ride_request, self.passenger, {
			'driver_id': self.profile.id,
			'pickup_latitude': '33.895000',
			'pickup_longitude': '35.490000',
		})

		self.assertEqual(response.status_code, 409)
		self.assertEqual(RideRequest.objects.count(), 1)

	def test_cannot_request_ineligible_driver(self, mock_notify):
		self.driver.gender = 'male'
		self.driver.save(update_fields=['gender'])

		response = self._post(create_ride_request, self.passenger, {
			'driver_id': self.profile.id,
			'pickup_latitude': '33.895000',
			'pickup_longitude': '35.490000',
		})

		self.assertEqual(response.status_code, 403)
		self.assertFalse(RideRequest.objects.exists())

	def test_drivers_cannot_request_rides(self, mock_notify):
		response = self._post(create_ride_request, self.driver, {
			'driver_id': self.profile.id,
			'pickup_latitude': '33.895000',
			'pickup_longitude': '35.490000',
		})

		self.assertEqual(response.status_code, 403)

	def test_accept_and_complete_with_payment(self, mock_notify):
		ride = self._create_ride()

		response = self._post(accept_ride, self.driver, ride_id=ride.id)
		self.assertEqual(response.status_code, 200)

		response = self._post(complete_ride, self.driver, {'payment_received': True}, ride_id=ride.id)
		self.assertEqual(response.status_code, 200)

		ride.refresh_from_db()
		self.passenger.refresh_from_db()
		self.driver.refresh_from_db()
		self.assertEqual(ride.status, 'completed')
		self.assertEqual(ride.payment_status, 'paid')
		self.assertIsNotNone(ride.paid_at)
		self.assertEqual(self.passenger.completed_rides, 1)
		self.assertEqual(self.driver.completed_rides, 1)

		events = [c[0][1] for c in mock_notify.call_args_list]
		self.assertEqual(events, ['ride_requested', 'ride_accepted', 'ride_completed'])

	def test_only_addressed_driver_can_respond(self, mock_notify):
		ride = self._create_ride()

		response = self._post(accept_ride, self.other_driver, ride_id=ride.id)

		self.assertEqual(response.status_code, 404)
		ride.refresh_from_db()
		self.assertEqual(ride.status, 'requested')

	def test_decline_frees_passenger_for_a_new_request(self, mock_notify):
		ride = self._create_ride()

		response = self._post(decline_ride, self.driver, ride_id=ride.id)
		self.assertEqual(response.status_code, 200)

		ride.refresh_from_db()
		self.assertEqual(ride.status, 'declined')
		self._create_ride()

	def test_cannot_complete_unaccepted_ride(self, mock_notify):
		ride = self._create_ride()

		response = self._post(complete_ride, self.driver, ride_id=ride.id)

		self.assertEqual(response.status_code, 409)

	def test_passenger_cancels_accepted_ride(self, mock_notify):
		ride = self._create_ride()
		self._post(accept_ride, self.driver, ride_id=ride.id)

		response = self._post(cancel_ride, self.passenger, ride_id=ride.id)

		self.assertEqual(response.status_code, 200)
		self.assertTrue(response.data['was_accepted'])
		self.assertEqual(mock_notify.call_args[0][:2], (self.driver.id, 'ride_cancelled'))

		response = self._post(cancel_ride, self.passenger, ride_id=ride.id)
		self.assertEqual(response.status_code, 409)

	def test_current_ride_views(self, mock_notify):
		request = self.factory.get('/api/rides/passenger/current/')
		force_authenticate(request, user=self.passenger)
		self.assertFalse(get_current_ride(request).data['has_active_ride'])

		ride = self._create_ride()

		request = self.factory.get('/api/rides/passenger/current/')
		force_authenticate(request, user=self.passenger)
		response = get_current_ride(request)
		self.assertTrue(response.data['has_active_ride'])
		self.assertEqual(response.data['ride']['estimated_cost'], '0.30')

		request = self.factory.get('/api/rides/driver/current/')
		force_authenticate(request, user=self.driver)
		response = driver_current_rides(request)
		self.assertEqual([r['id'] for r in response.data['rides']], [ride.id])

	def test_staff_marks_pending_payment_paid(self, mock_notify):
		ride = self._create_ride()
		self._post(accept_ride, self.driver, ride_id=ride.id)
		self._post(complete_ride, self.driver, {'payment_received': False}, ride_id=ride.id)
		admin = User.objects.create_user(
			username='admin', password='admin1234', role='passenger', gender='male', is_staff=True
		)

		response = self._post(mark_ride_paid, admin, ride_id=ride.id)
		self.assertEqual(response.status_code, 200)
		ride.refresh_from_db()
		self.assertEqual(ride.payment_status, 'paid')

		response = self._post(mark_ride_paid, admin, ride_id=ride.id)
		self.assertEqual(response.status_code, 409)

		response = self._post(mark_ride_paid, self.passenger, ride_id=ride.id)
		self.assertEqual(response.status_code, 403)

	def test_rolled_back_transition_sends_no_event(self, mock_notify):
		ride = self._create_ride()
		mock_notify.reset_mock()

		with self.captureOnCommitCallbacks(execute=True) as callbacks:
			with self.assertRaises(RuntimeError):
				with transaction.atomic():
					ride_management.accept_ride(self.driver, ride.id)
					raise RuntimeError('storage failure after accept')

		self.assertEqual(callbacks, [])
		mock_notify.assert_not_called()
		ride.refresh_from_db()
		self.assertEqual(ride.status, 'requested')


class CleanupOldDataTests(TestCase):
	def setUp(self):
		aub = University.objects.create(
			name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800'
		)
		self.passenger = User.objects.create_user(
			username='passenger', password='pass1234', role='passenger', gender='male', university=aub
		)
		self.fields = dict(
			passenger=self.passenger,
			university=aub,
			pickup_latitude='33.895000',
			pickup_longitude='35.490000',
			distance_km='2.52',
			fuel_price='1.500',
			estimated_cost='0.30',
			passenger_share='0.30',
			driver_share='0.00',
		)

	def test_removes_old_closed_requests_but_keeps_completed(self):
		old_cancelled = RideRequest.objects.create(status='cancelled', **self.fields)
		old_completed = RideRequest.objects.create(status='completed', **self.fields)
		recent_declined = RideRequest.objects.create(status='declined', **self.fields)
		RideRequest.objects.filter(id__in=[old_cancelled.id, old_completed.id]).update(
			requested_at=timezone.now() - timedelta(days=45)
		)

		call_command('cleanup_old_data', days=30)

		remaining = set(RideRequest.objects.values_list('id', flat=True))
		self.assertEqual(remaining, {old_completed.id, recent_declined.id})

	def test_dry_run_deletes_nothing(self):
		ride = RideRequest.objects.create(status='cancelled', **self.fields)
		RideRequest.objects.filter(id=ride.id).update(requested_at=timezone.now() - timedelta(days=45))

		call_command('cleanup_old_data', days=30, dry_run=True)

		self.assertTrue(RideRequest.objects.filter(id=ride.id).exists())
