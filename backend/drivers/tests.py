from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient
from unittest.mock import patch

from accounts.models import University, User
from drivers.models import DriverProfile
from drivers.services import build_candidate, live_driver_candidates
from services.domain import Gender, PassengerConstraints, VehicleClass
from services.matching import filter_eligible_drivers


def make_driver(username, university, status='approved', gender='male', **profile_fields):
    user = User.objects.create_user(
        username=username, password='driver1234', role='driver',
        gender=gender, university=university, status=status,
    )
    defaults = {
        'car_brand': 'Toyota', 'car_model': 'Yaris', 'car_year': 2016,
        'car_color': 'grey', 'plate_number': f'P-{username}',
    }
    defaults.update(profile_fields)
    return DriverProfile.objects.create(user=user, **defaults)


@patch('drivers.services.broadcast_driver_update')
class DriverLiveStatusTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.aub = University.objects.create(
            name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800'
        )
        self.profile = make_driver('driver_one', self.aub)
        self.client.force_authenticate(user=self.profile.user)

    def test_cannot_go_live_without_location(self, mock_broadcast):
        response = self.client.put('/api/driver/live/', {'is_live': True}, format='json')

        self.assertEqual(response.status_code, 409)
        mock_broadcast.assert_not_called()

    def test_go_live_after_sharing_location(self, mock_broadcast):
        self.client.post('/api/driver/location/', {'latitude': 33.9, 'longitude': 35.48}, format='json')
        mock_broadcast.assert_not_called()

        response = self.client.put('/api/driver/live/', {'is_live': True}, format='json')

        self.assertEqual(response.status_code, 200)
        self.profile.refresh_from_db()
        self.assertTrue(self.profile.is_live)
        mock_broadcast.assert_called_once()

    def test_location_updates_are_broadcast_while_live(self, mock_broadcast):
        self.profile.is_live = True
        self.profile.current_latitude = Decimal('33.900000')
        self.profile.current_longitude = Decimal('35.480000')
        self.profile.save()

        response = self.client.post(
            '/api/driver/location/', {'latitude': 33.91, 'longitude': 35.49}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.current_latitude, Decimal('33.910000'))
        mock_broadcast.assert_called_once()

    def test_out_of_range_location_is_rejected(self, mock_broadcast):
        response = self.client.post(
            '/api/driver/location/', {'latitude': 33.9, 'longitude': 200}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_unapproved_driver_is_forbidden(self, mock_broadcast):
        pending = make_driver('driver_two', self.aub, status='pending')
        self.client.force_authenticate(user=pending.user)

        response = self.client.put('/api/driver/live/', {'is_live': True}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_passengers_cannot_use_driver_endpoints(self, mock_broadcast):
        passenger = User.objects.create_user(
            username='rider', password='rider1234', role='passenger',
            gender='female', university=self.aub, status='approved',
        )
        self.client.force_authenticate(user=passenger)

        response = self.client.get('/api/driver/profile/')

        self.assertEqual(response.status_code, 403)

    def test_profile_update(self, mock_broadcast):
        response = self.client.patch('/api/driver/profile/', {'car_color': 'blue', 'cylinders': 8}, format='json')

        self.assertEqual(response.status_code, 200)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.car_color, 'blue')
        self.assertIs(self.profile.vehicle_class, VehicleClass.EIGHT_CYLINDER)


class LiveDirectoryTests(TestCase):
    def setUp(self):
        self.aub = University.objects.create(
            name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800'
        )

    def test_only_approved_live_located_drivers_are_listed(self):
        live = make_driver(
            'live', self.aub, is_live=True, current_latitude='33.900000', current_longitude='35.480000'
        )
        make_driver('offline', self.aub, current_latitude='33.900000', current_longitude='35.480000')
        make_driver(
            'pending', self.aub, status='pending', is_live=True,
            current_latitude='33.900000', current_longitude='35.480000',
        )
        make_driver('nowhere', self.aub, is_live=True)

        candidates = live_driver_candidates()

        self.assertEqual([c.driver_id for c in candidates], [live.id])

    def test_build_candidate_snapshots_profile(self):
        profile = make_driver(
            'snap', self.aub, gender='female', cylinders=6, is_live=True,
            current_latitude='33.900000', current_longitude='35.480000',
        )

        candidate = build_candidate(DriverProfile.objects.select_related('user').get(id=profile.id))

        self.assertEqual(candidate.gender, Gender.FEMALE)
        self.assertEqual(candidate.university_id, self.aub.id)
        self.assertEqual(candidate.location.latitude, 33.9)
        self.assertIs(candidate.vehicle_class, VehicleClass.SIX_CYLINDER)

    def test_zero_cylinder_profile_is_excluded_without_breaking_the_pool(self):
        good = make_driver(
            'good', self.aub, is_live=True, current_latitude='33.900000', current_longitude='35.480000'
        )
        broken = make_driver(
            'broken', self.aub, cylinders=0, is_live=True,
            current_latitude='33.900000', current_longitude='35.480000',
        )
        constraints = PassengerConstraints(gender='male', university_id=self.aub.id, gender_preference='same')

        with self.assertLogs('services.matching.eligibility', level='WARNING') as logs:
            eligible = filter_eligible_drivers(constraints, live_driver_candidates())

        self.assertEqual([c.driver_id for c in eligible], [good.id])
        self.assertIn(f'Driver {broken.id}', logs.output[0])
