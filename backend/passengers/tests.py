from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import University, User
from drivers.models import DriverProfile
from fares.models import FuelPrice
from passengers.models import PassengerProfile
from passengers.services.info_services import get_passenger_constraints


class PassengerMatchingTestMixin:
    def setUp(self):
        self.client = APIClient()
        self.aub = University.objects.create(
            name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800'
        )
        self.lau = University.objects.create(
            name='LAU', city='Beirut', latitude='33.892900', longitude='35.478200'
        )
        self.passenger = User.objects.create_user(
            username='maya', password='maya12345', role='passenger',
            gender='female', university=self.aub, status='approved',
        )
        PassengerProfile.objects.create(user=self.passenger, gender_preference='same')
        self.client.force_authenticate(user=self.passenger)

        self.female_far = self.make_driver('hala', 'female', self.aub, '33.900000', '35.480000')
        self.female_near = self.make_driver('nour', 'female', self.aub, '33.895000', '35.500000')
        self.male = self.make_driver('ziad', 'male', self.aub, '33.896000', '35.490000')
        self.other_campus = self.make_driver('dana', 'female', self.lau, '33.893000', '35.478000')
        self.offline = self.make_driver('rita', 'female', self.aub, '33.894000', '35.501000', is_live=False)

    def make_driver(self, username, gender, university, lat, lon, is_live=True, cylinders=4):
        user = User.objects.create_user(
            username=username, password='driver1234', role='driver',
            gender=gender, university=university, status='approved',
        )
        return DriverProfile.objects.create(
            user=user, car_brand='Honda', car_model='Civic', car_year=2014, car_color='black',
            plate_number=f'P-{username}', cylinders=cylinders, is_live=is_live,
            current_latitude=lat, current_longitude=lon,
        )


class EligibleDriversTests(PassengerMatchingTestMixin, TestCase):
    def test_same_gender_same_campus_live_drivers_only(self):
        response = self.client.post('/api/passengers/eligible-drivers/', {}, format='json')

        self.assertEqual(response.status_code, 200)
        ids = {driver['id'] for driver in response.data['drivers']}
        self.assertEqual(ids, {self.female_far.id, self.female_near.id})

    def test_any_preference_includes_other_genders(self):
        self.client.patch('/api/passengers/profile/', {'gender_preference': 'any'}, format='json')

        response = self.client.post('/api/passengers/eligible-drivers/', {}, format='json')

        ids = {driver['id'] for driver in response.data['drivers']}
        self.assertEqual(ids, {self.female_far.id, self.female_near.id, self.male.id})

    def test_location_orders_by_distance(self):
        response = self.client.post(
            '/api/passengers/eligible-drivers/',
            {'latitude': 33.895, 'longitude': 35.5},
            format='json',
        )

        drivers = response.data['drivers']
        self.assertEqual([d['id'] for d in drivers], [self.female_near.id, self.female_far.id])
        self.assertEqual(drivers[0]['distance_km'], 0.0)

    def test_latitude_without_longitude_is_rejected(self):
        response = self.client.post('/api/passengers/eligible-drivers/', {'latitude': 33.9}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_corrupt_driver_location_does_not_break_listing(self):
        self.make_driver('broken', 'female', self.aub, '95.000000', '35.500000')

        with self.assertLogs('services.matching.eligibility', level='WARNING'):
            response = self.client.post('/api/passengers/eligible-drivers/', {}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 2)

    def test_drivers_cannot_list_drivers(self):
        self.client.force_authenticate(user=self.male.user)

        response = self.client.post('/api/passengers/eligible-drivers/', {}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_constraints_default_to_same_gender_without_profile(self):
        PassengerProfile.objects.filter(user=self.passenger).delete()
        passenger = User.objects.get(id=self.passenger.id)

        constraints = get_passenger_constraints(passenger)

        self.assertEqual(constraints.gender_preference, 'same')
        self.assertEqual(constraints.university_id, self.aub.id)


class TripEstimateTests(PassengerMatchingTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        FuelPrice.objects.create(price_per_liter=Decimal('1.500'))

    def test_estimate_for_eligible_driver(self):
        response = self.client.post(
            '/api/passengers/estimate/', {'driver_id': self.female_far.id}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        estimate = response.data['estimate']
        self.assertEqual(estimate['distance_km'], 2.52)
        self.assertEqual(estimate['total_cost'], '0.30')
        self.assertEqual(estimate['passenger_share'], '0.30')
        self.assertEqual(estimate['driver_share'], '0.00')

    def test_bigger_engine_costs_more(self):
        v8 = self.make_driver('sara', 'female', self.aub, '33.900000', '35.480000', cylinders=8)

        response = self.client.post('/api/passengers/estimate/', {'driver_id': v8.id}, format='json')

        self.assertEqual(response.data['estimate']['total_cost'], '0.57')

    def test_ineligible_driver_is_forbidden(self):
        response = self.client.post('/api/passengers/estimate/', {'driver_id': self.male.id}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_offline_or_unknown_driver_is_not_found(self):
        for driver_id in (self.offline.id, 99999):
            with self.subTest(driver_id=driver_id):
                response = self.client.post(
                    '/api/passengers/estimate/', {'driver_id': driver_id}, format='json'
                )
                self.assertEqual(response.status_code, 404)

    def test_missing_fuel_price_is_service_unavailable(self):
        FuelPrice.objects.all().delete()

        response = self.client.post(
            '/api/passengers/estimate/', {'driver_id': self.female_far.id}, format='json'
        )

        self.assertEqual(response.status_code, 503)
