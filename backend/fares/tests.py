from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from fares.models import FuelPrice
from fares.services import FuelPriceNotSetError, get_current_fuel_price, set_fuel_price
from services.exceptions import InvalidFuelPrice


class FuelPriceServiceTests(TestCase):
    def test_no_price_yet(self):
        with self.assertRaises(FuelPriceNotSetError):
            get_current_fuel_price()

    def test_latest_price_wins(self):
        set_fuel_price('1.200')
        set_fuel_price(Decimal('1.450'))

        self.assertEqual(get_current_fuel_price(), Decimal('1.450'))
        self.assertEqual(FuelPrice.objects.count(), 2)

    def test_non_positive_prices_are_rejected(self):
        for price in ('0', '-2', 'abc'):
            with self.subTest(price=price):
                with self.assertRaises(InvalidFuelPrice):
                    set_fuel_price(price)
        self.assertFalse(FuelPrice.objects.exists())


class FuelPriceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username='admin', password='admin1234', is_staff=True, role='passenger', gender='male'
        )
        self.student = User.objects.create_user(
            username='jad', password='jad12345', role='passenger', gender='male', status='approved'
        )

    def test_get_before_any_price_is_404(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.get('/api/fares/fuel-price/')

        self.assertEqual(response.status_code, 404)

    def test_admin_sets_price_and_students_read_it(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/fares/fuel-price/', {'price_per_liter': '1.50'}, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['fuel_price']['set_by'], 'admin')

        self.client.force_authenticate(user=self.student)
        response = self.client.get('/api/fares/fuel-price/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['price_per_liter'], '1.500')

    def test_zero_price_is_rejected(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/fares/fuel-price/', {'price_per_liter': '0'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(FuelPrice.objects.exists())

    def test_students_cannot_set_price(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.post('/api/fares/fuel-price/', {'price_per_liter': '1.50'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_history_is_admin_only_and_newest_first(self):
        set_fuel_price('1.100', set_by=self.admin)
        set_fuel_price('1.300', set_by=self.admin)

        self.client.force_authenticate(user=self.student)
        self.assertEqual(self.client.get('/api/fares/fuel-price/history/').status_code, 403)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/fares/fuel-price/history/')

        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['prices'][0]['price_per_liter'], '1.300')
