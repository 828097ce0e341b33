from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from services.domain import GeoPoint, VehicleClass
from services.exceptions import (
    InvalidDistance,
    InvalidFuelPrice,
    InvalidRateTable,
    InvalidSplitPolicy,
)
from services.pricing import (
    PASSENGER_PAYS_ALL,
    SplitPolicy,
    estimate_trip_cost,
    get_rate_table,
    get_split_policy,
    round_money,
)

RATES = {
    VehicleClass.FOUR_CYLINDER: 0.08,
    VehicleClass.SIX_CYLINDER: 0.11,
    VehicleClass.EIGHT_CYLINDER: 0.15,
    VehicleClass.TWELVE_CYLINDER: 0.20,
}

HAMRA = GeoPoint(33.9000, 35.4800)
CAMPUS = GeoPoint(33.8938, 35.5018)


class EstimateTripCostTests(SimpleTestCase):
    def test_short_city_trip_in_four_cylinder_car(self):
        result = estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.FOUR_CYLINDER, 1.50, RATES)

        # sqrt((0.0062 * 111)^2 + (0.0218 * 111)^2)
        self.assertAlmostEqual(result.distance_km, 2.5158, places=3)
        self.assertAlmostEqual(result.fuel_liters, 0.20126, places=4)
        self.assertEqual(result.total_cost, Decimal("0.30"))
        self.assertEqual(result.passenger_share, Decimal("0.30"))
        self.assertEqual(result.driver_share, Decimal("0.00"))

    def test_zero_fuel_price_is_rejected(self):
        with self.assertRaises(InvalidFuelPrice):
            estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.FOUR_CYLINDER, 0, RATES)

    def test_negative_missing_and_non_numeric_prices_are_rejected(self):
        for price in (-1.5, None, "free", float("inf"), True):
            with self.subTest(price=price):
                with self.assertRaises(InvalidFuelPrice):
                    estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.FOUR_CYLINDER, price, RATES)

    def test_zero_length_trip_costs_nothing(self):
        result = estimate_trip_cost(CAMPUS, CAMPUS, VehicleClass.EIGHT_CYLINDER, 1.50, RATES)

        self.assertEqual(result.distance_km, 0.0)
        self.assertEqual(result.total_cost, Decimal("0.00"))
        self.assertEqual(result.passenger_share, Decimal("0.00"))
        self.assertEqual(result.driver_share, Decimal("0.00"))

    def test_distance_is_symmetric(self):
        there = estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.FOUR_CYLINDER, 1.5, RATES)
        back = estimate_trip_cost(CAMPUS, HAMRA, VehicleClass.FOUR_CYLINDER, 1.5, RATES)

        self.assertEqual(there.distance_km, back.distance_km)
        self.assertEqual(there.total_cost, back.total_cost)

    def test_bigger_engines_and_higher_prices_never_cost_less(self):
        far = GeoPoint(34.4367, 35.8497)
        costs = [
            estimate_trip_cost(HAMRA, far, vehicle_class, 1.20, RATES).total_cost
            for vehicle_class in VehicleClass
        ]
        self.assertEqual(costs, sorted(costs))

        cheap = estimate_trip_cost(HAMRA, far, VehicleClass.SIX_CYLINDER, 1.00, RATES)
        dear = estimate_trip_cost(HAMRA, far, VehicleClass.SIX_CYLINDER, 1.75, RATES)
        self.assertGreaterEqual(dear.total_cost, cheap.total_cost)

    def test_cost_is_non_decreasing_with_distance(self):
        previous = Decimal("0")
        for step in range(1, 20):
            destination = GeoPoint(HAMRA.latitude + step * 0.01, HAMRA.longitude)
            cost = estimate_trip_cost(HAMRA, destination, VehicleClass.FOUR_CYLINDER, 1.5, RATES).total_cost
            self.assertGreaterEqual(cost, previous)
            previous = cost

    def test_half_split_shares_add_up_to_total(self):
        far = GeoPoint(34.0, 35.7)
        result = estimate_trip_cost(
            HAMRA, far, VehicleClass.TWELVE_CYLINDER, 1.33, RATES, SplitPolicy(passenger_share=0.5)
        )

        self.assertEqual(result.passenger_share + result.driver_share, result.total_cost)
        self.assertGreaterEqual(result.driver_share, Decimal("0"))

    def test_invalid_coordinates_raise_invalid_distance(self):
        with self.assertRaises(InvalidDistance):
            estimate_trip_cost(GeoPoint(95, 35), CAMPUS, VehicleClass.FOUR_CYLINDER, 1.5, RATES)
        with self.assertRaises(InvalidDistance):
            estimate_trip_cost(HAMRA, GeoPoint(None, None), VehicleClass.FOUR_CYLINDER, 1.5, RATES)

    def test_missing_rate_raises_invalid_rate_table(self):
        with self.assertRaises(InvalidRateTable):
            estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.SIX_CYLINDER, 1.5, {VehicleClass.FOUR_CYLINDER: 0.08})

    def test_raw_cylinder_count_is_banded_to_its_class(self):
        banded = estimate_trip_cost(HAMRA, CAMPUS, 5, 1.5, RATES)
        six = estimate_trip_cost(HAMRA, CAMPUS, VehicleClass.SIX_CYLINDER, 1.5, RATES)

        self.assertEqual(banded.total_cost, six.total_cost)

    def test_zero_cylinders_raise_invalid_rate_table(self):
        with self.assertRaises(InvalidRateTable):
            estimate_trip_cost(HAMRA, CAMPUS, 0, 1.5, RATES)

    def test_default_policy_charges_passenger_everything(self):
        self.assertEqual(PASSENGER_PAYS_ALL.passenger_share, 1.0)


class RoundingAndPolicyTests(SimpleTestCase):
    def test_round_money_rounds_half_up(self):
        self.assertEqual(round_money(0.125), Decimal("0.13"))
        self.assertEqual(round_money(2.675), Decimal("2.68"))
        self.assertEqual(round_money(0.004), Decimal("0.00"))

    def test_split_policy_outside_unit_interval_is_rejected(self):
        for share in (-0.1, 1.5, "half", float("nan")):
            with self.subTest(share=share):
                with self.assertRaises(InvalidSplitPolicy):
                    SplitPolicy(passenger_share=share)


class FareSettingsTests(SimpleTestCase):
    def test_rate_table_comes_from_settings(self):
        table = get_rate_table()

        self.assertEqual(table[VehicleClass.FOUR_CYLINDER], 0.08)
        self.assertEqual(table[VehicleClass.TWELVE_CYLINDER], 0.20)

    @override_settings(UNIRIDE_FARES={"CONSUMPTION_RATES": {5: 0.1}})
    def test_unknown_cylinder_class_in_settings_is_rejected(self):
        with self.assertRaises(InvalidRateTable):
            get_rate_table()

    @override_settings(UNIRIDE_FARES={"CONSUMPTION_RATES": {4: 0.08}, "PASSENGER_SHARE": 0.75})
    def test_split_policy_comes_from_settings(self):
        self.assertEqual(get_split_policy().passenger_share, 0.75)
