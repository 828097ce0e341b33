from django.test import SimpleTestCase

from common.utils.geo import KM_PER_DEGREE, is_valid_coordinate, planar_distance_km
from services.domain import GeoPoint, VehicleClass


class PlanarDistanceTests(SimpleTestCase):
    def test_one_degree_of_latitude(self):
        self.assertAlmostEqual(planar_distance_km(33.0, 35.0, 34.0, 35.0), KM_PER_DEGREE)

    def test_longitude_uses_same_scale_as_latitude(self):
        self.assertAlmostEqual(
            planar_distance_km(33.0, 35.0, 33.0, 36.0),
            planar_distance_km(33.0, 35.0, 34.0, 35.0),
        )

    def test_geo_point_distance_matches_helper(self):
        a, b = GeoPoint(33.9, 35.48), GeoPoint(33.8938, 35.5018)
        self.assertEqual(a.distance_to(b), planar_distance_km(33.9, 35.48, 33.8938, 35.5018))


class CoordinateValidationTests(SimpleTestCase):
    def test_ranges(self):
        self.assertTrue(is_valid_coordinate(-90, 180))
        self.assertFalse(is_valid_coordinate(90.01, 0))
        self.assertFalse(is_valid_coordinate(0, -180.5))
        self.assertFalse(is_valid_coordinate(None, 0))
        self.assertFalse(is_valid_coordinate("north", 0))

    def test_geo_point_validity(self):
        self.assertTrue(GeoPoint(33.9, 35.5).is_valid)
        self.assertFalse(GeoPoint(33.9, 200).is_valid)
        self.assertFalse(GeoPoint(True, 35.5).is_valid)


class VehicleClassTests(SimpleTestCase):
    def test_from_cylinders_bands_to_nearest_class_up(self):
        self.assertIs(VehicleClass.from_cylinders(3), VehicleClass.FOUR_CYLINDER)
        self.assertIs(VehicleClass.from_cylinders(6), VehicleClass.SIX_CYLINDER)
        self.assertIs(VehicleClass.from_cylinders(8), VehicleClass.EIGHT_CYLINDER)
        self.assertIs(VehicleClass.from_cylinders(10), VehicleClass.TWELVE_CYLINDER)

    def test_from_cylinders_rejects_non_positive(self):
        with self.assertRaises(ValueError):
            VehicleClass.from_cylinders(0)
