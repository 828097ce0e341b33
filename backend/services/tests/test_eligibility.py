from dataclasses import replace

from django.test import SimpleTestCase

from services.domain import (
    DriverCandidate,
    Gender,
    GenderPreference,
    GeoPoint,
    PassengerConstraints,
    VehicleClass,
)
from services.exceptions import InvalidCandidate, InvalidConstraint
from services.matching import filter_eligible_drivers, is_eligible, validate_candidate

AUB = 1
LAU = 2


def make_driver(driver_id, gender="female", university_id=AUB, lat=33.9, lon=35.48, is_live=True):
    return DriverCandidate(
        driver_id=driver_id,
        gender=gender,
        university_id=university_id,
        location=GeoPoint(lat, lon),
        vehicle_class=VehicleClass.FOUR_CYLINDER,
        is_live=is_live,
    )


class FilterEligibleDriversTests(SimpleTestCase):
    def setUp(self):
        self.female_same_only = PassengerConstraints(
            gender="female", university_id=AUB, gender_preference="same"
        )

    def test_same_gender_preference_keeps_only_matching_drivers(self):
        pool = [
            make_driver(1, gender="female"),
            make_driver(2, gender="male"),
            make_driver(3, gender="female"),
        ]

        eligible = filter_eligible_drivers(self.female_same_only, pool)

        self.assertEqual([d.driver_id for d in eligible], [1, 3])

    def test_any_preference_keeps_every_gender(self):
        constraints = PassengerConstraints(gender="female", university_id=AUB, gender_preference="any")
        pool = [make_driver(1, gender="female"), make_driver(2, gender="male")]

        eligible = filter_eligible_drivers(constraints, pool)

        self.assertEqual({d.driver_id for d in eligible}, {1, 2})

    def test_other_university_is_excluded_even_with_any_preference(self):
        constraints = PassengerConstraints(gender="male", university_id=AUB, gender_preference="any")
        pool = [make_driver(1, university_id=LAU), make_driver(2, university_id=AUB)]

        eligible = filter_eligible_drivers(constraints, pool)

        self.assertEqual([d.driver_id for d in eligible], [2])

    def test_offline_driver_is_excluded(self):
        pool = [make_driver(1, is_live=False), make_driver(2)]

        eligible = filter_eligible_drivers(self.female_same_only, pool)

        self.assertEqual([d.driver_id for d in eligible], [2])

    def test_malformed_driver_is_dropped_and_reported(self):
        pool = [
            make_driver(1),
            make_driver(2, lon=200),
            make_driver(3, gender="male"),
            make_driver(4),
        ]
        rejected = []

        with self.assertLogs("services.matching.eligibility", level="WARNING") as logs:
            eligible = filter_eligible_drivers(self.female_same_only, pool, on_rejected=rejected.append)

        self.assertEqual([d.driver_id for d in eligible], [1, 4])
        self.assertEqual(len(rejected), 1)
        self.assertEqual(rejected[0].driver_id, 2)
        self.assertIn("Driver 2", logs.output[0])

    def test_missing_coordinates_and_unknown_gender_are_malformed(self):
        pool = [
            make_driver(1, lat=None, lon=None),
            make_driver(2, gender="robot"),
            make_driver(3, lat=float("nan")),
        ]

        with self.assertLogs("services.matching.eligibility", level="WARNING"):
            eligible = filter_eligible_drivers(self.female_same_only, pool)

        self.assertEqual(eligible, [])

    def test_empty_pool_returns_empty_list(self):
        self.assertEqual(filter_eligible_drivers(self.female_same_only, []), [])

    def test_duplicate_driver_ids_keep_first_valid_record(self):
        pool = [
            make_driver(7, lon=500),
            make_driver(7, lat=33.91),
            make_driver(7, lat=33.95),
        ]

        with self.assertLogs("services.matching.eligibility", level="WARNING"):
            eligible = filter_eligible_drivers(self.female_same_only, pool)

        self.assertEqual(len(eligible), 1)
        self.assertEqual(eligible[0].location.latitude, 33.91)

    def test_duplicate_driver_id_result_does_not_depend_on_pool_order(self):
        pool = [
            make_driver(7, is_live=False),
            make_driver(7, is_live=True),
            make_driver(8, gender="male"),
            make_driver(9, university_id=LAU),
            make_driver(9),
        ]

        forward = filter_eligible_drivers(self.female_same_only, pool)
        backward = filter_eligible_drivers(self.female_same_only, list(reversed(pool)))

        self.assertEqual(sorted(d.driver_id for d in forward), [7, 9])
        self.assertEqual(
            sorted(d.driver_id for d in forward),
            sorted(d.driver_id for d in backward),
        )

    def test_missing_location_is_dropped_without_aborting_the_pool(self):
        pool = [
            make_driver(1),
            DriverCandidate(
                driver_id=2,
                gender="female",
                university_id=AUB,
                location=None,
                vehicle_class=VehicleClass.FOUR_CYLINDER,
            ),
            make_driver(3),
        ]
        rejected = []

        with self.assertLogs("services.matching.eligibility", level="WARNING"):
            eligible = filter_eligible_drivers(self.female_same_only, pool, on_rejected=rejected.append)

        self.assertEqual([d.driver_id for d in eligible], [1, 3])
        self.assertEqual([exc.driver_id for exc in rejected], [2])

    def test_output_is_subset_of_input_and_order_is_preserved(self):
        pool = [make_driver(i, gender="female" if i % 2 else "male") for i in range(10)]

        eligible = filter_eligible_drivers(self.female_same_only, pool)

        self.assertEqual([d.driver_id for d in eligible], [1, 3, 5, 7, 9])
        for driver in eligible:
            self.assertEqual(driver.university_id, AUB)
            self.assertEqual(driver.gender, Gender.FEMALE)
            self.assertTrue(driver.is_live)

    def test_unknown_preference_raises(self):
        constraints = PassengerConstraints(gender="female", university_id=AUB, gender_preference="nearby")

        with self.assertRaises(InvalidConstraint):
            filter_eligible_drivers(constraints, [make_driver(1)])

    def test_missing_university_raises(self):
        constraints = PassengerConstraints(gender="female", university_id=None)

        with self.assertRaises(InvalidConstraint):
            filter_eligible_drivers(constraints, [make_driver(1)])

    def test_unknown_passenger_gender_raises(self):
        constraints = PassengerConstraints(gender="", university_id=AUB)

        with self.assertRaises(InvalidConstraint):
            filter_eligible_drivers(constraints, [])


class IsEligibleTests(SimpleTestCase):
    def test_enum_and_string_values_compare_equal(self):
        constraints = PassengerConstraints(
            gender=Gender.MALE, university_id=AUB, gender_preference=GenderPreference.SAME_ONLY
        )
        candidate = validate_candidate(make_driver(1, gender="male"))

        self.assertTrue(is_eligible(constraints, candidate))

    def test_validate_candidate_rejects_out_of_range_latitude(self):
        with self.assertRaises(InvalidCandidate) as ctx:
            validate_candidate(make_driver(9, lat=-91))

        self.assertEqual(ctx.exception.driver_id, 9)

    def test_validate_candidate_bands_raw_cylinder_counts(self):
        candidate = validate_candidate(replace(make_driver(4), vehicle_class=5))

        self.assertIs(candidate.vehicle_class, VehicleClass.SIX_CYLINDER)

    def test_validate_candidate_rejects_zero_cylinders(self):
        with self.assertRaises(InvalidCandidate) as ctx:
            validate_candidate(replace(make_driver(5), vehicle_class=0))

        self.assertEqual(ctx.exception.driver_id, 5)
