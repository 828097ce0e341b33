from asgiref.sync import async_to_sync
from django.test import SimpleTestCase, TestCase
from unittest.mock import AsyncMock, MagicMock, patch

from accounts.models import University, User
from drivers.models import DriverProfile
from realtime.broadcast import LIVE_DRIVERS_GROUP, broadcast_driver_update, candidate_from_payload, driver_payload
from realtime.consumers.driver_consumer import DriverConsumer
from realtime.consumers.passenger_consumer import PassengerConsumer
from realtime.notifications import notify_user_event
from services.domain import PassengerConstraints, VehicleClass
from services.matching import validate_constraints

AUB = 1
LAU = 2


def payload(driver_id, gender="female", university_id=AUB, latitude=33.9, longitude=35.48, is_live=True):
    return {
        "driver_id": driver_id,
        "user_id": driver_id + 100,
        "first_name": "Driver",
        "gender": gender,
        "university_id": university_id,
        "latitude": latitude,
        "longitude": longitude,
        "cylinders": 4,
        "car": "Toyota Yaris (grey)",
        "plate_number": "B 1",
        "is_live": is_live,
    }


class PassengerConsumerDriverUpdateTests(SimpleTestCase):
    def setUp(self):
        self.consumer = PassengerConsumer()
        self.consumer.constraints = validate_constraints(
            PassengerConstraints(gender="female", university_id=AUB, gender_preference="same")
        )
        self.consumer.visible_drivers = set()
        self.consumer.send_json = AsyncMock()

    def update(self, driver):
        async_to_sync(self.consumer.driver_update)({"type": "driver.update", "driver": driver})

    def test_eligible_driver_becomes_available(self):
        self.update(payload(1))

        message = self.consumer.send_json.call_args[0][0]
        self.assertEqual(message["type"], "driver_available")
        self.assertEqual(message["driver"]["driver_id"], 1)
        self.assertIn(1, self.consumer.visible_drivers)

    def test_going_offline_removes_visible_driver(self):
        self.update(payload(1))
        self.update(payload(1, is_live=False))

        message = self.consumer.send_json.call_args[0][0]
        self.assertEqual(message, {"type": "driver_unavailable", "driver_id": 1})
        self.assertNotIn(1, self.consumer.visible_drivers)

    def test_ineligible_drivers_are_never_sent(self):
        self.update(payload(2, gender="male"))
        self.update(payload(3, university_id=LAU))
        self.update(payload(4, is_live=False))

        self.consumer.send_json.assert_not_called()

    def test_malformed_update_hides_previously_visible_driver(self):
        self.update(payload(1))

        with self.assertLogs("realtime.consumers.passenger_consumer", level="WARNING"):
            self.update(payload(1, longitude=200))

        self.assertEqual(self.consumer.send_json.call_args[0][0]["type"], "driver_unavailable")


class DriverConsumerMessageTests(SimpleTestCase):
    def setUp(self):
        self.consumer = DriverConsumer()
        self.consumer.user_id = 5
        self.consumer.send_json = AsyncMock()

    def test_invalid_location_is_rejected(self):
        async_to_sync(self.consumer.handle_message)("update_location", {"latitude": 33.9, "longitude": 200})

        self.assertEqual(self.consumer.send_json.call_args[0][0]["type"], "error")

    def test_set_live_requires_boolean(self):
        async_to_sync(self.consumer.handle_message)("set_live", {"is_live": "yes"})

        self.assertEqual(self.consumer.send_json.call_args[0][0]["type"], "error")

    def test_unknown_message_type(self):
        async_to_sync(self.consumer.handle_message)("subscribe_nearby", {})

        self.assertIn("Unknown message type", self.consumer.send_json.call_args[0][0]["message"])


class BroadcastTests(TestCase):
    def setUp(self):
        aub = University.objects.create(name='AUB', city='Beirut', latitude='33.893800', longitude='35.501800')
        user = User.objects.create_user(
            username='hala', password='driver1234', role='driver', gender='female',
            university=aub, status='approved', first_name='Hala',
        )
        self.profile = DriverProfile.objects.create(
            user=user, car_brand='Kia', car_model='Picanto', car_year=2019, car_color='red',
            plate_number='G 777', cylinders=6, is_live=True,
            current_latitude='33.900000', current_longitude='35.480000',
        )

    def test_payload_round_trips_to_candidate(self):
        candidate = candidate_from_payload(driver_payload(self.profile))

        self.assertEqual(candidate.driver_id, self.profile.id)
        self.assertEqual(candidate.university_id, self.profile.user.university_id)
        self.assertEqual(candidate.location.latitude, 33.9)
        self.assertIs(candidate.vehicle_class, VehicleClass.SIX_CYLINDER)
        self.assertTrue(candidate.is_live)

    @patch('realtime.broadcast.get_channel_layer')
    def test_broadcast_goes_to_live_drivers_group(self, mock_get_layer):
        layer = MagicMock()
        layer.group_send = AsyncMock()
        mock_get_layer.return_value = layer

        self.assertTrue(broadcast_driver_update(self.profile))

        group, message = layer.group_send.call_args[0]
        self.assertEqual(group, LIVE_DRIVERS_GROUP)
        self.assertEqual(message["type"], "driver.update")
        self.assertEqual(message["driver"]["plate_number"], "G 777")

    @patch('realtime.notifications.get_channel_layer')
    def test_notification_failure_is_logged_not_raised(self, mock_get_layer):
        layer = MagicMock()
        layer.group_send = AsyncMock(side_effect=RuntimeError("redis down"))
        mock_get_layer.return_value = layer
        ride = MagicMock(id=3, status='accepted')

        with patch('rides.serializers.RideRequestSerializer') as mock_serializer:
            mock_serializer.return_value.data = {}
            with self.assertLogs('realtime.notifications', level='ERROR'):
                self.assertFalse(notify_user_event(7, 'ride_accepted', ride))
