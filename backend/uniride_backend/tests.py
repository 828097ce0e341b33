from django.test import TestCase
from rest_framework.test import APIClient
from unittest.mock import patch


class HealthCheckTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    @patch('uniride_backend.views.redis.Redis.from_url')
    def test_healthy_when_all_services_respond(self, mock_from_url):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['services']['database'], 'healthy')
        self.assertEqual(response.data['services']['redis'], 'healthy')
        mock_from_url.return_value.ping.assert_called_once()

    @patch('uniride_backend.views.redis.Redis.from_url')
    def test_unhealthy_when_redis_is_down(self, mock_from_url):
        mock_from_url.return_value.ping.side_effect = ConnectionError("refused")

        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 503)
        self.assertTrue(response.data['services']['redis'].startswith('unhealthy'))
