from django.test import TestCase
from rest_framework.test import APIClient


class HealthCheckTests(TestCase):

    def test_healthy_without_authentication(self):
        response = APIClient().get('/api/v1/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'healthy')
        self.assertEqual(response.data['database'], 'connected')
        self.assertEqual(response.data['channel_layer'], 'in-memory')
