"""
API tests for the root and health endpoints
"""
from unittest.mock import MagicMock, patch


class TestHealth:

    def test_root(self, client):
        body = client.get('/').json()

        assert body['message'] == "Jingo Jump API"
        assert body['status'] == "online"

    @patch('jingo.main.get_db_connection_with_retry')
    def test_health_connected(self, mock_get_conn, client):
        mock_get_conn.return_value = MagicMock()

        body = client.get('/health').json()

        assert body['status'] == "healthy"
        assert body['service'] == "jingo-api"
        assert body['database']['status'] == "connected"
        mock_get_conn.assert_called_once_with(max_retries=1, retry_delay=0.5)

    @patch('jingo.main.get_db_connection_with_retry')
    def test_health_degraded(self, mock_get_conn, client):
        mock_get_conn.side_effect = Exception("connection refused")

        body = client.get('/health').json()

        assert body['status'] == "degraded"
        assert body['database'] == {'status': 'disconnected', 'latency_ms': None, 'error': 'connection refused'}

    def test_health_not_rate_limited(self, client):
        response = client.get('/health')

        assert 'X-RateLimit-Limit' not in response.headers
