import os
import sys
import unittest
import requests
from unittest.mock import patch, MagicMock

# Add project root to Python path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.exceptions import DecodeError, HttpStatusError, TransportError
from common.mirakl_client import MiraklClient
from common.utils import USER_AGENT


class TestMiraklClient(unittest.TestCase):

    def setUp(self):
        self.client = MiraklClient('https://marketplace.example.com/', 'fake-api-key')

    def test_url_for_joins_paths_onto_base_url(self):
        self.assertEqual(self.client.url_for('/api/orders'), 'https://marketplace.example.com/api/orders')
        self.assertEqual(self.client.url_for('api/orders'), 'https://marketplace.example.com/api/orders')

    def test_url_for_keeps_absolute_urls(self):
        url = 'https://marketplace.example.com/api/orders?page_token=abc'
        self.assertEqual(self.client.url_for(url), url)

    @patch('requests.get')
    def test_every_request_carries_raw_key_and_user_agent(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200)

        self.client.get('/api/orders', params={'order_state_codes': 'SHIPPING'})

        mock_get.assert_called_once_with(
            'https://marketplace.example.com/api/orders',
            headers={'Authorization': 'fake-api-key', 'User-Agent': USER_AGENT},
            params={'order_state_codes': 'SHIPPING'},
        )

    @patch('requests.put')
    def test_non_success_status_raises_http_status_error(self, mock_put):
        response = MagicMock(status_code=409, text='Conflict')
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
        mock_put.return_value = response

        with self.assertRaises(HttpStatusError) as ctx:
            self.client.put('/api/orders/A1/accept')

        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.body, 'Conflict')
        self.assertEqual(ctx.exception.url, 'https://marketplace.example.com/api/orders/A1/accept')

    @patch('requests.get')
    def test_unfollowed_redirect_status_raises_http_status_error(self, mock_get):
        """Tests that 3xx responses count as failures, not as success."""
        for status_code in (300, 304):
            with self.subTest(status_code=status_code):
                mock_get.return_value = MagicMock(status_code=status_code, text='')

                with self.assertRaises(HttpStatusError) as ctx:
                    self.client.get('/api/orders')

                self.assertEqual(ctx.exception.status_code, status_code)

    @patch('requests.post')
    def test_connection_failure_raises_transport_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("read timed out")

        with self.assertRaises(TransportError) as ctx:
            self.client.post('/api/orders/B7/tracking', {'carrier_code': 'DHL'})

        self.assertIn('/api/orders/B7/tracking', ctx.exception.url)

    def test_decode_json_wraps_value_error(self):
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")

        with self.assertRaises(DecodeError):
            MiraklClient.decode_json(response, "orders page")

    def test_next_page_url(self):
        response = MagicMock(links={'next': {'url': 'https://marketplace.example.com/api/orders?page_token=2'}})
        self.assertEqual(MiraklClient.next_page_url(response), 'https://marketplace.example.com/api/orders?page_token=2')

        self.assertIsNone(MiraklClient.next_page_url(MagicMock(links={})))
        self.assertIsNone(MiraklClient.next_page_url(MagicMock(links={'prev': {'url': 'x'}})))


if __name__ == '__main__':
    unittest.main()
