"""
Thin HTTP client for the marketplace (Mirakl) order API.

The client owns no business logic. It attaches the raw API key and the
user agent to every request, turns transport failures and non-2xx responses
into application errors, and never retries.
"""

import logging

import requests

from common.exceptions import TransportError, HttpStatusError, DecodeError
from common.utils import USER_AGENT

logger = logging.getLogger(__name__)


class MiraklClient:
    """Authenticated access to one marketplace instance."""

    def __init__(self, base_url, api_key, user_agent=USER_AGENT):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.user_agent = user_agent

    def _headers(self):
        # The marketplace expects the bare key, not a "Bearer" token.
        return {
            'Authorization': self.api_key,
            'User-Agent': self.user_agent,
        }

    def url_for(self, path):
        """Joins an API path onto the base URL. Absolute URLs (continuation links) pass through."""
        if path.startswith('http://') or path.startswith('https://'):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, send, path, **kwargs):
        url = self.url_for(path)
        try:
            response = send(url, headers=self._headers(), **kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportError(url, e) from e

        # Anything outside 2xx, including an unfollowed 3xx, is a failure.
        if not 200 <= response.status_code < 300:
            raise HttpStatusError(response.status_code, response.text, url)
        return response

    # ---------------------------------------------------------------------
    # Verbs
    # ---------------------------------------------------------------------

    def get(self, path, params=None):
        logger.debug(f"GET {path} params={params}")
        return self._send(requests.get, path, params=params)

    def put(self, path):
        logger.debug(f"PUT {path}")
        return self._send(requests.put, path)

    def post(self, path, payload):
        logger.debug(f"POST {path}")
        return self._send(requests.post, path, json=payload)

    def post_multipart(self, path, files):
        """
        POSTs a multipart/form-data body.

        Args:
            path (str): API path.
            files (dict): part name -> (file name, file object or bytes, content type),
                          as accepted by `requests`.
        """
        logger.debug(f"POST (multipart) {path} parts={list(files)}")
        return self._send(requests.post, path, files=files)

    # ---------------------------------------------------------------------
    # Response helpers
    # ---------------------------------------------------------------------

    @staticmethod
    def decode_json(response, what="response body"):
        """Parses a JSON body, raising DecodeError instead of ValueError."""
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(what, e) from e

    @staticmethod
    def next_page_url(response):
        """
        Returns the continuation target of a paginated listing.

        The marketplace sends it as `Link: <url>; rel="next"`. No next link
        means the listing is exhausted.
        """
        next_link = (response.links or {}).get('next')
        if not next_link:
            return None
        return next_link.get('url') or None
