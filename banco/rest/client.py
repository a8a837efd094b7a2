"""HTTP client for the remote user API."""

from typing import Dict

import requests


class UserApiClient:
    """Thin wrapper over the ``/users`` endpoints of the remote API."""

    USERS_PATH = "/users"

    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session = None):
        """
        Initialize user API client.

        Args:
            base_url: API root, e.g. "https://jsonplaceholder.typicode.com"
            timeout: Per-request timeout in seconds
            session: Optional session to reuse (a new one is created otherwise)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _url(self, user_id: int = None) -> str:
        url = f"{self.base_url}{self.USERS_PATH}"
        if user_id is not None:
            url = f"{url}/{user_id}"
        return url

    def get_all(self) -> requests.Response:
        return self.session.get(self._url(), timeout=self.timeout)

    def get_by_id(self, user_id: int) -> requests.Response:
        return self.session.get(self._url(user_id), timeout=self.timeout)

    def create(self, payload: Dict) -> requests.Response:
        return self.session.post(self._url(), json=payload, timeout=self.timeout)

    def update(self, user_id: int, payload: Dict) -> requests.Response:
        return self.session.put(self._url(user_id), json=payload, timeout=self.timeout)

    def delete(self, user_id: int) -> requests.Response:
        return self.session.delete(self._url(user_id), timeout=self.timeout)
