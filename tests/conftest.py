import pytest
import requests

from api_client import ApiClient
from config import Settings


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self._payload


class FakeSession:
    """
    Stands in for requests.Session. `responses` maps a path to either a
    FakeResponse, an exception instance, or a list of those consumed in order.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):]
        self.calls.append((path, params))

        outcome = self.responses[path]
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def settings():
    return Settings(base_url="http://api.test", token=None, timeout_seconds=5, max_retries=3)


@pytest.fixture
def make_client(settings):
    def _make(responses, token=None):
        settings.token = token
        session = FakeSession(responses)
        return ApiClient(settings=settings, session=session), session
    return _make


@pytest.fixture
def toned_milk_orders():
    return [
        {"products": [{"product_name": "Toned Milk 500ML", "quantity": 24, "category": "Milk"}]},
        {"products": [{"product_name": "Toned Milk 500ML", "quantity": 12, "category": "Milk"}]},
    ]
