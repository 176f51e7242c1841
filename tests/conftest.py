import pytest
import os
import sys
from pathlib import Path

import httpx

# Add the application root directory to the Python path
root_dir = str(Path(__file__).parent.parent)
sys.path.insert(0, root_dir)

# Set testing environment before the app reads its settings
os.environ["LOG_DIR"] = ""

from aliexpress_offers.core.config import Settings

PRODUCT_ID = "1005006543210987"
PRODUCT_URL = f"https://www.aliexpress.com/item/{PRODUCT_ID}.html"

CREDENTIALS = {
    "appKey": "500100",
    "appSecret": "test-secret",
    "trackingId": "default",
}


class UpstreamStub:
    """
    Stand-in for the affiliate API and the product pages.

    Each upstream is a plain callable taking an httpx.Request. Every request
    seen is recorded so tests can assert on call order and count.
    """

    def __init__(self, api=None, page=None, head=None):
        self.api = api or (lambda request: httpx.Response(200, json={"error_response": {"msg": "Invalid signature"}}))
        self.page = page or (lambda request: httpx.Response(500, text="unavailable"))
        self.head = head or (lambda request: httpx.Response(200))
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "api-sg.aliexpress.com":
            return self.api(request)
        if request.method == "HEAD":
            return self.head(request)
        return self.page(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def api_requests(self, method: str):
        return [r for r in self.requests if r.url.host == "api-sg.aliexpress.com" and api_method(r) == method]


def api_method(request: httpx.Request) -> str:
    """Read the API method from either the query string or the form body."""
    if request.method == "GET":
        return request.url.params.get("method", "")
    body = httpx.QueryParams(request.content.decode())
    return body.get("method", "")


@pytest.fixture
def settings():
    return Settings(log_dir="", request_timeout=5, scrape_timeout=5)


@pytest.fixture
def upstream():
    return UpstreamStub()
