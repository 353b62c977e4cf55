from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from respx import MockRouter

from blog.frontend.app import create_app as create_frontend_app
from blog.http_handler import create_app
from blog.settings import Settings


@pytest.fixture
def test_client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings), raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def frontend_client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_frontend_app(settings)) as client:
        yield client


@pytest.fixture
def api_backed_respx(respx_mock: MockRouter, test_client: TestClient) -> MockRouter:
    """Serves the frontend's API calls from the real API application."""

    def forward(request: httpx.Request) -> httpx.Response:
        headers = {}
        if "content-type" in request.headers:
            headers["content-type"] = request.headers["content-type"]
        response = test_client.request(
            request.method,
            request.url.raw_path.decode(),
            content=request.content,
            headers=headers,
        )
        return httpx.Response(
            response.status_code,
            content=response.content,
            headers={"content-type": response.headers.get("content-type", "")},
        )

    respx_mock.route(host=httpx.URL(pytest.api_url).host).mock(side_effect=forward)
    return respx_mock
